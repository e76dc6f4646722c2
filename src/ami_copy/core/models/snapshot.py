"""Simple data models for AWS EBS snapshot management."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any, Dict

from .tags import TagSet


class SnapshotState(Enum):
    """EBS Snapshot states."""
    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


def parse_progress(progress: Optional[str]) -> int:
    """Turn an EC2 progress string such as '45%' into an int."""
    if not progress:
        return 0
    try:
        return int(str(progress).strip().rstrip("%") or 0)
    except ValueError:
        return 0


@dataclass
class SnapshotInfo:
    """Simple snapshot information model."""
    snapshot_id: str
    state: str
    progress: int = 0
    encrypted: bool = False
    kms_key_id: Optional[str] = None
    description: str = ""
    tags: TagSet = field(default_factory=TagSet)

    @property
    def is_error(self) -> bool:
        return self.state == SnapshotState.ERROR.value

    @classmethod
    def from_aws_snapshot(cls, snapshot: Dict[str, Any]) -> "SnapshotInfo":
        """Create SnapshotInfo from AWS snapshot data."""
        return cls(
            snapshot_id=snapshot["SnapshotId"],
            state=snapshot.get("State", SnapshotState.PENDING.value),
            progress=parse_progress(snapshot.get("Progress")),
            encrypted=snapshot.get("Encrypted", False),
            kms_key_id=snapshot.get("KmsKeyId"),
            description=snapshot.get("Description", ""),
            tags=TagSet.from_aws_tags(snapshot.get("Tags")),
        )


@dataclass
class CopyJob:
    """One in-flight snapshot copy, source id paired with destination id."""
    source_snapshot_id: str
    destination_snapshot_id: str
    progress: int = 0
    state: str = SnapshotState.PENDING.value

    @property
    def is_done(self) -> bool:
        return self.progress >= 100 or self.state == SnapshotState.COMPLETED.value

    def update(self, info: SnapshotInfo) -> None:
        self.progress = info.progress
        self.state = info.state
