"""Run-scoped models: where the image comes from, what to do with it, and the resolved accounts."""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class ProfileSource:
    """Source account reached through a local CLI profile."""
    profile: str


@dataclass(frozen=True)
class SharedAccountSource:
    """Source account known only by id; the image and snapshots are already shared."""
    account_id: str


SourceSpec = Union[ProfileSource, SharedAccountSource]


@dataclass(frozen=True)
class CopyOptions:
    """Caller choices for one image copy."""
    image_id: str
    image_name: Optional[str] = None
    ena_support: bool = False
    copy_tags: bool = False
    kms_key_id: Optional[str] = None
    env_tag_value: Optional[str] = None


@dataclass
class RunContext:
    """Resolved accounts, regions and sessions threaded through every stage."""
    source: SourceSpec
    destination_profile: str
    source_account_id: str
    destination_account_id: str
    source_region: str
    destination_region: str
    destination_session: Any
    options: CopyOptions
    source_session: Optional[Any] = None

    @property
    def is_shared_source(self) -> bool:
        return isinstance(self.source, SharedAccountSource)

    @property
    def source_view_session(self) -> Any:
        """Session used for source-side reads.

        Shared sources have no credentials of their own, so the destination
        account's visibility into the shared resources is used instead.
        """
        if self.is_shared_source:
            return self.destination_session
        return self.source_session

    @property
    def destination_principal(self) -> str:
        return f"arn:aws:iam::{self.destination_account_id}:root"
