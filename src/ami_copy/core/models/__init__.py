"""Simple data models for AMI copy runs."""

# Snapshot models
from .snapshot import (
    SnapshotState,
    SnapshotInfo,
    CopyJob,
    parse_progress,
)

# AMI models
from .ami import (
    ImageDescriptor,
)

# Tag models
from .tags import (
    TagSet,
)

# Run models
from .context import (
    ProfileSource,
    SharedAccountSource,
    SourceSpec,
    CopyOptions,
    RunContext,
)

__all__ = [
    # Snapshot models
    "SnapshotState",
    "SnapshotInfo",
    "CopyJob",
    "parse_progress",
    # AMI models
    "ImageDescriptor",
    # Tag models
    "TagSet",
    # Run models
    "ProfileSource",
    "SharedAccountSource",
    "SourceSpec",
    "CopyOptions",
    "RunContext",
]
