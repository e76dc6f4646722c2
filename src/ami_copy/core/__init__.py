"""Core AMI Copy Module."""

from .aws import EC2Manager, KMSManager
from .models import (
    ImageDescriptor,
    SnapshotInfo,
    CopyJob,
    TagSet,
    SnapshotState,
    ProfileSource,
    SharedAccountSource,
    CopyOptions,
    RunContext,
)
from .processors import build_image_name, prepare_registration_document, poll_until

__all__ = [
    # AWS Managers
    "EC2Manager",
    "KMSManager",
    # Models
    "ImageDescriptor",
    "SnapshotInfo",
    "CopyJob",
    "TagSet",
    "ProfileSource",
    "SharedAccountSource",
    "CopyOptions",
    "RunContext",
    # Enums
    "SnapshotState",
    # Processors
    "build_image_name",
    "prepare_registration_document",
    "poll_until",
]
