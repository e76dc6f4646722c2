"""AMI Copy Jobs package."""

from .base import BaseJob
from .resolve_accounts import ResolveAccountsJob
from .grant_keys import GrantKeysJob
from .copy_snapshots import CopySnapshotsJob
from .wait_for_copies import WaitForCopiesJob
from .register_image import RegisterImageJob
from .copy_ami import CopyAMIJob

__all__ = [
    "BaseJob",
    "ResolveAccountsJob",
    "GrantKeysJob",
    "CopySnapshotsJob",
    "WaitForCopiesJob",
    "RegisterImageJob",
    "CopyAMIJob",
]
