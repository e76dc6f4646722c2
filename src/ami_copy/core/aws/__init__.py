"""AWS core modules."""

from .ec2 import EC2Manager
from .kms import KMSManager

__all__ = [
    "EC2Manager",
    "KMSManager",
]
