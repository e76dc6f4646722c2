"""Exception classes and validation utilities for AMI copy operations.

Every error raised by the copy pipeline is fatal. The pipeline never retries,
so each class names the stage that failed rather than a recovery strategy.
"""

import re


class AmiCopyError(Exception):
    """Base class for all AMI copy failures."""

    pass


class ConfigurationError(AmiCopyError):
    """Missing or unresolvable region, profile, key or required argument."""

    pass


class AuthorizationError(AmiCopyError):
    """Identity lookup, key inspection or KMS grant failure."""

    pass


class UnsupportedKeyError(AmiCopyError):
    """A source snapshot is encrypted under an AWS managed key."""

    pass


class ProvisioningError(AmiCopyError):
    """Snapshot permission change or copy initiation failure."""

    pass


class CopyFailedError(AmiCopyError):
    """A destination snapshot copy ended in the error state."""

    def __init__(self, snapshot_id: str, message: str):
        super().__init__(message)
        self.snapshot_id = snapshot_id


class RegistrationError(AmiCopyError):
    """Image registration or tag application failure."""

    pass


class WaitTimeoutError(AmiCopyError):
    """A polling loop exceeded its configured timeout."""

    pass


class ValidationRules:
    """Validation utilities for AWS resources."""

    @staticmethod
    def validate_aws_account_id(account_id: str) -> bool:
        """Validate AWS account ID format (12 digits)."""
        return bool(re.match(r"^\d{12}$", account_id))
