# utils/__init__.py

from .config import ConfigManager
from .session import SessionManager
from .logger import setup_logger, set_default_level
from .exceptions import (
    AmiCopyError,
    ConfigurationError,
    AuthorizationError,
    UnsupportedKeyError,
    ProvisioningError,
    CopyFailedError,
    RegistrationError,
    WaitTimeoutError,
    ValidationRules,
)

__all__ = [
    "ConfigManager",
    "SessionManager",
    "setup_logger",
    "set_default_level",
    "AmiCopyError",
    "ConfigurationError",
    "AuthorizationError",
    "UnsupportedKeyError",
    "ProvisioningError",
    "CopyFailedError",
    "RegistrationError",
    "WaitTimeoutError",
    "ValidationRules",
]
