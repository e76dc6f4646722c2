#!/usr/bin/env python3
"""
utils/session.py

Session management utilities for AWS interactions.

Provides functions and classes to create profile sessions, look up the default
region configured for a profile and resolve the account behind a session.
"""

import boto3
from typing import Optional
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound
from .exceptions import AuthorizationError, ConfigurationError
from .logger import setup_logger

logger = setup_logger(__name__, "session.log")


class SessionManager:
    """Manages AWS sessions built from named CLI profiles."""

    @classmethod
    def get_profile_session(
        cls, profile: str, region: Optional[str] = None
    ) -> boto3.Session:
        """Create a boto3 Session for a named profile."""
        try:
            return boto3.Session(profile_name=profile, region_name=region)
        except ProfileNotFound as e:
            raise ConfigurationError(f"AWS profile '{profile}' not found: {e}") from e

    @classmethod
    def get_profile_region(cls, profile: str) -> Optional[str]:
        """Return the default region configured for a profile, if any."""
        return cls.get_profile_session(profile).region_name

    @classmethod
    def resolve_region(
        cls, profile: str, region: Optional[str], side: str = "source"
    ) -> str:
        """Use the explicit region or fall back to the profile's configured default."""
        if region:
            return region

        configured = cls.get_profile_region(profile)
        if not configured:
            raise ConfigurationError(
                f"Unable to determine the {side} region: none supplied and "
                f"profile '{profile}' has no default region"
            )
        logger.debug(f"Using {side} region {configured} from profile {profile}")
        return configured

    @classmethod
    def get_account_id(cls, session: boto3.Session, side: str = "source") -> str:
        """Return the account id owning the session's credentials."""
        try:
            identity = session.client("sts").get_caller_identity()
            return identity["Account"]
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            raise AuthorizationError(
                f"Unable to get the {side} account ID: {error_code} - {e}"
            ) from e
        except BotoCoreError as e:
            raise AuthorizationError(
                f"Unable to get the {side} account ID: {e}"
            ) from e
