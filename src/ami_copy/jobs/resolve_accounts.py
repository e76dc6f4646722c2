#!/usr/bin/env python3
"""
Resolve Accounts Job

Works out the source and destination accounts, regions and sessions for a run
and validates the optional destination KMS key.
"""

from typing import Optional
from .base import BaseJob
from ami_copy.core.models import (
    CopyOptions,
    ProfileSource,
    RunContext,
    SharedAccountSource,
    SourceSpec,
)
from ami_copy.utils.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ValidationRules,
)
from ami_copy.utils.session import SessionManager


class ResolveAccountsJob(BaseJob):
    """Job to build the RunContext for one image copy"""

    def __init__(self, config_manager=None, correlation_id: Optional[str] = None):
        super().__init__(config_manager, job_name="resolve_accounts", correlation_id=correlation_id)

    def execute(
        self,
        source: SourceSpec,
        destination_profile: str,
        options: CopyOptions,
        source_region: Optional[str] = None,
        destination_region: Optional[str] = None,
    ) -> RunContext:
        """Resolve regions and account ids for both sides of the copy."""
        destination_region = SessionManager.resolve_region(
            destination_profile, destination_region, side="destination"
        )

        if isinstance(source, ProfileSource):
            source_region = SessionManager.resolve_region(
                source.profile, source_region, side="source"
            )
            source_session = self.create_aws_session(source.profile, source_region)
            source_account_id = SessionManager.get_account_id(source_session, side="source")
        elif isinstance(source, SharedAccountSource):
            if not ValidationRules.validate_aws_account_id(source.account_id):
                raise ConfigurationError(
                    f"Invalid source account ID: {source.account_id}. Must be 12 digits."
                )
            # No source profile to ask, the image is read from the destination side
            source_region = source_region or destination_region
            source_session = None
            source_account_id = source.account_id
        else:
            raise ConfigurationError(f"Unsupported source specification: {source!r}")

        self.log(f"Source region: {source_region}")
        self.log(f"Destination region: {destination_region}")

        destination_session = self.create_aws_session(destination_profile, destination_region)
        destination_account_id = SessionManager.get_account_id(
            destination_session, side="destination"
        )
        self.log(f"Source account ID: {source_account_id}")
        self.log(f"Destination account ID: {destination_account_id}")

        context = RunContext(
            source=source,
            destination_profile=destination_profile,
            source_account_id=source_account_id,
            destination_account_id=destination_account_id,
            source_region=source_region,
            destination_region=destination_region,
            destination_session=destination_session,
            options=options,
            source_session=source_session,
        )

        if context.is_shared_source:
            self.log(
                f"Source account {source_account_id} given without a profile: "
                "key grants and snapshot permissions must already be in place",
                "warning",
            )
            if options.copy_tags:
                self.log(
                    "Tags of resources owned by another account are not visible to the "
                    f"destination account: nothing from {source_account_id} will be tagged",
                    "warning",
                )

        if options.kms_key_id:
            self.validate_destination_key(context)

        return context

    def validate_destination_key(self, context: RunContext) -> None:
        """Check the destination KMS key exists in the destination region and is enabled."""
        key_id = context.options.kms_key_id
        kms = self.kms(context.destination_session, context.destination_region)
        try:
            enabled = kms.is_enabled(key_id)
        except AuthorizationError as e:
            raise ConfigurationError(
                f"KMS Key {key_id} non existent, in the wrong region, or not enabled: {e}"
            ) from e

        if not enabled:
            raise ConfigurationError(
                f"KMS Key {key_id} non existent, in the wrong region, or not enabled"
            )
        self.log(f"Validated destination KMS Key: {key_id}")
