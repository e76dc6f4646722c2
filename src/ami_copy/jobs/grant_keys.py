#!/usr/bin/env python3
"""
Grant Keys Job

Grants the destination account use of the customer managed KMS keys that
encrypt the source image's snapshots.
"""

from typing import List, Optional
from .base import BaseJob
from ami_copy.core.constants import GRANT_OPERATIONS
from ami_copy.core.models import ImageDescriptor, RunContext
from ami_copy.utils.exceptions import UnsupportedKeyError


class GrantKeysJob(BaseJob):
    """Job to create cross-account KMS grants for encrypted source snapshots"""

    def __init__(self, config_manager=None, correlation_id: Optional[str] = None):
        super().__init__(config_manager, job_name="grant_keys", correlation_id=correlation_id)

    def execute(self, context: RunContext, descriptor: ImageDescriptor) -> List[str]:
        """Create one grant per distinct customer managed key.

        Returns:
            The key ids a grant was created for, in order of first use
        """
        if context.is_shared_source:
            self.log("Shared source image: skipping KMS key inspection and grants")
            return []

        key_ids = self.find_key_ids(context, descriptor)
        if not key_ids:
            self.log("No encrypted EBS Volumes were found in the source AMI")
            return []

        self.log(f"KMS key(s) used on source AMI: {', '.join(key_ids)}")
        self.check_keys(context, key_ids)

        kms = self.kms(context.source_session, context.source_region)
        for key_id in key_ids:
            grant_id = kms.create_grant(
                key_id, context.destination_principal, GRANT_OPERATIONS
            )
            self.log(f"Grant created for: {key_id} ({grant_id})")

        return key_ids

    def find_key_ids(self, context: RunContext, descriptor: ImageDescriptor) -> List[str]:
        """Distinct KMS key ids of the encrypted snapshots referenced by the image."""
        snapshot_ids = descriptor.snapshot_ids
        self.log(f"Snapshots found: {', '.join(snapshot_ids) or 'none'}")

        ec2 = self.ec2(context.source_view_session, context.source_region)
        snapshots = ec2.describe_snapshots(snapshot_ids)
        key_ids = [s.kms_key_id for s in snapshots if s.encrypted and s.kms_key_id]
        return list(dict.fromkeys(key_ids))

    def check_keys(self, context: RunContext, key_ids: List[str]) -> None:
        """Reject AWS managed keys before any grant is issued."""
        kms = self.kms(context.source_session, context.source_region)
        for key_id in key_ids:
            if kms.is_aws_managed(key_id):
                raise UnsupportedKeyError(
                    f"The default AWS managed key {key_id} is used by a source snapshot; "
                    "it cannot be shared with another account"
                )
