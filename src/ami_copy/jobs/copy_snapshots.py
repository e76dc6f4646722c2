#!/usr/bin/env python3
"""
Copy Snapshots Job

Shares each source snapshot with the destination account and starts an
encrypted copy into the destination region, holding back new copies while too
many destination snapshots are still pending.
"""

from typing import List, Optional
from .base import BaseJob
from ami_copy.core.aws import EC2Manager
from ami_copy.core.constants import COPY_DESCRIPTION_TEMPLATE
from ami_copy.core.models import CopyJob, ImageDescriptor, RunContext
from ami_copy.core.processors import poll_until


class CopySnapshotsJob(BaseJob):
    """Job to initiate snapshot copies in document order"""

    def __init__(self, config_manager=None, correlation_id: Optional[str] = None):
        super().__init__(config_manager, job_name="copy_snapshots", correlation_id=correlation_id)

    def execute(self, context: RunContext, descriptor: ImageDescriptor) -> List[CopyJob]:
        """
        Start one copy per snapshot referenced by the image.

        Args:
            context: Resolved run context
            descriptor: Source image descriptor

        Returns:
            Copy jobs in the order the snapshots appear in the descriptor
        """
        destination_ec2 = self.ec2(context.destination_session, context.destination_region)
        source_ec2 = None
        if not context.is_shared_source:
            source_ec2 = self.ec2(context.source_session, context.source_region)

        copy_jobs = []
        for snapshot_id in descriptor.snapshot_ids:
            self.wait_for_capacity(destination_ec2)

            if source_ec2 is not None:
                source_ec2.add_create_volume_permission(
                    snapshot_id, context.destination_account_id
                )
                self.log(f"Permission added to Snapshot: {snapshot_id}")

            self.log(f"Copying Snapshot: {snapshot_id}")
            destination_id = destination_ec2.copy_snapshot(
                source_snapshot_id=snapshot_id,
                source_region=context.source_region,
                description=COPY_DESCRIPTION_TEMPLATE.format(
                    snapshot_id=snapshot_id,
                    account_id=context.source_account_id,
                    region=context.source_region,
                ),
                kms_key_id=context.options.kms_key_id,
            )
            copy_jobs.append(CopyJob(snapshot_id, destination_id))
            self.log(f"Snapshot {snapshot_id} copy started as {destination_id}")

        return copy_jobs

    def wait_for_capacity(self, destination_ec2: EC2Manager) -> int:
        """Block until fewer than the configured ceiling of snapshots are pending."""
        ceiling = self.config_manager.get_max_pending_snapshots()
        return poll_until(
            fetch=destination_ec2.count_pending_snapshots,
            until=lambda pending: pending < ceiling,
            interval=self.config_manager.get_admission_poll_interval(),
            on_wait=lambda pending: self.log(
                f"Too many concurrent Snapshots ({pending} pending), waiting..."
            ),
            description="pending snapshot count to drop",
        )
