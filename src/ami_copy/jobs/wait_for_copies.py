#!/usr/bin/env python3
"""
Wait For Copies Job

Polls each snapshot copy until it completes, failing on the first copy that
reports an error.
"""

import time
from typing import List, Optional
from .base import BaseJob
from ami_copy.core.aws import EC2Manager
from ami_copy.core.models import CopyJob, RunContext, SnapshotInfo
from ami_copy.core.processors import poll_until
from ami_copy.utils.exceptions import CopyFailedError


class WaitForCopiesJob(BaseJob):
    """Job to wait for every initiated snapshot copy to finish"""

    def __init__(self, config_manager=None, correlation_id: Optional[str] = None):
        super().__init__(config_manager, job_name="wait_for_copies", correlation_id=correlation_id)

    def execute(self, context: RunContext, copy_jobs: List[CopyJob]) -> List[CopyJob]:
        """Wait for the copies in the order they were started."""
        if not copy_jobs:
            return copy_jobs

        # Give describe_snapshots a moment to see the new snapshots
        time.sleep(self.config_manager.get_consistency_delay())

        self.log("Waiting for all EBS Snapshot copies to complete. It may take a few minutes.")
        destination_ec2 = self.ec2(context.destination_session, context.destination_region)
        for job in copy_jobs:
            self.wait_for_copy(destination_ec2, job)

        self.log("EBS Snapshot copies completed")
        return copy_jobs

    def wait_for_copy(self, destination_ec2: EC2Manager, job: CopyJob) -> CopyJob:
        """Poll one copy to 100% then confirm with the snapshot_completed waiter."""

        def fetch() -> SnapshotInfo:
            info = destination_ec2.describe_snapshot(job.destination_snapshot_id)
            job.update(info)
            return info

        def check(info: SnapshotInfo) -> None:
            if info.is_error:
                raise CopyFailedError(
                    job.destination_snapshot_id,
                    f"Error copying snapshot {job.source_snapshot_id} to {job.destination_snapshot_id}",
                )
            self.log(f"Snapshot progress: {job.destination_snapshot_id} {info.progress}%")

        poll_until(
            fetch=fetch,
            until=lambda info: job.is_done,
            interval=self.config_manager.get_progress_poll_interval(),
            check=check,
            timeout=self.config_manager.get_wait_timeout(),
            description=f"snapshot {job.destination_snapshot_id} to complete",
        )

        destination_ec2.wait_for_snapshot(
            job.destination_snapshot_id, self.config_manager.get_waiter_config()
        )
        self.log(f"Snapshot {job.source_snapshot_id} copied as {job.destination_snapshot_id}")
        return job
