#!/usr/bin/env python3
"""
Copy AMI Job

Runs the full copy of one AMI from a source account/region to a destination
account/region:

1. resolve accounts, regions and the destination key
2. grant the destination account use of the source KMS keys
3. share and copy every snapshot, throttled on pending copies
4. wait for every copy to complete
5. register the rewritten image and replicate tags

Every stage failure is fatal. Grants, snapshot permissions and copies already
issued are left in place when a later stage fails.
"""

import time
from typing import Any, Callable, Dict, Optional
from .base import BaseJob
from .resolve_accounts import ResolveAccountsJob
from .grant_keys import GrantKeysJob
from .copy_snapshots import CopySnapshotsJob
from .wait_for_copies import WaitForCopiesJob
from .register_image import RegisterImageJob
from ami_copy.core.models import CopyOptions, ImageDescriptor, RunContext, SourceSpec
from ami_copy.core.processors import build_image_name


class CopyAMIJob(BaseJob):
    """Job to copy an AMI and its snapshots to another account"""

    def __init__(self, config_manager=None, clock: Callable[[], float] = time.time):
        super().__init__(config_manager, job_name="copy_ami")
        self.clock = clock
        stage_args = {"config_manager": self.config_manager, "correlation_id": self.correlation_id}
        self.resolver = ResolveAccountsJob(**stage_args)
        self.key_granter = GrantKeysJob(**stage_args)
        self.copier = CopySnapshotsJob(**stage_args)
        self.waiter = WaitForCopiesJob(**stage_args)
        self.registrar = RegisterImageJob(clock=clock, **stage_args)

    def execute(
        self,
        source: SourceSpec,
        destination_profile: str,
        options: CopyOptions,
        source_region: Optional[str] = None,
        destination_region: Optional[str] = None,
        dry_run: bool = False,
    ) -> Dict[str, Any]:
        """
        Copy the AMI described by `options`.

        Returns:
            Dictionary with the new image id and the snapshot id mapping, or the
            planned work when `dry_run` is set
        """
        self.log(f"Starting copy of {options.image_id}")
        settings = self.config_manager.get_copy_config()
        self.log(f"Copy settings: {settings}", "debug")

        context = self.resolver.execute(
            source=source,
            destination_profile=destination_profile,
            options=options,
            source_region=source_region,
            destination_region=destination_region,
        )
        descriptor = self.describe_source_image(context)

        if dry_run:
            return self.plan(context, descriptor)

        key_ids = self.key_granter.execute(context, descriptor)
        copy_jobs = self.copier.execute(context, descriptor)
        self.waiter.execute(context, copy_jobs)
        registration = self.registrar.execute(context, descriptor, copy_jobs)

        snapshots = [
            {"source": job.source_snapshot_id, "destination": job.destination_snapshot_id}
            for job in copy_jobs
        ]
        self.log(f"Copy of {options.image_id} finished as {registration['image_id']}")
        return {
            "status": "success",
            "message": f"AMI {options.image_id} copied as {registration['image_id']}",
            "source_image_id": options.image_id,
            "image_id": registration["image_id"],
            "name": registration["name"],
            "destination_account_id": context.destination_account_id,
            "destination_region": context.destination_region,
            "grants": key_ids,
            "snapshots": snapshots,
            "tagged_resources": registration["tagged_resources"],
        }

    def describe_source_image(self, context: RunContext) -> ImageDescriptor:
        """Fetch the one descriptor this run works from."""
        ec2 = self.ec2(context.source_view_session, context.source_region)
        descriptor = ImageDescriptor.from_aws_image(ec2.describe_image(context.options.image_id))
        self.log(
            f"Source AMI {descriptor.image_id} '{descriptor.name}' references "
            f"{len(descriptor.snapshot_ids)} snapshot(s)"
        )
        return descriptor

    def plan(self, context: RunContext, descriptor: ImageDescriptor) -> Dict[str, Any]:
        """Report the work a real run would do without changing anything."""
        key_ids = []
        if not context.is_shared_source:
            key_ids = self.key_granter.find_key_ids(context, descriptor)
            self.key_granter.check_keys(context, key_ids)

        name = build_image_name(descriptor.name, context.options.image_name, self.clock)
        return {
            "status": "success",
            "message": f"DRY RUN: Would copy {len(descriptor.snapshot_ids)} snapshot(s) "
            f"and register '{name}' in {context.destination_account_id}/{context.destination_region}",
            "source_image_id": descriptor.image_id,
            "name": name,
            "snapshots": descriptor.snapshot_ids,
            "grants": key_ids,
        }
