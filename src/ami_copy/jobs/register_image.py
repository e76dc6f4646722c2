#!/usr/bin/env python3
"""
Register Image Job

Rewrites the source descriptor to point at the copied snapshots, registers it
in the destination and optionally replicates tags.
"""

import time
from typing import Callable, Dict, List, Optional, Any
from .base import BaseJob
from ami_copy.core.aws import EC2Manager
from ami_copy.core.models import CopyJob, ImageDescriptor, RunContext, TagSet
from ami_copy.core.processors import build_image_name, prepare_registration_document


class RegisterImageJob(BaseJob):
    """Job to register the copied AMI in the destination account"""

    def __init__(
        self,
        config_manager=None,
        correlation_id: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(config_manager, job_name="register_image", correlation_id=correlation_id)
        self.clock = clock

    def execute(
        self,
        context: RunContext,
        descriptor: ImageDescriptor,
        copy_jobs: List[CopyJob],
    ) -> Dict[str, Any]:
        """
        Register the new image and copy tags when requested.

        Returns:
            Dictionary with the new image id, its name and the tagged resources
        """
        options = context.options
        destination_ec2 = self.ec2(context.destination_session, context.destination_region)

        name = build_image_name(descriptor.name, options.image_name, self.clock)
        document = prepare_registration_document(
            descriptor,
            copy_jobs,
            name,
            allowed_parameters=destination_ec2.register_image_parameters(),
        )
        self.log(f"Registering AMI '{name}' in {context.destination_region}", "debug")

        image_id = destination_ec2.register_image(document, ena_support=options.ena_support)
        self.log(f"AMI created successfully in the destination account: {image_id}")

        tagged = []
        if options.copy_tags:
            tagged = self.copy_tags(context, descriptor, copy_jobs, image_id, destination_ec2)

        return {"image_id": image_id, "name": name, "tagged_resources": tagged}

    def copy_tags(
        self,
        context: RunContext,
        descriptor: ImageDescriptor,
        copy_jobs: List[CopyJob],
        image_id: str,
        destination_ec2: EC2Manager,
    ) -> List[str]:
        """Replicate snapshot and image tags to their destination counterparts."""
        override = context.options.env_tag_value
        env_key = self.config_manager.get_env_tag_key()
        source_ec2 = self.ec2(context.source_view_session, context.source_region)

        tagged = []
        for job in copy_jobs:
            tags = source_ec2.describe_snapshot(job.source_snapshot_id).tags
            if self._apply_tags(destination_ec2, job.destination_snapshot_id, tags, env_key, override):
                self.log(f"Tags added successfully for snapshot {job.destination_snapshot_id}")
                tagged.append(job.destination_snapshot_id)

        if self._apply_tags(destination_ec2, image_id, descriptor.tags, env_key, override):
            self.log(f"Tags added successfully for AMI {image_id}")
            tagged.append(image_id)

        return tagged

    @staticmethod
    def _apply_tags(
        destination_ec2: EC2Manager,
        resource_id: str,
        tags: TagSet,
        env_key: str,
        override: Optional[str],
    ) -> bool:
        # Resources without tags get nothing, not even the override
        if not tags:
            return False
        destination_ec2.create_tags(resource_id, tags.with_override(env_key, override))
        return True
