"""Simple EC2 Manager for AMI copy operations."""

from functools import lru_cache
from typing import Dict, List, Any, Optional, Set
import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError, WaiterError
from ami_copy.core.models import SnapshotInfo, SnapshotState, TagSet
from ami_copy.utils.exceptions import (
    ConfigurationError,
    CopyFailedError,
    ProvisioningError,
    RegistrationError,
)
from ami_copy.utils.logger import setup_logger


class EC2Manager:
    """Simple AWS EC2 resource manager.

    Every failure is raised as the pipeline error for the stage that made the
    call; nothing is retried here.
    """

    def __init__(self, session: boto3.Session, region: str):
        """Initialize EC2Manager."""
        self.session = session
        self.region = region
        self.ec2_client = session.client("ec2", region_name=region)
        self.logger = setup_logger(__name__, "ec2_manager.log")

    def describe_image(self, image_id: str) -> Dict[str, Any]:
        """Describe a single AMI."""
        try:
            response = self.ec2_client.describe_images(ImageIds=[image_id])
        except (ClientError, BotoCoreError) as e:
            raise ConfigurationError(
                f"Unable to describe AMI {image_id} in {self.region}: {e}"
            ) from e

        images = response.get("Images", [])
        if not images:
            raise ConfigurationError(f"AMI {image_id} not found in {self.region}")
        return images[0]

    def describe_snapshots(self, snapshot_ids: List[str]) -> List[SnapshotInfo]:
        """Describe EBS snapshots by id."""
        if not snapshot_ids:
            return []
        try:
            response = self.ec2_client.describe_snapshots(SnapshotIds=snapshot_ids)
        except (ClientError, BotoCoreError) as e:
            raise ProvisioningError(
                f"Unable to describe snapshots {', '.join(snapshot_ids)} in {self.region}: {e}"
            ) from e
        return [SnapshotInfo.from_aws_snapshot(s) for s in response.get("Snapshots", [])]

    def describe_snapshot(self, snapshot_id: str) -> SnapshotInfo:
        """Describe one EBS snapshot."""
        snapshots = self.describe_snapshots([snapshot_id])
        if not snapshots:
            raise ProvisioningError(f"Snapshot {snapshot_id} not found in {self.region}")
        return snapshots[0]

    def count_pending_snapshots(self) -> int:
        """Count snapshots owned by this account that are still pending."""
        try:
            paginator = self.ec2_client.get_paginator("describe_snapshots")
            pages = paginator.paginate(
                OwnerIds=["self"],
                Filters=[{"Name": "status", "Values": [SnapshotState.PENDING.value]}],
            )
            return sum(len(page.get("Snapshots", [])) for page in pages)
        except (ClientError, BotoCoreError) as e:
            raise ProvisioningError(
                f"Unable to count pending snapshots in {self.region}: {e}"
            ) from e

    def add_create_volume_permission(self, snapshot_id: str, account_id: str) -> None:
        """Allow another account to create volumes from (and copy) a snapshot."""
        try:
            self.ec2_client.modify_snapshot_attribute(
                SnapshotId=snapshot_id,
                Attribute="createVolumePermission",
                OperationType="add",
                UserIds=[account_id],
            )
        except (ClientError, BotoCoreError) as e:
            raise ProvisioningError(
                f"Unable to add permissions on snapshot {snapshot_id} for account {account_id}: {e}"
            ) from e
        self.logger.info(f"Permission added to snapshot {snapshot_id} for {account_id}")

    def copy_snapshot(
        self,
        source_snapshot_id: str,
        source_region: str,
        description: str,
        kms_key_id: Optional[str] = None,
    ) -> str:
        """Start an encrypted copy into this manager's region and return the new id."""
        params = {
            "SourceRegion": source_region,
            "SourceSnapshotId": source_snapshot_id,
            "Description": description,
            "Encrypted": True,
        }
        if kms_key_id:
            params["KmsKeyId"] = kms_key_id

        try:
            response = self.ec2_client.copy_snapshot(**params)
        except (ClientError, BotoCoreError) as e:
            raise ProvisioningError(
                f"Unable to copy snapshot {source_snapshot_id}: {e}"
            ) from e
        return response["SnapshotId"]

    def wait_for_snapshot(
        self, snapshot_id: str, waiter_config: Optional[Dict[str, int]] = None
    ) -> None:
        """Block on the snapshot_completed waiter."""
        params = {"SnapshotIds": [snapshot_id]}
        if waiter_config:
            params["WaiterConfig"] = waiter_config
        try:
            self.ec2_client.get_waiter("snapshot_completed").wait(**params)
        except WaiterError as e:
            raise CopyFailedError(
                snapshot_id,
                f"Failed while waiting for snapshot {snapshot_id} to complete: {e}",
            ) from e

    def register_image_parameters(self) -> Set[str]:
        """Top-level parameter names accepted by RegisterImage."""
        return _register_image_parameters()

    def register_image(self, document: Dict[str, Any], ena_support: bool = False) -> str:
        """Register an image from a descriptor document and return the new image id."""
        params = dict(document)
        if ena_support:
            params["EnaSupport"] = True
        try:
            response = self.ec2_client.register_image(**params)
        except (ClientError, BotoCoreError) as e:
            raise RegistrationError(
                f"Unable to register AMI {params.get('Name', '')} in {self.region}: {e}"
            ) from e
        return response["ImageId"]

    def create_tags(self, resource_id: str, tags: TagSet) -> None:
        """Create or overwrite tags on a resource."""
        try:
            self.ec2_client.create_tags(Resources=[resource_id], Tags=tags.to_aws_tags())
        except (ClientError, BotoCoreError) as e:
            raise RegistrationError(
                f"Unable to add tags to {resource_id} in {self.region}: {e}"
            ) from e


@lru_cache(maxsize=1)
def _register_image_parameters() -> Set[str]:
    # Read from the bundled service model so no client or credentials are needed
    service_model = botocore.session.get_session().get_service_model("ec2")
    return set(service_model.operation_model("RegisterImage").input_shape.members)
