"""Simple KMS Manager for key inspection and cross-account grants."""

from typing import Dict, List, Any
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from ami_copy.core.constants import AWS_KEY_MANAGER
from ami_copy.utils.exceptions import AuthorizationError
from ami_copy.utils.logger import setup_logger


class KMSManager:
    """Simple AWS KMS key manager."""

    def __init__(self, session: boto3.Session, region: str):
        """Initialize KMSManager."""
        self.session = session
        self.region = region
        self.kms_client = session.client("kms", region_name=region)
        self.logger = setup_logger(__name__, "kms_manager.log")

    def describe_key(self, key_id: str) -> Dict[str, Any]:
        """Return the KeyMetadata for a key."""
        try:
            return self.kms_client.describe_key(KeyId=key_id)["KeyMetadata"]
        except (ClientError, BotoCoreError) as e:
            raise AuthorizationError(
                f"Unable to retrieve key information for {key_id} in {self.region}: {e}"
            ) from e

    def is_aws_managed(self, key_id: str) -> bool:
        return self.describe_key(key_id).get("KeyManager") == AWS_KEY_MANAGER

    def is_enabled(self, key_id: str) -> bool:
        return bool(self.describe_key(key_id).get("Enabled"))

    def create_grant(
        self, key_id: str, grantee_principal: str, operations: List[str]
    ) -> str:
        """Create a grant on a key and return the grant id."""
        try:
            response = self.kms_client.create_grant(
                KeyId=key_id,
                GranteePrincipal=grantee_principal,
                Operations=operations,
            )
        except (ClientError, BotoCoreError) as e:
            raise AuthorizationError(
                f"Unable to create a KMS grant on {key_id} for {grantee_principal}: {e}"
            ) from e
        return response.get("GrantId", "")
