"""Simple data models for AWS AMI management."""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Any

from .tags import TagSet


@dataclass(frozen=True)
class ImageDescriptor:
    """Read-only view over a describe_images document."""
    document: Dict[str, Any] = field(default_factory=dict)

    @property
    def image_id(self) -> str:
        return self.document.get("ImageId", "")

    @property
    def name(self) -> str:
        return self.document.get("Name", "")

    @property
    def block_device_mappings(self) -> List[Dict[str, Any]]:
        return self.document.get("BlockDeviceMappings", [])

    @property
    def snapshot_ids(self) -> List[str]:
        """Distinct snapshot ids referenced by EBS device mappings, in document order."""
        ids = [
            mapping.get("Ebs", {}).get("SnapshotId") for mapping in self.block_device_mappings
        ]
        return list(dict.fromkeys(i for i in ids if i))

    @property
    def tags(self) -> TagSet:
        return TagSet.from_aws_tags(self.document.get("Tags"))

    def to_document(self) -> Dict[str, Any]:
        """Deep copy of the underlying document, safe to rewrite."""
        return copy.deepcopy(self.document)

    @classmethod
    def from_aws_image(cls, image: Dict[str, Any]) -> "ImageDescriptor":
        """Create ImageDescriptor from AWS image data."""
        return cls(document=copy.deepcopy(image))
