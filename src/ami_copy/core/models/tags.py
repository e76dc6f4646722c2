"""Simple data models for AWS resource tag management."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class TagSet:
    """Ordered set of resource tags, keys unique."""
    pairs: List[Tuple[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    @property
    def as_dict(self) -> Dict[str, str]:
        return dict(self.pairs)

    def with_override(self, key: str, value: Optional[str]) -> "TagSet":
        """Return a copy with `key` set to `value`, replacing it in place if present."""
        if value is None:
            return TagSet(list(self.pairs))

        pairs = [(k, value if k == key else v) for k, v in self.pairs]
        if key not in self.as_dict:
            pairs.append((key, value))
        return TagSet(pairs)

    def to_aws_tags(self) -> List[Dict[str, str]]:
        return [{"Key": k, "Value": v} for k, v in self.pairs]

    @classmethod
    def from_aws_tags(cls, tags: Optional[List[Dict[str, str]]]) -> "TagSet":
        """Create from an AWS Tags list, keeping the provider's order."""
        pairs = []
        seen = set()
        for tag in tags or []:
            key = tag.get("Key")
            if key and key not in seen:
                seen.add(key)
                pairs.append((key, tag.get("Value", "")))
        return cls(pairs)
