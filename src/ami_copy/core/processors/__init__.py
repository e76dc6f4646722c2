"""Core processors for AMI copy operations."""

from .descriptor import (
    build_image_name,
    prepare_registration_document,
    remove_nested_keys,
    replace_values,
)
from .poller import poll_until

__all__ = [
    "build_image_name",
    "prepare_registration_document",
    "remove_nested_keys",
    "replace_values",
    "poll_until",
]
