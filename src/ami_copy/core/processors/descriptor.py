#!/usr/bin/env python3
"""Structural rewrites of an image descriptor before it is registered again.

The descriptor returned by describe_images is treated as a generic JSON tree.
Snapshot ids are replaced wherever they appear in a string value, and fields
that RegisterImage rejects or that belong to the source account are removed.
"""

import copy
import re
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from ami_copy.core.constants import (
    COPY_NAME_TEMPLATE,
    NESTED_READ_ONLY_FIELDS,
    READ_ONLY_IMAGE_FIELDS,
)
from ami_copy.core.models import CopyJob, ImageDescriptor


def replace_values(node: Any, replacements: Dict[str, str]) -> Any:
    """Return a copy of `node` with every replacement applied to each string leaf.

    Keys match as whole ids: a key followed by further hex digits belongs to a
    longer id and is left alone, and longer keys win over their prefixes.
    """
    if not replacements:
        return copy.deepcopy(node)

    alternatives = "|".join(
        re.escape(old) for old in sorted(replacements, key=len, reverse=True)
    )
    pattern = re.compile(f"(?:{alternatives})(?![0-9a-fA-F])")

    def rewrite(value: Any) -> Any:
        if isinstance(value, dict):
            return {key: rewrite(item) for key, item in value.items()}
        if isinstance(value, list):
            return [rewrite(item) for item in value]
        if isinstance(value, str):
            return pattern.sub(lambda match: replacements[match.group(0)], value)
        return value

    return rewrite(node)


def remove_nested_keys(node: Any, keys: Iterable[str]) -> Any:
    """Return a copy of `node` without the given keys at any nesting level."""
    keys = set(keys)
    if isinstance(node, dict):
        return {
            key: remove_nested_keys(value, keys)
            for key, value in node.items()
            if key not in keys
        }
    if isinstance(node, list):
        return [remove_nested_keys(item, keys) for item in node]
    return node


def remove_top_level_keys(document: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    keys = set(keys)
    return {key: value for key, value in document.items() if key not in keys}


def keep_top_level_keys(document: Dict[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    allowed = set(allowed)
    return {key: value for key, value in document.items() if key in allowed}


def build_image_name(
    original_name: str,
    requested_name: Optional[str] = None,
    clock: Callable[[], float] = time.time,
) -> str:
    """Caller's name when given, otherwise a timestamped copy name."""
    if requested_name:
        return requested_name
    return COPY_NAME_TEMPLATE.format(name=original_name, timestamp=int(clock()))


def snapshot_replacements(copy_jobs: List[CopyJob]) -> Dict[str, str]:
    return {
        job.source_snapshot_id: job.destination_snapshot_id for job in copy_jobs
    }


def prepare_registration_document(
    descriptor: ImageDescriptor,
    copy_jobs: List[CopyJob],
    name: str,
    allowed_parameters: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Build the RegisterImage request for the copied image.

    Args:
        descriptor: The source image descriptor, left untouched
        copy_jobs: Completed copies, used to map source to destination snapshot ids
        name: Name for the new image
        allowed_parameters: When given, top-level keys outside this set are dropped

    Returns:
        A new document referencing only destination snapshots
    """
    document = replace_values(descriptor.to_document(), snapshot_replacements(copy_jobs))
    document = remove_nested_keys(document, NESTED_READ_ONLY_FIELDS)
    document = remove_top_level_keys(document, READ_ONLY_IMAGE_FIELDS)
    document["Name"] = name
    if allowed_parameters is not None:
        document = keep_top_level_keys(document, allowed_parameters)
    return document
