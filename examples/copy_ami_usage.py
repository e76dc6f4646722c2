#!/usr/bin/env python3
"""
Example usage of CopyAMIJob

Copies an AMI from one account to another, first as a dry run and then for
real, and shows the shared-image variant where only the destination profile
is available.
"""

from ami_copy.core.models import CopyOptions, ProfileSource, SharedAccountSource
from ami_copy.jobs import CopyAMIJob
from ami_copy.utils import AmiCopyError, ConfigManager


def example_dry_run():
    """
    Example: Preview the snapshots and KMS grants a copy would touch
    """
    print("=== Planning an AMI copy ===")

    job = CopyAMIJob()
    result = job.execute(
        source=ProfileSource("build-account"),
        destination_profile="prod-account",
        options=CopyOptions(image_id="ami-0123456789abcdef0"),
        dry_run=True,
    )

    print(f"Result: {result}")
    return result


def example_copy_with_tags():
    """
    Example: Copy across regions, re-encrypt with a destination key and copy tags
    """
    print("\n=== Copying an AMI with tags ===")

    job = CopyAMIJob()
    result = job.execute(
        source=ProfileSource("build-account"),
        destination_profile="prod-account",
        options=CopyOptions(
            image_id="ami-0123456789abcdef0",
            image_name="web-base-prod",
            ena_support=True,
            copy_tags=True,
            kms_key_id="alias/ebs-prod",
            env_tag_value="prod",
        ),
        source_region="ap-southeast-2",
        destination_region="us-west-2",
    )

    print(f"Result: {result}")
    return result


def example_shared_image():
    """
    Example: Copy an AMI another account has already shared with us
    """
    print("\n=== Copying a shared AMI ===")

    config = ConfigManager()
    print(f"Pending snapshot ceiling: {config.get_max_pending_snapshots()}")

    try:
        result = CopyAMIJob(config).execute(
            source=SharedAccountSource("111122223333"),
            destination_profile="prod-account",
            options=CopyOptions(image_id="ami-0123456789abcdef0"),
        )
    except AmiCopyError as e:
        print(f"Copy failed: {e}")
        return None

    print(f"Result: {result}")
    return result


if __name__ == "__main__":
    print("CopyAMIJob Usage Examples")
    print("=========================\n")

    example_dry_run()
    example_copy_with_tags()
    example_shared_image()
