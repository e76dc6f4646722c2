#!/usr/bin/env python3
"""Core constants for AMI copy operations."""

# Copy throttling and polling defaults
MAX_PENDING_SNAPSHOTS = 5
ADMISSION_POLL_INTERVAL = 30
PROGRESS_POLL_INTERVAL = 20
CONSISTENCY_DELAY = 1
WAITER_DELAY = 15
WAITER_MAX_ATTEMPTS = 40

# KMS
GRANT_OPERATIONS = ["DescribeKey", "Decrypt", "CreateGrant"]
AWS_KEY_MANAGER = "AWS"

# Tags
ENV_TAG_KEY = "Env"

# Image descriptor fields that cannot be resubmitted to RegisterImage
READ_ONLY_IMAGE_FIELDS = (
    "Tags",
    "Platform",
    "PlatformDetails",
    "UsageOperation",
    "ImageId",
    "CreationDate",
    "OwnerId",
    "ImageLocation",
    "State",
    "ImageType",
    "RootDeviceType",
    "Hypervisor",
    "Public",
    "EnaSupport",
    "ProductCodes",
)
NESTED_READ_ONLY_FIELDS = ("Encrypted",)

COPY_NAME_TEMPLATE = "Copy of {name} {timestamp}"
COPY_DESCRIPTION_TEMPLATE = "Copied from {snapshot_id} ({account_id}|{region})"

