import pytest
import yaml
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from ami_copy.core.models import CopyOptions, ProfileSource, RunContext, SharedAccountSource
from ami_copy.utils.config import ConfigManager

SOURCE_ACCOUNT = "111122223333"
DESTINATION_ACCOUNT = "444455556666"
SOURCE_REGION = "ap-southeast-2"
DESTINATION_REGION = "us-west-2"
IMAGE_ID = "ami-0123456789abcdef0"

SNAP_A = "snap-0aaaaaaaaaaaaaaa1"
SNAP_B = "snap-0bbbbbbbbbbbbbbb2"
NEW_SNAP_A = "snap-0ccccccccccccccc3"
NEW_SNAP_B = "snap-0ddddddddddddddd4"
KEY_1 = "arn:aws:kms:ap-southeast-2:111122223333:key/11111111-2222-3333-4444-555555555555"


def client_error(operation: str, code: str = "UnauthorizedOperation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{operation} denied"}}, operation)


def make_image(snapshot_ids=(SNAP_A, SNAP_B), tags=None):
    """A describe_images document with one EBS mapping per snapshot and an ephemeral disk."""
    mappings = [
        {
            "DeviceName": f"/dev/xvd{chr(ord('a') + i)}",
            "Ebs": {
                "SnapshotId": snapshot_id,
                "VolumeSize": 8 * (i + 1),
                "VolumeType": "gp3",
                "DeleteOnTermination": True,
                "Encrypted": i > 0,
            },
        }
        for i, snapshot_id in enumerate(snapshot_ids)
    ]
    mappings.append({"DeviceName": "/dev/xvdz", "VirtualName": "ephemeral0"})
    return {
        "ImageId": IMAGE_ID,
        "Name": "web-base",
        "Description": f"Built from {snapshot_ids[0]}" if snapshot_ids else "Empty",
        "Architecture": "x86_64",
        "CreationDate": "2024-05-01T10:00:00.000Z",
        "DeprecationTime": "2026-05-01T10:00:00.000Z",
        "OwnerId": SOURCE_ACCOUNT,
        "ImageLocation": f"{SOURCE_ACCOUNT}/web-base",
        "ImageType": "machine",
        "State": "available",
        "Public": False,
        "Hypervisor": "xen",
        "EnaSupport": True,
        "Platform": "windows",
        "PlatformDetails": "Windows",
        "UsageOperation": "RunInstances:0002",
        "ProductCodes": [{"ProductCodeId": "abc123", "ProductCodeType": "marketplace"}],
        "RootDeviceName": "/dev/xvda",
        "RootDeviceType": "ebs",
        "VirtualizationType": "hvm",
        "BlockDeviceMappings": mappings,
        "Tags": tags if tags is not None else [
            {"Key": "Name", "Value": "web"},
            {"Key": "Env", "Value": "dev"},
        ],
    }


def snapshot(snapshot_id, state="completed", progress="100%", encrypted=False, kms_key_id=None, tags=None):
    data = {
        "SnapshotId": snapshot_id,
        "State": state,
        "Progress": progress,
        "Encrypted": encrypted,
        "Tags": tags or [],
    }
    if kms_key_id:
        data["KmsKeyId"] = kms_key_id
    return data


def snapshots_by_id(registry):
    """describe_snapshots side effect answering from a {snapshot_id: data} dict."""

    def describe_snapshots(SnapshotIds=None, **kwargs):
        return {"Snapshots": [registry[s] for s in SnapshotIds or [] if s in registry]}

    return describe_snapshots


def make_session(clients):
    session = MagicMock()
    session.client.side_effect = lambda service, region_name=None: clients[service]
    return session


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def config_manager(tmp_path):
    settings = {
        "copy": {
            "max_pending_snapshots": 5,
            "admission_poll_interval": 30,
            "progress_poll_interval": 20,
            "consistency_delay": 1,
            "wait_timeout": 0,
            "waiter_delay": 15,
            "waiter_max_attempts": 40,
        },
        "tags": {"env_key": "Env"},
        "logging": {"level": "INFO"},
    }
    (tmp_path / "settings.yaml").write_text(yaml.safe_dump(settings), encoding="utf-8")
    return ConfigManager(config_dir=tmp_path)


@pytest.fixture
def source_ec2():
    client = MagicMock()
    client.describe_images.return_value = {"Images": [make_image()]}
    client.describe_snapshots.side_effect = snapshots_by_id(
        {
            SNAP_A: snapshot(SNAP_A, tags=[{"Key": "Name", "Value": "root"}, {"Key": "Env", "Value": "dev"}]),
            SNAP_B: snapshot(SNAP_B, encrypted=True, kms_key_id=KEY_1),
        }
    )
    return client


@pytest.fixture
def source_kms():
    client = MagicMock()
    client.describe_key.return_value = {
        "KeyMetadata": {"KeyId": KEY_1, "KeyManager": "CUSTOMER", "Enabled": True}
    }
    client.create_grant.return_value = {"GrantId": "grant-1"}
    return client


@pytest.fixture
def destination_ec2():
    client = MagicMock()
    client.get_paginator.return_value.paginate.return_value = [{"Snapshots": []}]
    client.copy_snapshot.side_effect = [
        {"SnapshotId": NEW_SNAP_A},
        {"SnapshotId": NEW_SNAP_B},
    ]
    client.describe_snapshots.side_effect = snapshots_by_id(
        {
            NEW_SNAP_A: snapshot(NEW_SNAP_A),
            NEW_SNAP_B: snapshot(NEW_SNAP_B),
        }
    )
    client.register_image.return_value = {"ImageId": "ami-0fedcba9876543210"}
    return client


@pytest.fixture
def destination_kms():
    client = MagicMock()
    client.describe_key.return_value = {
        "KeyMetadata": {"KeyId": "dest-key", "KeyManager": "CUSTOMER", "Enabled": True}
    }
    return client


@pytest.fixture
def source_session(source_ec2, source_kms):
    sts = MagicMock()
    sts.get_caller_identity.return_value = {"Account": SOURCE_ACCOUNT}
    session = make_session({"ec2": source_ec2, "kms": source_kms, "sts": sts})
    session.region_name = SOURCE_REGION
    return session


@pytest.fixture
def destination_session(destination_ec2, destination_kms):
    sts = MagicMock()
    sts.get_caller_identity.return_value = {"Account": DESTINATION_ACCOUNT}
    session = make_session({"ec2": destination_ec2, "kms": destination_kms, "sts": sts})
    session.region_name = DESTINATION_REGION
    return session


@pytest.fixture
def profile_sessions(source_session, destination_session):
    """Patch boto3.Session so the 'src' and 'dst' profiles return the fake sessions."""
    sessions = {"src": source_session, "dst": destination_session}

    def session_for(profile_name=None, region_name=None):
        return sessions[profile_name]

    with patch("ami_copy.utils.session.boto3.Session", side_effect=session_for) as mock_session:
        yield mock_session


def build_context(source_session, destination_session, shared=False, **options):
    options.setdefault("image_id", IMAGE_ID)
    return RunContext(
        source=SharedAccountSource(SOURCE_ACCOUNT) if shared else ProfileSource("src"),
        destination_profile="dst",
        source_account_id=SOURCE_ACCOUNT,
        destination_account_id=DESTINATION_ACCOUNT,
        source_region=SOURCE_REGION,
        destination_region=DESTINATION_REGION,
        destination_session=destination_session,
        options=CopyOptions(**options),
        source_session=None if shared else source_session,
    )


@pytest.fixture
def context(source_session, destination_session):
    return build_context(source_session, destination_session)
