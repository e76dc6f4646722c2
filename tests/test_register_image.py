import pytest

from ami_copy.core.models import CopyJob, ImageDescriptor
from ami_copy.jobs import RegisterImageJob
from ami_copy.utils.exceptions import RegistrationError

from conftest import (
    NEW_SNAP_A,
    NEW_SNAP_B,
    SNAP_A,
    SNAP_B,
    build_context,
    client_error,
    make_image,
)

NEW_IMAGE = "ami-0fedcba9876543210"


@pytest.fixture
def job(config_manager):
    return RegisterImageJob(config_manager, clock=lambda: 1700000000.7)


@pytest.fixture
def descriptor():
    return ImageDescriptor.from_aws_image(make_image())


@pytest.fixture
def copy_jobs():
    return [
        CopyJob(SNAP_A, NEW_SNAP_A, progress=100, state="completed"),
        CopyJob(SNAP_B, NEW_SNAP_B, progress=100, state="completed"),
    ]


def registered(destination_ec2):
    return destination_ec2.register_image.call_args.kwargs


def test_registers_rewritten_document(job, context, descriptor, copy_jobs, destination_ec2):
    result = job.execute(context, descriptor, copy_jobs)

    assert result == {
        "image_id": NEW_IMAGE,
        "name": "Copy of web-base 1700000000",
        "tagged_resources": [],
    }

    params = registered(destination_ec2)
    assert params["Name"] == "Copy of web-base 1700000000"
    assert params["Description"] == f"Built from {NEW_SNAP_A}"
    assert params["Architecture"] == "x86_64"
    assert params["RootDeviceName"] == "/dev/xvda"
    assert params["VirtualizationType"] == "hvm"
    assert params["BlockDeviceMappings"] == [
        {
            "DeviceName": "/dev/xvda",
            "Ebs": {
                "SnapshotId": NEW_SNAP_A,
                "VolumeSize": 8,
                "VolumeType": "gp3",
                "DeleteOnTermination": True,
            },
        },
        {
            "DeviceName": "/dev/xvdb",
            "Ebs": {
                "SnapshotId": NEW_SNAP_B,
                "VolumeSize": 16,
                "VolumeType": "gp3",
                "DeleteOnTermination": True,
            },
        },
        {"DeviceName": "/dev/xvdz", "VirtualName": "ephemeral0"},
    ]
    for dropped in ("ImageId", "OwnerId", "Tags", "State", "EnaSupport", "ProductCodes",
                    "DeprecationTime", "ImageLocation", "PlatformDetails"):
        assert dropped not in params
    # the source descriptor is not modified
    assert descriptor.snapshot_ids == [SNAP_A, SNAP_B]


def test_requested_name_is_used_verbatim(job, source_session, destination_session, descriptor, copy_jobs, destination_ec2):
    context = build_context(source_session, destination_session, image_name="golden-2024")

    assert job.execute(context, descriptor, copy_jobs)["name"] == "golden-2024"
    assert registered(destination_ec2)["Name"] == "golden-2024"


def test_ena_support_flag(job, source_session, destination_session, descriptor, copy_jobs, destination_ec2):
    context = build_context(source_session, destination_session, ena_support=True)

    job.execute(context, descriptor, copy_jobs)

    assert registered(destination_ec2)["EnaSupport"] is True


def test_no_tags_without_copy_tags(job, context, descriptor, copy_jobs, destination_ec2):
    job.execute(context, descriptor, copy_jobs)

    destination_ec2.create_tags.assert_not_called()


def test_tags_are_copied_with_env_override(job, source_session, destination_session, descriptor, copy_jobs, destination_ec2):
    context = build_context(
        source_session, destination_session, copy_tags=True, env_tag_value="prod"
    )

    result = job.execute(context, descriptor, copy_jobs)

    # the second snapshot has no tags, so it is left alone
    assert result["tagged_resources"] == [NEW_SNAP_A, NEW_IMAGE]
    calls = [c.kwargs for c in destination_ec2.create_tags.call_args_list]
    assert calls == [
        {
            "Resources": [NEW_SNAP_A],
            "Tags": [{"Key": "Name", "Value": "root"}, {"Key": "Env", "Value": "prod"}],
        },
        {
            "Resources": [NEW_IMAGE],
            "Tags": [{"Key": "Name", "Value": "web"}, {"Key": "Env", "Value": "prod"}],
        },
    ]


def test_tags_are_copied_unchanged_without_override(job, source_session, destination_session, copy_jobs, destination_ec2):
    context = build_context(source_session, destination_session, copy_tags=True)
    descriptor = ImageDescriptor.from_aws_image(make_image(tags=[{"Key": "Team", "Value": "core"}]))

    job.execute(context, descriptor, copy_jobs)

    assert destination_ec2.create_tags.call_args_list[-1].kwargs == {
        "Resources": [NEW_IMAGE],
        "Tags": [{"Key": "Team", "Value": "core"}],
    }


def test_untagged_image_gets_no_override(job, source_session, destination_session, copy_jobs, destination_ec2):
    context = build_context(
        source_session, destination_session, copy_tags=True, env_tag_value="prod"
    )
    descriptor = ImageDescriptor.from_aws_image(make_image(tags=[]))

    result = job.execute(context, descriptor, copy_jobs)

    assert NEW_IMAGE not in result["tagged_resources"]
    tagged = [c.kwargs["Resources"] for c in destination_ec2.create_tags.call_args_list]
    assert [NEW_IMAGE] not in tagged


def test_registration_failure(job, context, descriptor, copy_jobs, destination_ec2):
    destination_ec2.register_image.side_effect = client_error("RegisterImage", "InvalidParameter")

    with pytest.raises(RegistrationError, match="Unable to register AMI"):
        job.execute(context, descriptor, copy_jobs)

    destination_ec2.create_tags.assert_not_called()


def test_tagging_failure(job, source_session, destination_session, descriptor, copy_jobs, destination_ec2):
    context = build_context(source_session, destination_session, copy_tags=True)
    destination_ec2.create_tags.side_effect = client_error("CreateTags")

    with pytest.raises(RegistrationError, match=NEW_SNAP_A):
        job.execute(context, descriptor, copy_jobs)
