#!/usr/bin/env python3
"""
AMI Copy - CLI
Copy an AMI and its encrypted snapshots to another AWS account and region
"""

import click

from ami_copy import __version__
from ami_copy.core.models import CopyOptions, ProfileSource, SharedAccountSource
from ami_copy.jobs import CopyAMIJob
from ami_copy.utils.decorators import ami_operation
from ami_copy.utils.logger import set_default_level, setup_logger

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(verbose: bool = False):
    """Apply --verbose to every ami_copy logger and return the CLI logger."""
    set_default_level("DEBUG" if verbose else None)
    return setup_logger("ami_copy.cli", "cli.log")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.pass_context
def cli(ctx):
    """AMI Copy - cross-account, cross-region AMI copies with snapshot re-encryption"""
    ctx.ensure_object(dict)


@cli.command(context_settings=CONTEXT_SETTINGS)
@click.option("-s", "--source-profile", help="AWS CLI profile name for the AMI source account")
@click.option(
    "-S",
    "--source-account-id",
    help="Source account ID for an AMI already shared with the destination account",
)
@click.option("-d", "--destination-profile", required=True, help="AWS CLI profile name for the AMI destination account")
@click.option("-a", "--image-id", required=True, help="ID of the AMI to be copied")
@click.option("-N", "--name", help="Name for the new AMI")
@click.option("-l", "--source-region", help="Region of the AMI to be copied")
@click.option("-r", "--destination-region", help="Destination region for the copied AMI")
@click.option("-n", "--ena-support", is_flag=True, help="Enable ENA support on the new AMI")
@click.option("-t", "--copy-tags", is_flag=True, help="Copy AMI and snapshot tags")
@click.option("-k", "--kms-key-id", help="KMS Key ID for snapshot re-encryption in the destination account")
@click.option("-u", "--env-tag-value", help="Value for the Env tag on destination resources (requires --copy-tags)")
@click.option("--output", type=click.Path(), help="Save the result as JSON")
@click.option("--dry-run", is_flag=True, help="Preview the copy without changing anything")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
@ami_operation(CopyAMIJob)
def copy_ami(
    ctx,
    source_profile,
    source_account_id,
    destination_profile,
    image_id,
    name,
    source_region,
    destination_region,
    ena_support,
    copy_tags,
    kms_key_id,
    env_tag_value,
    output,
    dry_run,
    verbose,
):
    """Copy an AMI and its snapshots to another account

    By default the region configured for each profile is used, and snapshots are
    re-encrypted with the destination account's default EBS key.
    """
    logger = setup_logging(verbose)

    if bool(source_profile) == bool(source_account_id):
        raise click.UsageError(
            "Exactly one of --source-profile or --source-account-id is required", ctx
        )
    if env_tag_value and not copy_tags:
        raise click.UsageError("--env-tag-value is only valid with --copy-tags", ctx)

    if source_profile:
        source = ProfileSource(source_profile)
    else:
        source = SharedAccountSource(source_account_id)

    logger.debug(
        f"copy-ami {image_id}: source {source}, destination profile {destination_profile}, "
        f"dry run {dry_run}"
    )

    return {
        "source": source,
        "destination_profile": destination_profile,
        "options": CopyOptions(
            image_id=image_id,
            image_name=name,
            ena_support=ena_support,
            copy_tags=copy_tags,
            kms_key_id=kms_key_id,
            env_tag_value=env_tag_value,
        ),
        "source_region": source_region,
        "destination_region": destination_region,
        "dry_run": dry_run,
    }


@cli.command()
def version():
    """Show version information"""
    click.echo(f"AMI Copy - Version {__version__}")
    click.echo("Cross-account AMI copy toolkit")


if __name__ == "__main__":
    cli()
