"""Decorator patterns for AMI copy CLI operations."""

import json
import click
from functools import wraps
from typing import Any, Callable, Dict, Optional, Type

from botocore.exceptions import BotoCoreError, ClientError

from ami_copy.utils.exceptions import AmiCopyError
from ami_copy.utils.logger import setup_logger

FATAL_ERRORS = (AmiCopyError, ClientError, BotoCoreError)


def handle_operation_error(operation_name: str, error: Exception) -> None:
    """Report a fatal error on a single line and log it.

    Args:
        operation_name: Name of the operation that failed
        error: Exception that occurred
    """
    reason = " ".join(str(error).split())
    error_msg = f"Error in {operation_name}: {reason}"
    click.echo(error_msg, err=True)

    logger = setup_logger("ami_copy.errors", "errors.log")
    logger.debug(
        error_msg,
        extra={"operation": operation_name, "error_type": type(error).__name__},
    )


def format_result(results: Dict[str, Any]) -> str:
    """Human readable summary of a copy result."""
    lines = [results.get("message", "")]
    if results.get("image_id"):
        lines.append(f"New AMI: {results['image_id']} ({results.get('name', '')})")
    for snapshot in results.get("snapshots", []):
        if isinstance(snapshot, dict):
            lines.append(f"Snapshot {snapshot['source']} copied as {snapshot['destination']}")
        else:
            lines.append(f"Snapshot {snapshot} would be copied")
    for key_id in results.get("grants", []):
        lines.append(f"KMS grant: {key_id}")
    return "\n".join(lines)


def handle_output(
    results: Dict[str, Any],
    output_path: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> None:
    """Echo the result and optionally save it as JSON."""
    logger = setup_logger("ami_copy.output", "operations.log")

    click.echo(format_result(results))
    logger.debug(f"[{correlation_id or 'N/A'}] Operation completed: {results.get('message', '')}")

    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)
        click.echo(f"Results saved to {output_path}")
        logger.info(f"[{correlation_id or 'N/A'}] Results saved to {output_path}")


def ami_operation(job_class: Type):
    """Run a job from a click command.

    The decorated command body validates its options and returns the keyword
    arguments for the job's execute(). Fatal errors become a one-line message
    and exit status 1.

    Args:
        job_class: The job class to execute
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(ctx, **kwargs):
            operation_name = func.__name__
            output = kwargs.get("output")

            job_kwargs = func(ctx, **kwargs)

            try:
                job = job_class()
                result = job.execute(**job_kwargs)
            except FATAL_ERRORS as e:
                handle_operation_error(operation_name, e)
                ctx.exit(1)

            handle_output(result, output, getattr(job, "correlation_id", None))
            return result

        return wrapper

    return decorator
