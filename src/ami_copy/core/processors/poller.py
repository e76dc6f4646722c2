#!/usr/bin/env python3
"""Fixed-interval polling for asynchronous AWS operations."""

import time
from typing import Callable, Optional, TypeVar

from ami_copy.utils.exceptions import WaitTimeoutError

T = TypeVar("T")


def poll_until(
    fetch: Callable[[], T],
    until: Callable[[T], bool],
    interval: float,
    check: Optional[Callable[[T], None]] = None,
    timeout: Optional[float] = None,
    on_wait: Optional[Callable[[T], None]] = None,
    description: str = "condition",
) -> T:
    """Call `fetch` until `until(result)` is true and return that result.

    `check` runs on every result before `until` and raises to abort the loop.
    `on_wait` runs each time the loop is about to sleep. The first fetch
    happens immediately; later ones are `interval` seconds apart.

    Raises:
        WaitTimeoutError: if `timeout` seconds pass without `until` succeeding
    """
    started = time.monotonic()
    while True:
        result = fetch()
        if check is not None:
            check(result)
        if until(result):
            return result

        if timeout is not None and time.monotonic() - started + interval > timeout:
            raise WaitTimeoutError(
                f"Timed out after {timeout:.0f}s waiting for {description}"
            )
        if on_wait is not None:
            on_wait(result)
        time.sleep(interval)
