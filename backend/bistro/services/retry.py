"""
Bounded retry for database reads that may time out.

Delays grow exponentially: base_delay, 2 * base_delay, ...
"""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 2,
    base_delay: float = 0.5,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call fn, retrying up to max_retries times. Re-raises the last error."""
    attempt = 0
    while True:
        try:
            return fn()
        except Exception as e:
            if attempt >= max_retries:
                raise
            delay = base_delay * (2 ** attempt)
            logger.warning(
                f"Attempt {attempt + 1} failed ({e}), retrying in {delay:.2f}s"
            )
            sleep(delay)
            attempt += 1
