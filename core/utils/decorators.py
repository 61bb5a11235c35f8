"""
Utility decorators.
"""

import functools
import logging
import time

logger = logging.getLogger(__name__)


def timer(func):
    """
    Measure execution time of func.

    The wrapped function returns a tuple of (result, elapsed_ms) and logs the
    timing at DEBUG level.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(f"{func.__qualname__} took {elapsed_ms} ms")
        return result, elapsed_ms

    return wrapper
