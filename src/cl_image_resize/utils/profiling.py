"""Timing helpers for resize operations."""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from loguru import logger

P = ParamSpec("P")
R = TypeVar("R")


def timed(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator logging how long a synchronous call took, at DEBUG level.

    The elapsed time is logged on every exit path, including exceptions.

    Usage:
        @timed
        def save(self, filename):
            ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(f"[PROFILE] {func.__qualname__} took {elapsed_ms:.1f}ms")

    return wrapper
