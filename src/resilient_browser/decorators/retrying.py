"""Stale-reference recovery for element operations."""

import functools
from typing import Any, Callable, TypeVar

from ..errors import BrowserFailure, FailureKind

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


class InteractionRetrier:
    """
    Runs ``op(reference)`` for an element handle, recovering from staleness.

    On a STALE failure the handle is asked to reacquire itself; if that works
    the operation is retried with the fresh reference. Each call gets at most
    ``max_cycles`` reacquire-then-retry cycles, so a handle that keeps going
    stale cannot spin forever. If reacquisition fails the original STALE
    failure is re-raised. Every other failure kind propagates untouched.
    """

    def __init__(self, max_cycles: int = 1):
        if max_cycles < 0:
            raise ValueError(f"max_cycles must be >= 0, got {max_cycles}")
        self.max_cycles = max_cycles

    def run(self, handle, op: Callable[[Any], T]) -> T:
        cycles = 0
        while True:
            try:
                return op(handle.reference)
            except BrowserFailure as e:
                if e.kind is not FailureKind.STALE:
                    raise
                if cycles >= self.max_cycles:
                    logger.debug(f"Giving up on stale {handle!r} after {cycles} reacquisition(s)")
                    raise
                cycles += 1
                if not handle.reacquire():
                    raise e.with_context(locator=handle.originating_locator)
                logger.debug(f"Retrying operation on reacquired {handle!r}")


def retry_on_stale(func: Callable) -> Callable:
    """
    Decorate an ElementHandle method written against a raw reference.

    The method is called as ``func(self, ref, *args, **kwargs)`` through the
    handle's InteractionRetrier, under the session lock. The handle's
    ancestor id-path is captured before its first interaction, while the
    reference is most likely still valid.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        with self.session.lock.held():
            self._prime_fallback_locator()
            return self._retrier.run(self, lambda ref: func(self, ref, *args, **kwargs))

    return wrapper


__all__ = [
    "InteractionRetrier",
    "retry_on_stale",
]
