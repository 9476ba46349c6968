# resilient_browser/decorators/locking.py

"""
A browser session executes one command at a time. Every public operation
that talks to the session holds the session lock for its whole duration,
including any poll loop it runs, so commands from two threads are never
interleaved.

The lock is reentrant: an element operation that hits a stale reference
reacquires the element (a nested find) without giving the lock up.
"""

import time
import functools
import threading
import contextlib
from typing import Callable, Iterator

import logging
logger = logging.getLogger(__name__)


__all__ = [
    "SessionLock",
    "exclusive_session_access",
]


class SessionLock:
    """Reentrant mutex owned by exactly one SessionHandle."""

    def __init__(self, name: str = "session"):
        self._lock = threading.RLock()
        self.name = name

    @contextlib.contextmanager
    def held(self) -> Iterator[None]:
        """Acquire for the duration of the block; released on every exit path."""
        started = time.monotonic()
        self._lock.acquire()
        waited = time.monotonic() - started
        if waited > 0.05:
            logger.debug(f"Waited {waited:.3f}s for lock {self.name!r}")
        try:
            yield
        finally:
            self._lock.release()


def exclusive_session_access(func: Callable) -> Callable:
    """
    Run a method while holding its session's lock.

    The decorated method's instance must expose ``session`` (a SessionHandle;
    SessionHandle exposes itself).
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        with self.session.lock.held():
            return func(self, *args, **kwargs)

    return wrapper
