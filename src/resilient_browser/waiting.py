"""
Generic condition polling.

Every "wait until X" in this package is a predicate handed to
``ConditionWaiter.wait``; nothing else sleeps or polls.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, FrozenSet, Iterable, TypeVar

from .errors import BrowserFailure, FailureKind
from .constants import POLL_INTERVAL_SECS

import logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class WaitSpec:
    """
    How long to wait, how often to poll, and which failures mean "not yet".

    Attributes:
        timeout: Seconds to keep polling; 0 means evaluate exactly once
        poll_interval: Seconds between evaluations, must be > 0
        ignored: FailureKinds treated as "not yet satisfied"
    """

    timeout: float
    poll_interval: float = POLL_INTERVAL_SECS
    ignored: FrozenSet[FailureKind] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.timeout is None or self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout!r}")
        if self.poll_interval is None or self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval!r}")
        object.__setattr__(self, "ignored", frozenset(self.ignored))

    def __str__(self) -> str:
        return f"{self.timeout:g}s/{self.poll_interval:g}s"

    def ignoring(self, *kinds: FailureKind) -> "WaitSpec":
        """Copy of this spec that additionally ignores ``kinds``."""
        return replace(self, ignored=self.ignored | frozenset(kinds))

    def with_timeout(self, timeout: float) -> "WaitSpec":
        return replace(self, timeout=timeout)


class ConditionWaiter:
    """
    Blocking poll loop.

    ``clock`` and ``sleep`` are injectable so tests can drive time by hand.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._clock = clock
        self._sleep = sleep

    def wait(
        self,
        predicate: Callable[[], T],
        spec: WaitSpec,
        *,
        message: str = "condition not met",
        locator=None,
    ) -> T:
        """
        Evaluate ``predicate`` until it returns a truthy value.

        A falsy return or a BrowserFailure whose kind is in ``spec.ignored``
        counts as "not yet"; any other exception propagates immediately.
        The last evaluation always happens at or after the deadline, so a
        condition that becomes true during the final sleep is not reported
        as a timeout.

        Raises:
            BrowserFailure(TIMEOUT): carrying the last intermediate result
        """
        start = self._clock()
        deadline = start + spec.timeout
        attempts = 0
        last: Any = None

        while True:
            attempts += 1
            try:
                result = predicate()
            except BrowserFailure as e:
                if e.kind not in spec.ignored:
                    raise
                last = e
            else:
                if result:
                    logger.debug(f"Condition met after {attempts} attempt(s), {self._clock() - start:.3f}s")
                    return result
                last = result

            now = self._clock()
            if now >= deadline:
                break
            self._sleep(min(spec.poll_interval, deadline - now))

        logger.debug(f"Condition timed out after {attempts} attempt(s): {message}")
        raise BrowserFailure(
            FailureKind.TIMEOUT,
            f"{message} (after {attempts} attempt(s))",
            locator=locator,
            wait=spec,
            last_result=last,
        )


_DEFAULT_WAITER = ConditionWaiter()


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    poll_interval: float = POLL_INTERVAL_SECS,
    ignored: Iterable[FailureKind] = (),
    message: str = "condition not met",
) -> T:
    """Convenience wrapper around a process-wide ConditionWaiter."""
    spec = WaitSpec(timeout=timeout, poll_interval=poll_interval, ignored=frozenset(ignored))
    return _DEFAULT_WAITER.wait(predicate, spec, message=message)


__all__ = [
    "WaitSpec",
    "ConditionWaiter",
    "wait_until",
]
