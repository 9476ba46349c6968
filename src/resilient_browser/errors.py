"""Failure kinds and the single exception type raised by this package."""

import enum
from typing import Any


class FailureKind(enum.Enum):
    """
    Classification of everything that can go wrong while driving a session.

    Callers branch on ``BrowserFailure.kind`` instead of catching subclasses.
    """

    NOT_FOUND = "not_found"
    TOO_MANY = "too_many"
    STALE = "stale"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    # A visibility filter removed every match (distinct from zero matches).
    FILTERED_EMPTY = "filtered_empty"
    NOT_INTERACTABLE = "not_interactable"
    JAVASCRIPT = "javascript"


class BrowserFailure(Exception):
    """
    Raised for every failure surfaced by the session/element layer.

    Attributes:
        kind: The FailureKind of this failure
        locator: The Locator involved, if any
        wait: The WaitSpec in effect, if any
        last_result: Last intermediate result seen by a wait (diagnostics only)
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str = "",
        *,
        locator=None,
        wait=None,
        last_result: Any = None,
    ):
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value
        self.locator = locator
        self.wait = wait
        self.last_result = last_result

    def __str__(self) -> str:
        parts = [f"[{self.kind.value}] {self.message}"]
        if self.locator is not None:
            parts.append(f"locator={self.locator}")
        if self.wait is not None:
            parts.append(f"wait={self.wait}")
        return " | ".join(parts)

    def with_context(self, *, locator=None, wait=None) -> "BrowserFailure":
        """Fill in missing locator/wait context in place and return self."""
        if self.locator is None and locator is not None:
            self.locator = locator
        if self.wait is None and wait is not None:
            self.wait = wait
        return self


__all__ = [
    "FailureKind",
    "BrowserFailure",
]
