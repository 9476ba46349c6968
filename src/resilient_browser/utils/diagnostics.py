"""Diagnostics for failures raised by sessions and elements."""

import sys
import platform
from typing import Optional

import selenium

from ..errors import BrowserFailure


def describe_failure(failure: BaseException, session=None) -> str:
    """
    Render a multi-line diagnostic block for ``failure``.

    Args:
        failure: The exception to describe (BrowserFailure or anything else)
        session: SessionHandle to read the current URL/title from, best effort

    Returns:
        str: Formatted diagnostic information
    """
    parts = [
        f"OS                : {platform.system()} {platform.release()}",
        f"Python            : {sys.version.split()[0]}",
        f"Selenium          : {getattr(selenium, '__version__', '?')}",
    ]

    if isinstance(failure, BrowserFailure):
        parts += [
            f"Failure kind      : {failure.kind.value}",
            f"Message           : {failure.message}",
            f"Locator           : {failure.locator or '<none>'}",
            f"Wait              : {failure.wait or '<none>'}",
        ]
        last = failure.last_result
        if last is not None:
            parts.append(f"Last result       : {_summarize(last)}")
    else:
        parts += [
            f"Error type        : {type(failure).__name__}",
            f"Error message     : {failure}",
        ]

    if failure.__cause__ is not None:
        parts.append(f"Caused by         : {type(failure.__cause__).__name__}: {failure.__cause__}")

    if session is not None:
        parts.append(f"Session           : {session.name}{' (closed)' if session.closed else ''}")
        if not session.closed:
            parts.append(f"Current URL       : {_best_effort(lambda: session.current_url)}")
            parts.append(f"Page title        : {_best_effort(lambda: session.title)}")

    return "\n".join(parts)


def _summarize(value) -> str:
    if isinstance(value, BrowserFailure):
        return f"[{value.kind.value}] {value.message}"
    text = repr(value)
    return text if len(text) <= 200 else text[:197] + "..."


def _best_effort(read) -> Optional[str]:
    # Diagnostics must never mask the failure being described.
    try:
        return read()
    except Exception as e:
        return f"<unavailable: {e.__class__.__name__}>"


__all__ = ["describe_failure"]
