"""
Global constants and configuration defaults.
No dependencies - safe to import from anywhere.
"""

import os

# ============================================================================
# Polling Configuration
# ============================================================================

POLL_INTERVAL_SECS = float(os.getenv("RB_POLL_INTERVAL_SECS", "0.1"))
"""Smallest time it takes a browser to update the DOM (roughly 100-200ms)."""

DEFAULT_WAIT_SECS = float(os.getenv("RB_DEFAULT_WAIT_SECS", "10"))
"""How long element lookups wait when the caller does not say."""

REACQUIRE_WAIT_SECS = float(os.getenv("RB_REACQUIRE_WAIT_SECS", str(POLL_INTERVAL_SECS * 2)))
"""Short wait used by each reacquisition strategy (two polls)."""

PAGE_LOAD_WAIT_SECS = float(os.getenv("RB_PAGE_LOAD_WAIT_SECS", "10"))
"""Maximum time to wait for document.readyState to become 'complete'."""


# ============================================================================
# Stale Retry Configuration
# ============================================================================

STALE_RETRY_CYCLES = int(os.getenv("RB_STALE_RETRY_CYCLES", "1"))
"""Reacquire-then-retry cycles granted to a single operation call."""


READY_STATE_COMPLETE = "complete"


__all__ = [
    "POLL_INTERVAL_SECS",
    "DEFAULT_WAIT_SECS",
    "REACQUIRE_WAIT_SECS",
    "PAGE_LOAD_WAIT_SECS",
    "STALE_RETRY_CYCLES",
    "READY_STATE_COMPLETE",
]
