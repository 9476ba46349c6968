# resilient_browser/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .locking import SessionLock, exclusive_session_access
from .retrying import InteractionRetrier, retry_on_stale

__all__ = [
    "SessionLock",
    "exclusive_session_access",
    "InteractionRetrier",
    "retry_on_stale",
]
