"""Caller-owned registry of live sessions."""

import threading
from typing import Iterator, List

import logging
logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Tracks the sessions a caller has opened, for features that work across
    sessions (e.g. closing everything at shutdown).

    There is no process-wide instance: create one and hand it to the
    sessions that should be tracked. The element and wait machinery never
    looks at it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: List = []

    def register(self, session) -> None:
        with self._lock:
            if not any(s is session for s in self._sessions):
                self._sessions.append(session)
                logger.info(f"Registered session {session.name!r} ({len(self._sessions)} live)")

    def unregister(self, session) -> bool:
        """Forget ``session``. Returns False if it was not registered."""
        with self._lock:
            for i, s in enumerate(self._sessions):
                if s is session:
                    del self._sessions[i]
                    logger.info(f"Unregistered session {session.name!r} ({len(self._sessions)} live)")
                    return True
            return False

    def __contains__(self, session) -> bool:
        with self._lock:
            return any(s is session for s in self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __iter__(self) -> Iterator:
        # Iterate over a snapshot so sessions may unregister while we loop.
        with self._lock:
            snapshot = list(self._sessions)
        return iter(snapshot)

    def close_all(self) -> List[Exception]:
        """
        Close every registered session.

        Returns the failures raised by individual ``close()`` calls so one
        broken session does not keep the others open.
        """
        errors = []
        for session in self:
            try:
                session.close()
            except Exception as e:
                logger.warning(f"Closing session {session.name!r} failed: {e}")
                errors.append(e)
                self.unregister(session)
        return errors


__all__ = ["SessionRegistry"]
