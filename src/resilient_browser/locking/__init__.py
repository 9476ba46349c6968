from .session_registry import SessionRegistry

__all__ = ["SessionRegistry"]
