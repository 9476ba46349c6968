"""Configuration management for session waits and retries."""

from .environment import (
    get_env_config,
    default_wait_spec,
    reacquire_wait_spec,
    page_load_wait_spec,
)

__all__ = [
    "get_env_config",
    "default_wait_spec",
    "reacquire_wait_spec",
    "page_load_wait_spec",
]
