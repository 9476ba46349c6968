"""Environment configuration and validation."""

import os
from typing import Optional

from dotenv import load_dotenv, find_dotenv

from .. import constants
from ..errors import FailureKind
from ..waiting import WaitSpec

import logging
logger = logging.getLogger(__name__)


_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    # Process environment wins over .env values.
    load_dotenv(find_dotenv(filename=".env", usecwd=True), override=False)
    _DOTENV_LOADED = True


def _read_float(name: str, default: float, *, minimum: float, inclusive: bool = True) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise EnvironmentError(f"{name} must be a number, got {raw!r}.") from None
    if value < minimum or (not inclusive and value == minimum):
        op = ">=" if inclusive else ">"
        raise EnvironmentError(f"{name} must be {op} {minimum:g}, got {value:g}.")
    return value


def get_env_config() -> dict:
    """
    Read wait/retry settings from the environment and validate them.

    Optional:   RB_POLL_INTERVAL_SECS   (> 0, default 0.1)
                RB_DEFAULT_WAIT_SECS    (>= 0, default 10)
                RB_REACQUIRE_WAIT_SECS  (>= 0, default two polls)
                RB_PAGE_LOAD_WAIT_SECS  (>= 0, default 10)
                RB_STALE_RETRY_CYCLES   (>= 0, default 1)

    A .env file in the working directory (or a parent) is honoured, but
    never overrides variables already set in the process.
    """
    _load_dotenv_once()

    poll = _read_float("RB_POLL_INTERVAL_SECS", constants.POLL_INTERVAL_SECS, minimum=0.0, inclusive=False)

    cycles_env = (os.getenv("RB_STALE_RETRY_CYCLES") or "").strip()
    if cycles_env and not cycles_env.isdigit():
        raise EnvironmentError(f"RB_STALE_RETRY_CYCLES must be a non-negative integer, got {cycles_env!r}.")
    cycles = int(cycles_env) if cycles_env else constants.STALE_RETRY_CYCLES

    return {
        "poll_interval": poll,
        "default_wait": _read_float("RB_DEFAULT_WAIT_SECS", constants.DEFAULT_WAIT_SECS, minimum=0.0),
        "reacquire_wait": _read_float("RB_REACQUIRE_WAIT_SECS", constants.REACQUIRE_WAIT_SECS, minimum=0.0),
        "page_load_wait": _read_float("RB_PAGE_LOAD_WAIT_SECS", constants.PAGE_LOAD_WAIT_SECS, minimum=0.0),
        "stale_retry_cycles": cycles,
    }


def default_wait_spec(config: Optional[dict] = None) -> WaitSpec:
    """WaitSpec used by element lookups when the caller passes none."""
    if config is None:
        config = get_env_config()
    return WaitSpec(timeout=config["default_wait"], poll_interval=config["poll_interval"])


def reacquire_wait_spec(config: Optional[dict] = None) -> WaitSpec:
    """Short, bounded WaitSpec used by each reacquisition strategy."""
    if config is None:
        config = get_env_config()
    return WaitSpec(timeout=config["reacquire_wait"], poll_interval=config["poll_interval"])


def page_load_wait_spec(config: Optional[dict] = None) -> WaitSpec:
    if config is None:
        config = get_env_config()
    return WaitSpec(
        timeout=config["page_load_wait"],
        poll_interval=config["poll_interval"],
        ignored={FailureKind.JAVASCRIPT},
    )
