"""
Resilient element lookup and interaction over one remote browser session.

The interesting parts:

* ``ConditionWaiter`` - the single poll loop behind every "wait until X".
* ``ElementHandle`` - notices when its remote reference went stale and
  re-locates the element (originating locator, locator chain, ancestor ids).
* ``SessionHandle`` - serializes every command sent to the browser through
  one lock, so threads can share a session safely.

Starting browsers is out of scope: wrap an existing Selenium driver in a
``SeleniumDriverClient`` and hand it to a ``SessionHandle``.
"""

from .errors import BrowserFailure, FailureKind
from .locator import Locator, LocatorKind
from .waiting import ConditionWaiter, WaitSpec, wait_until
from .driver import DriverClient, SeleniumDriverClient
from .decorators import InteractionRetrier
from .element import ElementHandle
from .session import SessionHandle
from .locking import SessionRegistry
from .utils import describe_failure

__all__ = [
    "BrowserFailure",
    "FailureKind",
    "Locator",
    "LocatorKind",
    "ConditionWaiter",
    "WaitSpec",
    "wait_until",
    "DriverClient",
    "SeleniumDriverClient",
    "InteractionRetrier",
    "ElementHandle",
    "SessionHandle",
    "SessionRegistry",
    "describe_failure",
]
