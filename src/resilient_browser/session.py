"""
SessionHandle: exclusive access to one remote browser session.

Thread Safety:
    Every public method that talks to the browser holds the session lock for
    its entire duration, poll loops included. Use one SessionHandle per
    browser; threads sharing a handle take turns, handles for different
    browsers run in parallel.

Usage:
    from resilient_browser import Locator, SessionHandle, SeleniumDriverClient

    session = SessionHandle(SeleniumDriverClient(driver))
    button = session.find_one(Locator.by_id("submit"), required=True)
    button.click()
"""

from typing import Any, List, Optional, Sequence, Tuple

from .config import get_env_config, default_wait_spec, reacquire_wait_spec, page_load_wait_spec
from .constants import READY_STATE_COMPLETE
from .decorators import InteractionRetrier, SessionLock, exclusive_session_access
from .driver import DriverClient
from .element import ElementHandle
from .errors import BrowserFailure, FailureKind
from .locator import Locator, scoped_locator
from .waiting import ConditionWaiter, WaitSpec

import logging
logger = logging.getLogger(__name__)


_READY_STATE_SCRIPT = "return document.readyState;"


class SessionHandle:
    """
    Owns one DriverClient and the lock that serializes commands sent to it.

    Attributes:
        client: The DriverClient all commands go through
        name: Label used in logs and by a SessionRegistry
        lock: The session's SessionLock
        waiter: ConditionWaiter backing every wait on this session
        default_wait: WaitSpec for lookups and waits that pass none
        reacquire_wait: Short WaitSpec each reacquisition strategy gets
        page_load_wait: WaitSpec for document.readyState checks
    """

    def __init__(
        self,
        client: DriverClient,
        *,
        name: Optional[str] = None,
        default_wait: Optional[WaitSpec] = None,
        reacquire_wait: Optional[WaitSpec] = None,
        page_load_wait: Optional[WaitSpec] = None,
        stale_retry_cycles: Optional[int] = None,
        waiter: Optional[ConditionWaiter] = None,
        registry=None,
    ):
        if client is None:
            raise ValueError("client is required")

        config = None
        if None in (default_wait, reacquire_wait, page_load_wait, stale_retry_cycles):
            config = get_env_config()

        self.client = client
        self.name = name or f"session-{id(self):x}"
        self.lock = SessionLock(self.name)
        self.waiter = waiter or ConditionWaiter()
        self.default_wait = default_wait or default_wait_spec(config)
        self.reacquire_wait = reacquire_wait or reacquire_wait_spec(config)
        self.page_load_wait = page_load_wait or page_load_wait_spec(config)
        if stale_retry_cycles is None:
            stale_retry_cycles = config["stale_retry_cycles"]
        self.retrier = InteractionRetrier(max_cycles=stale_retry_cycles)
        self.registry = registry
        self.closed = False

        if registry is not None:
            registry.register(self)

    @property
    def session(self) -> "SessionHandle":
        return self

    def __repr__(self) -> str:
        return f"<SessionHandle {self.name!r}{' closed' if self.closed else ''}>"

    # ========================================================================
    # Locating elements
    # ========================================================================

    def _search(self, scope: Optional[ElementHandle], locator: Locator) -> list:
        if scope is None:
            return self.client.find_all(None, locator)
        scoped = scoped_locator(locator)
        # A stale scope is reacquired like any other element operation.
        return self.retrier.run(scope, lambda ref: self.client.find_all(ref, scoped))

    def _matches_visibility(self, ref: Any, visible: bool) -> bool:
        try:
            return self.client.is_displayed(ref) == visible
        except BrowserFailure as e:
            if e.kind is FailureKind.STALE:
                return False
            raise

    def _locate(
        self,
        locator: Locator,
        scope: Optional[ElementHandle],
        wait: WaitSpec,
        visible: Optional[bool],
    ) -> Tuple[list, int, Optional[BrowserFailure]]:
        """
        Poll until ``locator`` matches something (that passes the visibility filter).

        Returns (references, unfiltered_match_count, miss). On timeout the
        references are empty and ``miss`` is the last NOT_FOUND or
        FILTERED_EMPTY failure, so callers can tell "nothing present" from
        "nothing visible".
        """
        spec = wait.ignoring(FailureKind.NOT_FOUND, FailureKind.FILTERED_EMPTY)
        raw_count = 0

        def probe():
            nonlocal raw_count
            refs = list(self._search(scope, locator) or [])
            raw_count = len(refs)
            if not refs:
                raise BrowserFailure(FailureKind.NOT_FOUND, f"No elements found for {locator}", locator=locator)
            if visible is not None:
                refs = [r for r in refs if self._matches_visibility(r, visible)]
                if not refs:
                    state = "visible" if visible else "hidden"
                    raise BrowserFailure(
                        FailureKind.FILTERED_EMPTY,
                        f"{raw_count} element(s) found for {locator} but none are {state}",
                        locator=locator,
                    )
            return refs

        try:
            refs = self.waiter.wait(probe, spec, message=f"Waiting for {locator}", locator=locator)
        except BrowserFailure as e:
            # A TIMEOUT reported by the driver itself is not this poll running out.
            if e.kind is not FailureKind.TIMEOUT or e.wait is not spec:
                raise e.with_context(locator=locator, wait=wait)
            miss = e.last_result if isinstance(e.last_result, BrowserFailure) else None
            logger.debug(f"No match for {locator} within {wait}: {miss}")
            return [], 0, miss
        return refs, raw_count, None

    def _wrap(self, refs: Sequence[Any], raw_count: int, locator: Locator, scope: Optional[ElementHandle]) -> List[ElementHandle]:
        unique = raw_count == 1 and len(refs) == 1
        # Only a unique, document-level match makes the locator a safe re-find key.
        originating = locator if unique and scope is None else None
        chain = (scope.chain if scope is not None else ()) + (locator,)
        chain_unique = unique and (scope.chain_unique if scope is not None else True)
        return [
            ElementHandle(self, ref, originating_locator=originating, chain=chain, chain_unique=chain_unique)
            for ref in refs
        ]

    @exclusive_session_access
    def find(
        self,
        locator: Locator,
        *,
        scope: Optional[ElementHandle] = None,
        wait: Optional[WaitSpec] = None,
        visible: Optional[bool] = None,
        required: bool = False,
    ) -> List[ElementHandle]:
        """
        Wait for elements matching ``locator`` and wrap them.

        Args:
            locator: What to search for
            scope: Search below this element instead of the whole document
            wait: How long/often to poll (defaults to ``default_wait``)
            visible: True keeps only displayed elements, False only hidden ones,
                None keeps everything
            required: Raise NOT_FOUND instead of returning an empty list

        Returns:
            The matching ElementHandles; empty if nothing matched in time.
        """
        wait = wait or self.default_wait
        refs, raw_count, miss = self._locate(locator, scope, wait, visible)
        if not refs:
            if required:
                raise self._not_found(locator, wait, miss)
            return []
        return self._wrap(refs, raw_count, locator, scope)

    @exclusive_session_access
    def find_one(
        self,
        locator: Locator,
        *,
        scope: Optional[ElementHandle] = None,
        wait: Optional[WaitSpec] = None,
        visible: Optional[bool] = None,
        required: bool = False,
    ) -> Optional[ElementHandle]:
        """
        Like ``find`` but for exactly one element.

        Raises:
            BrowserFailure(TOO_MANY): more than one element matched
            BrowserFailure(NOT_FOUND): nothing matched and ``required`` is set
        """
        wait = wait or self.default_wait
        refs, raw_count, miss = self._locate(locator, scope, wait, visible)
        if not refs:
            if required:
                raise self._not_found(locator, wait, miss)
            return None
        if len(refs) > 1:
            raise BrowserFailure(
                FailureKind.TOO_MANY,
                f"Expected exactly 1 element for {locator}, found {len(refs)}",
                locator=locator,
                wait=wait,
            )
        return self._wrap(refs, raw_count, locator, scope)[0]

    @staticmethod
    def _not_found(locator: Locator, wait: WaitSpec, miss: Optional[BrowserFailure]) -> BrowserFailure:
        if miss is not None and miss.kind is FailureKind.FILTERED_EMPTY:
            message = miss.message
        else:
            message = f"No elements found for {locator}"
        return BrowserFailure(FailureKind.NOT_FOUND, message, locator=locator, wait=wait, last_result=miss)

    # ========================================================================
    # Page level
    # ========================================================================

    @property
    @exclusive_session_access
    def title(self) -> str:
        return self.client.get_title()

    @property
    @exclusive_session_access
    def current_url(self) -> str:
        return self.client.get_current_url()

    @exclusive_session_access
    def execute_script(self, code: str, *args: Any) -> Any:
        """Run JavaScript; ElementHandle arguments are passed as their current references."""
        unwrapped = [a.reference if isinstance(a, ElementHandle) else a for a in args]
        return self.client.execute_script(code, *unwrapped)

    @exclusive_session_access
    def go_to(self, url: str, wait_for_load: bool = True) -> None:
        logger.info(f"{self.name}: navigating to {url}")
        self.client.navigate(url)
        if wait_for_load:
            self.wait_for_page_load()

    @exclusive_session_access
    def refresh(self, wait_for_load: bool = True) -> None:
        self.client.refresh()
        if wait_for_load:
            self.wait_for_page_load()

    @exclusive_session_access
    def wait_for_page_load(self, wait: Optional[WaitSpec] = None) -> None:
        """Wait until ``document.readyState`` is "complete"."""
        wait = wait or self.page_load_wait
        state = {"value": None}

        def ready():
            state["value"] = self.client.execute_script(_READY_STATE_SCRIPT)
            return state["value"] == READY_STATE_COMPLETE

        try:
            self.waiter.wait(ready, wait, message="Waiting for page load")
        except BrowserFailure as e:
            if e.kind is FailureKind.TIMEOUT and e.wait is wait:
                e.message = f"Page did not finish loading: document.readyState={state['value']!r}"
            raise

    @exclusive_session_access
    def wait_for_title(self, expected: str, *, contains: bool = False, wait: Optional[WaitSpec] = None) -> str:
        """Wait until the page title equals (or contains) ``expected``; returns the title."""
        wait = wait or self.default_wait

        def matches():
            title = self.client.get_title() or ""
            return (title,) if (expected in title if contains else title == expected) else None

        (title,) = self.waiter.wait(matches, wait, message=f"Waiting for title {expected!r}")
        return title

    @exclusive_session_access
    def wait_for_url(self, fragment: str, *, wait: Optional[WaitSpec] = None) -> str:
        """Wait until the current URL contains ``fragment``; returns the URL."""
        wait = wait or self.default_wait

        def matches():
            url = self.client.get_current_url() or ""
            return (url,) if fragment in url else None

        (url,) = self.waiter.wait(matches, wait, message=f"Waiting for URL containing {fragment!r}")
        return url

    # ========================================================================
    # Lifecycle
    # ========================================================================

    @exclusive_session_access
    def close(self) -> None:
        """Quit the browser and drop out of the registry (if any)."""
        if self.closed:
            return
        try:
            self.client.quit()
        finally:
            self.closed = True
            if self.registry is not None:
                self.registry.unregister(self)
            logger.info(f"{self.name}: closed")


__all__ = ["SessionHandle"]
