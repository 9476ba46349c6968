"""
ElementHandle: a self-healing reference to one element of the page.

The remote reference behind a handle can go stale at any moment (the DOM
node was replaced). Operations detect this, ask the handle to reacquire a
fresh reference and retry, so callers rarely have to repeat their own
lookups.
"""

import re
from typing import Any, Optional, Tuple

from bs4 import BeautifulSoup

from .decorators import exclusive_session_access, retry_on_stale
from .errors import BrowserFailure, FailureKind
from .locator import Locator, chain_to_xpath, xpath_literal

import logging
logger = logging.getLogger(__name__)


PARENT_SCRIPT = "return arguments[0].parentElement;"
OUTER_HTML_SCRIPT = "return arguments[0].outerHTML;"
CLICK_SCRIPT = "arguments[0].click();"
BLUR_SCRIPT = "arguments[0].blur();"
SCROLL_INTO_VIEW_SCRIPT = "arguments[0].scrollIntoView({block: 'center', inline: 'center'});"

_UNSET = object()


class ElementHandle:
    """
    Wraps one remote element reference.

    Handles are created by ``SessionHandle.find``/``find_one``; the same
    handle object survives reacquisition, only ``reference`` changes.

    Attributes:
        session: The SessionHandle this element lives in (not owned)
        reference: Current remote reference; replaced on reacquisition
        originating_locator: Locator that found exactly this one element, if any
        chain: Locators that led to this element, outermost search first
        chain_unique: Whether every search in ``chain`` matched exactly one element
    """

    def __init__(
        self,
        session,
        reference: Any,
        *,
        originating_locator: Optional[Locator] = None,
        chain: Tuple[Locator, ...] = (),
        chain_unique: bool = False,
    ):
        self.session = session
        self.reference = reference
        self.originating_locator = originating_locator
        self.chain = tuple(chain)
        self.chain_unique = chain_unique
        self._retrier = session.retrier
        self._tag_name: Optional[str] = None
        self._fallback_locator: Any = _UNSET
        self._descriptor_locator: Any = _UNSET

    def __repr__(self) -> str:
        described = self.originating_locator or " -> ".join(str(loc) for loc in self.chain) or "?"
        return f"<ElementHandle {described}>"

    @property
    def _client(self):
        return self.session.client

    # ========================================================================
    # Reacquisition
    # ========================================================================

    @property
    def descriptor_locator(self) -> Optional[Locator]:
        """
        XPath derived from the chain of locators that found this element.

        None unless every search in the chain matched exactly one element;
        a query that matched several could re-find a different one later.
        """
        if self._descriptor_locator is _UNSET:
            usable = self.chain and self.chain_unique
            self._descriptor_locator = chain_to_xpath(self.chain) if usable else None
        return self._descriptor_locator

    @property
    def fallback_locator(self) -> Optional[Locator]:
        """
        Ancestor id-path XPath, e.g. ``//form[@id='f']/input[@id='q']``.

        Computed once. Returns None if it was never computed or could not be
        (no id on the element, or the element was already stale).
        """
        return None if self._fallback_locator is _UNSET else self._fallback_locator

    def _prime_fallback_locator(self) -> None:
        if self._fallback_locator is not _UNSET:
            return
        try:
            self._fallback_locator = self._derive_fallback_locator(self.reference)
        except BrowserFailure as e:
            if e.kind is FailureKind.TRANSPORT:
                raise
            logger.debug(f"No fallback locator for {self!r}: {e}")
            self._fallback_locator = None

    def _derive_fallback_locator(self, ref: Any) -> Optional[Locator]:
        own_id = (self._client.get_attribute(ref, "id") or "").strip()
        if not own_id:
            return None

        steps = [f"{self._client.get_tag_name(ref).lower()}[@id={xpath_literal(own_id)}]"]
        current = ref
        while True:
            parent = self._client.execute_script(PARENT_SCRIPT, current)
            if parent is None:
                # Reached the document root.
                return Locator.xpath("/" + "/".join(reversed(steps)))
            parent_id = (self._client.get_attribute(parent, "id") or "").strip()
            if not parent_id:
                return Locator.xpath("//" + "/".join(reversed(steps)))
            steps.append(f"{self._client.get_tag_name(parent).lower()}[@id={xpath_literal(parent_id)}]")
            current = parent

    @exclusive_session_access
    def is_stale(self) -> bool:
        """Probe the current reference; never reacquires."""
        try:
            self._client.is_enabled(self.reference)
        except BrowserFailure as e:
            if e.kind is FailureKind.STALE:
                return True
            raise
        return False

    @exclusive_session_access
    def reacquire(self) -> bool:
        """
        Point this handle at a fresh reference for the same logical element.

        Strategies, first unique match wins: the originating locator, the
        XPath derived from the locator chain, the ancestor id-path. A handle
        whose reference is still valid is left alone.

        Returns:
            True if the handle now holds a valid reference.
        """
        if not self.is_stale():
            return True

        tried = set()
        for strategy, locator in (
            ("originating locator", self.originating_locator),
            ("locator chain", self.descriptor_locator),
            ("ancestor ids", self.fallback_locator),
        ):
            if locator is None or locator in tried:
                continue
            tried.add(locator)
            try:
                refs, _, _ = self.session._locate(locator, None, self.session.reacquire_wait, None)
            except BrowserFailure as e:
                if e.kind is FailureKind.TRANSPORT:
                    raise
                logger.warning(f"Reacquiring {self!r} via {strategy} failed: {e}")
                continue
            if len(refs) == 1:
                self.reference = refs[0]
                logger.info(f"Reacquired {self!r} via {strategy} ({locator})")
                return True
            logger.debug(f"Reacquiring {self!r} via {strategy} matched {len(refs)} element(s)")

        logger.info(f"Could not reacquire {self!r}")
        return False

    # ========================================================================
    # Reads
    # ========================================================================

    @property
    def tag_name(self) -> str:
        # Cached forever once read; no session access needed after that.
        if self._tag_name is None:
            self._tag_name = self._fetch_tag_name()
        return self._tag_name

    @retry_on_stale
    def _fetch_tag_name(self, ref) -> str:
        return self._client.get_tag_name(ref)

    @property
    def text(self) -> str:
        return self._get_text()

    @retry_on_stale
    def _get_text(self, ref) -> str:
        return self._client.get_text(ref)

    @retry_on_stale
    def get_attribute(self, ref, name: str) -> Optional[str]:
        return self._client.get_attribute(ref, name)

    @property
    def value(self) -> Optional[str]:
        return self.get_attribute("value")

    @retry_on_stale
    def get_css_value(self, ref, name: str) -> str:
        return self._client.get_css_value(ref, name)

    def class_contains(self, token: str) -> bool:
        """Whether ``token`` is one of the element's classes (whole-word match)."""
        classes = self.get_attribute("class") or ""
        return re.search(r"(?<!\S)" + re.escape(token) + r"(?!\S)", classes) is not None

    @retry_on_stale
    def is_displayed(self, ref) -> bool:
        return self._client.is_displayed(ref)

    @retry_on_stale
    def is_enabled(self, ref) -> bool:
        return self._client.is_enabled(ref)

    @retry_on_stale
    def is_selected(self, ref) -> bool:
        return self._client.is_selected(ref)

    def outer_html(self, pretty: bool = False) -> str:
        html = self._get_outer_html() or ""
        if pretty:
            return BeautifulSoup(html, "html.parser").prettify()
        return html

    @retry_on_stale
    def _get_outer_html(self, ref) -> str:
        return self._client.execute_script(OUTER_HTML_SCRIPT, ref)

    # ========================================================================
    # Actions
    # ========================================================================

    def click(self, wait_for_page_load: bool = False) -> "ElementHandle":
        self._click()
        if wait_for_page_load:
            self.session.wait_for_page_load()
        return self

    @retry_on_stale
    def _click(self, ref) -> None:
        self._client.click(ref)

    @retry_on_stale
    def javascript_click(self, ref) -> "ElementHandle":
        """Click through JavaScript, bypassing overlays that intercept real clicks."""
        self._client.execute_script(CLICK_SCRIPT, ref)
        return self

    @retry_on_stale
    def clear(self, ref) -> "ElementHandle":
        self._client.clear(ref)
        return self

    @retry_on_stale
    def send_keys(self, ref, text: str) -> "ElementHandle":
        self._client.send_keys(ref, text)
        return self

    @retry_on_stale
    def blur(self, ref) -> "ElementHandle":
        self._client.execute_script(BLUR_SCRIPT, ref)
        return self

    @retry_on_stale
    def scroll_into_view(self, ref) -> "ElementHandle":
        self._client.execute_script(SCROLL_INTO_VIEW_SCRIPT, ref)
        return self

    # ========================================================================
    # Descendants
    # ========================================================================

    def find(self, locator: Locator, **kwargs):
        """``SessionHandle.find`` scoped to this element."""
        return self.session.find(locator, scope=self, **kwargs)

    def find_one(self, locator: Locator, **kwargs):
        """``SessionHandle.find_one`` scoped to this element."""
        return self.session.find_one(locator, scope=self, **kwargs)

    # ========================================================================
    # Waits
    # ========================================================================

    @exclusive_session_access
    def _wait(self, predicate, wait, message: str) -> "ElementHandle":
        self.session.waiter.wait(
            predicate,
            wait or self.session.default_wait,
            message=f"{message} on {self!r}",
            locator=self.originating_locator,
        )
        return self

    def wait_for_attribute(
        self,
        name: str,
        value: Optional[str] = None,
        *,
        case_sensitive: bool = True,
        equal: bool = True,
        wait=None,
    ) -> "ElementHandle":
        """
        Wait for an attribute to (not) exist, or to (not) equal ``value``.

        With ``value=None`` this waits for the attribute to be present
        (``equal=True``) or absent (``equal=False``).
        """

        def check():
            current = self.get_attribute(name)
            if value is None:
                return (current is not None) == equal
            if current is None:
                return not equal
            if case_sensitive:
                return (current == value) == equal
            return (current.lower() == value.lower()) == equal

        wanted = "present" if value is None else repr(value)
        return self._wait(check, wait, f"Waiting for @{name} {'==' if equal else '!='} {wanted}")

    def wait_for_value(self, value: str, *, case_sensitive: bool = True, equal: bool = True, wait=None) -> "ElementHandle":
        return self.wait_for_attribute("value", value, case_sensitive=case_sensitive, equal=equal, wait=wait)

    def wait_for_class(self, token: str, *, present: bool = True, wait=None) -> "ElementHandle":
        return self._wait(
            lambda: self.class_contains(token) == present,
            wait,
            f"Waiting for class {token!r} to be {'present' if present else 'absent'}",
        )

    def wait_for_visibility(self, visible: bool = True, *, wait=None) -> "ElementHandle":
        """Wait until displayed (or hidden). An element that is gone for good counts as hidden."""

        def check():
            try:
                return self.is_displayed() == visible
            except BrowserFailure as e:
                if e.kind is FailureKind.STALE and not visible:
                    return True
                raise

        return self._wait(check, wait, f"Waiting for {'visibility' if visible else 'invisibility'}")

    def wait_for_clickable(self, *, wait=None) -> "ElementHandle":
        return self._wait(lambda: self.is_displayed() and self.is_enabled(), wait, "Waiting to be clickable")

    def wait_for_unload(self, *, wait=None) -> "ElementHandle":
        """Wait for the current reference to go stale (e.g. after navigation)."""
        return self._wait(self.is_stale, wait, "Waiting for unload")


__all__ = ["ElementHandle"]
