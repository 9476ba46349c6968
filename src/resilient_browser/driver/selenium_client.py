"""Selenium-backed DriverClient."""

import contextlib
from typing import Any, List, Optional

from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    InvalidElementStateException,
    JavascriptException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from .client import DriverClient
from ..errors import BrowserFailure, FailureKind
from ..locator import Locator, LocatorKind

import logging
logger = logging.getLogger(__name__)


_BY = {
    LocatorKind.CSS: By.CSS_SELECTOR,
    LocatorKind.XPATH: By.XPATH,
    LocatorKind.ID: By.ID,
    LocatorKind.NAME: By.NAME,
    LocatorKind.TAG: By.TAG_NAME,
    LocatorKind.CLASS_NAME: By.CLASS_NAME,
    LocatorKind.LINK_TEXT: By.LINK_TEXT,
    LocatorKind.PARTIAL_LINK_TEXT: By.PARTIAL_LINK_TEXT,
}

# Older drivers report a stale element on descendant searches this way.
_UNKNOWN_REFERENCE_PREFIX = "element reference not seen before"


def get_by_selector(locator: Locator) -> str:
    return _BY[locator.kind]


def classify_exception(exc: BaseException, *, reference: bool = False) -> FailureKind:
    """
    Map a Selenium exception to a FailureKind.

    Args:
        exc: The exception raised by Selenium
        reference: Whether the failed call was made against an element reference
    """
    if isinstance(exc, StaleElementReferenceException):
        return FailureKind.STALE
    if isinstance(exc, NoSuchElementException):
        return FailureKind.STALE if reference else FailureKind.NOT_FOUND
    if isinstance(exc, (ElementNotInteractableException, InvalidElementStateException, ElementClickInterceptedException)):
        return FailureKind.NOT_INTERACTABLE
    if isinstance(exc, JavascriptException):
        return FailureKind.JAVASCRIPT
    if isinstance(exc, TimeoutException):
        return FailureKind.TIMEOUT
    message = (getattr(exc, "msg", None) or str(exc) or "").lower()
    if reference and message.startswith(_UNKNOWN_REFERENCE_PREFIX):
        return FailureKind.STALE
    return FailureKind.TRANSPORT


@contextlib.contextmanager
def _translated(operation: str, *, reference: bool = False, locator: Optional[Locator] = None):
    try:
        yield
    except WebDriverException as e:
        kind = classify_exception(e, reference=reference)
        logger.debug(f"{operation} failed ({kind.value}): {e.__class__.__name__}")
        raise BrowserFailure(kind, f"{operation}: {getattr(e, 'msg', None) or e}", locator=locator) from e


class SeleniumDriverClient(DriverClient):
    """
    Adapts an already-started Selenium WebDriver.

    Element references are Selenium ``WebElement`` objects. Starting and
    stopping the browser process is the caller's business.
    """

    def __init__(self, driver: WebDriver):
        if driver is None:
            raise ValueError("driver is required")
        self.driver = driver

    def find_all(self, scope: Optional[WebElement], locator: Locator) -> List[WebElement]:
        by = get_by_selector(locator)
        with _translated("find_all", reference=scope is not None, locator=locator):
            context = self.driver if scope is None else scope
            return list(context.find_elements(by, locator.query) or [])

    def get_attribute(self, ref: WebElement, name: str) -> Optional[str]:
        with _translated("get_attribute", reference=True):
            return ref.get_attribute(name)

    def get_css_value(self, ref: WebElement, name: str) -> str:
        with _translated("get_css_value", reference=True):
            return ref.value_of_css_property(name)

    def get_text(self, ref: WebElement) -> str:
        with _translated("get_text", reference=True):
            return ref.text

    def get_tag_name(self, ref: WebElement) -> str:
        with _translated("get_tag_name", reference=True):
            return ref.tag_name

    def is_displayed(self, ref: WebElement) -> bool:
        with _translated("is_displayed", reference=True):
            return ref.is_displayed()

    def is_enabled(self, ref: WebElement) -> bool:
        with _translated("is_enabled", reference=True):
            return ref.is_enabled()

    def is_selected(self, ref: WebElement) -> bool:
        with _translated("is_selected", reference=True):
            return ref.is_selected()

    def click(self, ref: WebElement) -> None:
        with _translated("click", reference=True):
            ref.click()

    def clear(self, ref: WebElement) -> None:
        with _translated("clear", reference=True):
            ref.clear()

    def send_keys(self, ref: WebElement, text: str) -> None:
        with _translated("send_keys", reference=True):
            ref.send_keys(text)

    def execute_script(self, code: str, *args: Any) -> Any:
        refers = any(isinstance(a, WebElement) for a in args)
        with _translated("execute_script", reference=refers):
            return self.driver.execute_script(code, *args)

    def get_title(self) -> str:
        with _translated("get_title"):
            return self.driver.title

    def get_current_url(self) -> str:
        with _translated("get_current_url"):
            return self.driver.current_url

    def navigate(self, url: str) -> None:
        with _translated("navigate"):
            self.driver.get(url)

    def refresh(self) -> None:
        with _translated("refresh"):
            self.driver.refresh()

    def quit(self) -> None:
        with _translated("quit"):
            self.driver.quit()


__all__ = [
    "SeleniumDriverClient",
    "classify_exception",
    "get_by_selector",
]
