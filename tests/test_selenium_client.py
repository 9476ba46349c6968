# tests/test_selenium_client.py
from unittest.mock import MagicMock

import pytest
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    JavascriptException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from resilient_browser import BrowserFailure, FailureKind, Locator, SeleniumDriverClient
from resilient_browser.driver import classify_exception
from resilient_browser.driver.selenium_client import get_by_selector


def _element():
    return MagicMock(spec=WebElement)


@pytest.fixture
def driver():
    return MagicMock()


@pytest.fixture
def client(driver):
    return SeleniumDriverClient(driver)


# ------------------------------
# exception classification
# ------------------------------

@pytest.mark.parametrize(
    "exc, reference, kind",
    [
        (StaleElementReferenceException("gone"), True, FailureKind.STALE),
        (NoSuchElementException("nope"), False, FailureKind.NOT_FOUND),
        (NoSuchElementException("nope"), True, FailureKind.STALE),
        (ElementClickInterceptedException("covered"), True, FailureKind.NOT_INTERACTABLE),
        (JavascriptException("syntax"), False, FailureKind.JAVASCRIPT),
        (TimeoutException("slow"), False, FailureKind.TIMEOUT),
        (WebDriverException("element reference not seen before: abc"), True, FailureKind.STALE),
        (WebDriverException("element reference not seen before: abc"), False, FailureKind.TRANSPORT),
        (WebDriverException("chrome not reachable"), True, FailureKind.TRANSPORT),
    ],
)
def test_classify_exception(exc, reference, kind):
    assert classify_exception(exc, reference=reference) is kind


def test_every_locator_kind_maps_to_a_by_strategy():
    assert get_by_selector(Locator.css("#a")) == By.CSS_SELECTOR
    assert get_by_selector(Locator.xpath("//a")) == By.XPATH
    assert get_by_selector(Locator.class_name("a")) == By.CLASS_NAME
    assert get_by_selector(Locator.partial_link_text("a")) == By.PARTIAL_LINK_TEXT


# ------------------------------
# client calls
# ------------------------------

def test_find_all_document_and_scoped(client, driver):
    first, second = _element(), _element()
    driver.find_elements.return_value = [first, second]
    scope = _element()
    scope.find_elements.return_value = [first]

    assert client.find_all(None, Locator.by_id("q")) == [first, second]
    driver.find_elements.assert_called_once_with(By.ID, "q")

    assert client.find_all(scope, Locator.tag("input")) == [first]
    scope.find_elements.assert_called_once_with(By.TAG_NAME, "input")


def test_stale_scope_becomes_stale_failure(client):
    scope = _element()
    scope.find_elements.side_effect = StaleElementReferenceException("gone")

    with pytest.raises(BrowserFailure) as info:
        client.find_all(scope, Locator.tag("input"))

    assert info.value.kind is FailureKind.STALE
    assert info.value.locator == Locator.tag("input")
    assert isinstance(info.value.__cause__, StaleElementReferenceException)


def test_element_operations_translate_failures(client):
    ref = _element()
    ref.click.side_effect = ElementClickInterceptedException("overlay")
    ref.is_enabled.side_effect = StaleElementReferenceException("gone")

    with pytest.raises(BrowserFailure) as click_info:
        client.click(ref)
    with pytest.raises(BrowserFailure) as probe_info:
        client.is_enabled(ref)

    assert click_info.value.kind is FailureKind.NOT_INTERACTABLE
    assert probe_info.value.kind is FailureKind.STALE


def test_driver_level_failures_are_transport(client, driver):
    driver.get.side_effect = WebDriverException("connection refused")

    with pytest.raises(BrowserFailure) as info:
        client.navigate("https://example.com/")

    assert info.value.kind is FailureKind.TRANSPORT
    assert "connection refused" in info.value.message


def test_reads_delegate_to_web_element(client, driver):
    ref = _element()
    ref.get_attribute.return_value = "user"
    ref.value_of_css_property.return_value = "block"
    ref.text = "Hello"
    ref.tag_name = "INPUT"
    driver.title = "Title"
    driver.current_url = "https://example.com/"

    assert client.get_attribute(ref, "name") == "user"
    assert client.get_css_value(ref, "display") == "block"
    assert client.get_text(ref) == "Hello"
    assert client.get_tag_name(ref) == "INPUT"
    assert client.get_title() == "Title"
    assert client.get_current_url() == "https://example.com/"


def test_execute_script_with_element_argument_can_be_stale(client, driver):
    ref = _element()
    driver.execute_script.side_effect = NoSuchElementException("detached")

    with pytest.raises(BrowserFailure) as with_ref:
        client.execute_script("return arguments[0].outerHTML;", ref)
    with pytest.raises(BrowserFailure) as without_ref:
        client.execute_script("return document.title;")

    assert with_ref.value.kind is FailureKind.STALE
    assert without_ref.value.kind is FailureKind.NOT_FOUND


def test_requires_driver():
    with pytest.raises(ValueError):
        SeleniumDriverClient(None)
