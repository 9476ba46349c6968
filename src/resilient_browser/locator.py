"""Locators and XPath derivation for element reacquisition."""

import re
import enum
from dataclasses import dataclass
from typing import Iterable, Optional

import logging
logger = logging.getLogger(__name__)


class LocatorKind(enum.Enum):
    ID = "id"
    CSS = "css"
    XPATH = "xpath"
    TAG = "tag"
    NAME = "name"
    CLASS_NAME = "class"
    LINK_TEXT = "link_text"
    PARTIAL_LINK_TEXT = "partial_link_text"


@dataclass(frozen=True)
class Locator:
    """
    An immutable search query.

    Two locators are interchangeable only if both kind and query match exactly,
    which is what the generated ``__eq__``/``__hash__`` give us.
    """

    kind: LocatorKind
    query: str

    def __post_init__(self):
        if not isinstance(self.kind, LocatorKind):
            raise ValueError(f"Unsupported locator kind: {self.kind!r}")
        if not isinstance(self.query, str) or not self.query.strip():
            raise ValueError("Locator query must be a non-empty string")

    def __str__(self) -> str:
        return f"By.{self.kind.value}: {self.query}"

    @classmethod
    def parse(cls, selector: str, selector_type: str = "css") -> "Locator":
        """Build a Locator from a (selector, selector_type) pair, e.g. ("#q", "css")."""
        try:
            kind = LocatorKind((selector_type or "").strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported selector type: {selector_type}") from None
        return cls(kind, selector)

    @classmethod
    def by_id(cls, value: str) -> "Locator":
        return cls(LocatorKind.ID, value)

    @classmethod
    def css(cls, value: str) -> "Locator":
        return cls(LocatorKind.CSS, value)

    @classmethod
    def xpath(cls, value: str) -> "Locator":
        return cls(LocatorKind.XPATH, value)

    @classmethod
    def tag(cls, value: str) -> "Locator":
        return cls(LocatorKind.TAG, value)

    @classmethod
    def name(cls, value: str) -> "Locator":
        return cls(LocatorKind.NAME, value)

    @classmethod
    def class_name(cls, value: str) -> "Locator":
        return cls(LocatorKind.CLASS_NAME, value)

    @classmethod
    def link_text(cls, value: str) -> "Locator":
        return cls(LocatorKind.LINK_TEXT, value)

    @classmethod
    def partial_link_text(cls, value: str) -> "Locator":
        return cls(LocatorKind.PARTIAL_LINK_TEXT, value)


# ============================================================================
# XPath derivation
# ============================================================================

_CLASS_PREDICATE = "[contains(concat(' ',normalize-space(@class),' '),' {} ')]"

_CSS_COMBINATOR = re.compile(r"\s*(>)\s*|\s+")
_CSS_COMPOUND = re.compile(r"^(?P<tag>\*|[A-Za-z][\w-]*)?(?P<rest>(?:[#.][\w-]+|:nth-child\(\d+\))*)$")
_CSS_SIMPLE = re.compile(r"[#.][\w-]+|:nth-child\((\d+)\)")


def xpath_literal(value: str) -> str:
    """Quote ``value`` as an XPath 1.0 string literal."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    pieces = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in pieces) + ")"


def _css_compound_to_step(compound: str) -> Optional[str]:
    m = _CSS_COMPOUND.match(compound)
    if not m:
        return None
    tag = m.group("tag") or "*"
    position = ""
    predicates = []
    for simple in _CSS_SIMPLE.finditer(m.group("rest")):
        token = simple.group(0)
        if simple.group(1):
            position = f"[{simple.group(1)}]"
        elif token.startswith("#"):
            predicates.append(f"[@id={xpath_literal(token[1:])}]")
        else:
            predicates.append(_CLASS_PREDICATE.format(token[1:]))
    if position:
        # :nth-child counts every sibling, not just siblings of the same tag.
        head = "*" + position
        if tag != "*":
            head += f"[self::{tag}]"
        return head + "".join(predicates)
    return tag + "".join(predicates)


def css_to_xpath(css: str) -> Optional[str]:
    """
    Translate a simple CSS selector into an equivalent descendant XPath.

    Supports tag names, ``#id``, ``.class``, ``:nth-child(n)``, the child
    combinator and descendant whitespace. Anything else returns None.
    """
    pieces = _CSS_COMBINATOR.split(css.strip())
    # re.split with one group yields: compound, sep, compound, sep, ...
    compounds = pieces[0::2]
    separators = pieces[1::2]
    steps = []
    for index, compound in enumerate(compounds):
        step = _css_compound_to_step(compound)
        if step is None:
            logger.warning(f"Cannot translate CSS selector to XPath: {css!r}")
            return None
        axis = "//" if index == 0 or separators[index - 1] != ">" else "/"
        steps.append(axis + step)
    return "".join(steps)


def locator_to_xpath(locator: Locator) -> Optional[str]:
    """Best-effort XPath for a single locator, relative to whatever it was searched from."""
    kind, query = locator.kind, locator.query
    if kind is LocatorKind.ID:
        return f"//*[@id={xpath_literal(query)}]"
    if kind is LocatorKind.NAME:
        return f"//*[@name={xpath_literal(query)}]"
    if kind is LocatorKind.TAG:
        return f"//{query}"
    if kind is LocatorKind.CLASS_NAME:
        return "//*" + _CLASS_PREDICATE.format(query)
    if kind is LocatorKind.LINK_TEXT:
        return f"//a[normalize-space(.)={xpath_literal(query)}]"
    if kind is LocatorKind.PARTIAL_LINK_TEXT:
        return f"//a[contains(., {xpath_literal(query)})]"
    if kind is LocatorKind.CSS:
        return css_to_xpath(query)
    query = query.strip()
    if query.startswith("."):
        return "/" + query
    if not query.startswith(("/", "(")):
        return "//" + query
    return query


def scoped_locator(locator: Locator) -> Locator:
    """
    The locator to send when searching below an element.

    WebDriver evaluates an XPath starting with ``/`` from the document root
    even when searching from an element, so it is anchored with ``.``.
    """
    query = locator.query.strip()
    if locator.kind is LocatorKind.XPATH and query.startswith("/"):
        return Locator.xpath("." + query)
    return locator


def chain_to_xpath(chain: Iterable[Locator]) -> Optional[Locator]:
    """
    Collapse a chain of locators (outermost search first) into one XPath locator.

    Returns None when any link cannot be translated.
    """
    xpath = ""
    for locator in chain:
        part = locator_to_xpath(locator)
        if part is None:
            return None
        if xpath and locator.kind is LocatorKind.XPATH and locator.query.strip().startswith("("):
            # A parenthesized expression cannot be appended to a path.
            return None
        xpath += part
    return Locator.xpath(xpath) if xpath else None


__all__ = [
    "LocatorKind",
    "Locator",
    "xpath_literal",
    "css_to_xpath",
    "locator_to_xpath",
    "chain_to_xpath",
    "scoped_locator",
]
