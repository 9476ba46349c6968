"""The collaborator surface the session/element layer drives."""

import abc
from typing import Any, List, Optional

from ..locator import Locator


class DriverClient(abc.ABC):
    """
    Primitive, single-shot operations against one remote browser session.

    Element references are opaque to callers. Any call taking a reference
    may raise ``BrowserFailure(STALE)`` once that reference no longer
    resolves; implementations must classify every failure they raise with
    a FailureKind so the layer above can tell staleness from transport
    problems.

    Implementations do no waiting, retrying or locking of their own.
    """

    # -- lookup -------------------------------------------------------------

    @abc.abstractmethod
    def find_all(self, scope: Optional[Any], locator: Locator) -> List[Any]:
        """Matches for ``locator`` under ``scope`` (None = whole document); may be empty."""

    # -- element reads ------------------------------------------------------

    @abc.abstractmethod
    def get_attribute(self, ref: Any, name: str) -> Optional[str]: ...

    @abc.abstractmethod
    def get_css_value(self, ref: Any, name: str) -> str: ...

    @abc.abstractmethod
    def get_text(self, ref: Any) -> str: ...

    @abc.abstractmethod
    def get_tag_name(self, ref: Any) -> str: ...

    @abc.abstractmethod
    def is_displayed(self, ref: Any) -> bool: ...

    @abc.abstractmethod
    def is_enabled(self, ref: Any) -> bool: ...

    @abc.abstractmethod
    def is_selected(self, ref: Any) -> bool: ...

    # -- element actions ----------------------------------------------------

    @abc.abstractmethod
    def click(self, ref: Any) -> None: ...

    @abc.abstractmethod
    def clear(self, ref: Any) -> None: ...

    @abc.abstractmethod
    def send_keys(self, ref: Any, text: str) -> None: ...

    # -- session level ------------------------------------------------------

    @abc.abstractmethod
    def execute_script(self, code: str, *args: Any) -> Any: ...

    @abc.abstractmethod
    def get_title(self) -> str: ...

    @abc.abstractmethod
    def get_current_url(self) -> str: ...

    @abc.abstractmethod
    def navigate(self, url: str) -> None: ...

    @abc.abstractmethod
    def refresh(self) -> None: ...

    @abc.abstractmethod
    def quit(self) -> None: ...


__all__ = ["DriverClient"]
