"""Driver clients: the primitive operations the session layer builds on."""

from .client import DriverClient
from .selenium_client import SeleniumDriverClient, classify_exception

__all__ = [
    "DriverClient",
    "SeleniumDriverClient",
    "classify_exception",
]
