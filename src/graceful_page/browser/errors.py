"""Error classification for Playwright navigation and page operations.

Playwright does not raise distinct exception types for most of its
failure modes, so classification works on the rendered message only.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any

from ..core.types import RecoveryAction

# e.g. 'Timeout 30000ms exceeded'
TIMEOUT_PATTERN = re.compile(r"Timeout \w+ exceeded")

PAGE_CRASHED_PATTERN = re.compile(r"page crashed", re.IGNORECASE)

HEAP_COLLECTED_PATTERN = re.compile(
    r"The object has been collected to prevent unbounded heap growth"
)

TRANSIENT_NETWORK_ERRORS = (
    "ERR_INTERNET_DISCONNECTED",
    "ERR_NETWORK_CHANGED",
    "ERR_CONNECTION_RESET",
    "ERR_SOCKET_NOT_CONNECTED",
    "ERR_ABORTED",
    "ERR_ADDRESS_UNREACHABLE",
    "ERR_NETWORK_IO_SUSPENDED",
)


@dataclass
class GotoErrorDetails:
    """Context attached to a GotoError."""

    url: str
    options: dict[str, Any] = field(default_factory=dict)
    response: Any = None


class GotoError(Exception):
    """Navigation got 429 Too Many Requests without a usable Retry-After header."""

    def __init__(self, message: str, details: GotoErrorDetails):
        super().__init__(message)
        self.details = details


def _interrupted_by_itself(message: str, url: str) -> bool:
    url_str = json.dumps(url, ensure_ascii=False)
    return f"Navigation to {url_str} is interrupted by another navigation to {url_str}" in message


def is_transient_network_error(exc: BaseException, url: str) -> bool:
    """Return True if retrying the same navigation on the same page should work."""
    message = str(exc)
    return (
        _interrupted_by_itself(message, url)
        or TIMEOUT_PATTERN.search(message) is not None
        or any(code in message for code in TRANSIENT_NETWORK_ERRORS)
    )


def is_page_crash(exc: BaseException) -> bool:
    """Return True if the tab crashed."""
    return PAGE_CRASHED_PATTERN.search(str(exc)) is not None


def is_engine_memory_reclaimed(exc: BaseException) -> bool:
    """Return True if Playwright dropped a handle to bound its heap."""
    return HEAP_COLLECTED_PATTERN.search(str(exc)) is not None


def classify_navigation_error(exc: BaseException, url: str) -> RecoveryAction:
    """Classify an exception raised while navigating to ``url``.

    Args:
        exc: The exception to classify.
        url: The URL passed to goto().

    Returns:
        RETRY_IN_PLACE for transient network errors and timeouts, RESTART
        for a crashed tab, NON_RETRYABLE for anything else.
    """
    if isinstance(exc, GotoError):
        return RecoveryAction.NON_RETRYABLE
    if is_transient_network_error(exc, url):
        return RecoveryAction.RETRY_IN_PLACE
    if is_page_crash(exc):
        return RecoveryAction.RESTART
    return RecoveryAction.NON_RETRYABLE


def classify_operation_error(exc: BaseException) -> RecoveryAction:
    """Classify an exception raised by a caller-supplied page operation."""
    if is_engine_memory_reclaimed(exc):
        return RecoveryAction.RESTART
    return RecoveryAction.NON_RETRYABLE
