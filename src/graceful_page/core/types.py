"""Type definitions for graceful page handles."""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]

ErrorCallback = Callable[[BaseException], Any]


class RecoveryAction(str, Enum):
    """What the retry loop does after an operation failed."""

    RETRY_IN_PLACE = "retry_in_place"
    RESTART = "restart"
    NON_RETRYABLE = "non_retryable"


class PageProvider(Protocol):
    """Anything that can open a new tab (Browser or BrowserContext)."""

    def new_page(self) -> Awaitable[Any]: ...


class PageSettings(BaseModel):
    """Per-handle settings shared with forked handles."""

    model_config = ConfigDict(frozen=True)

    retry_interval_ms: int = Field(
        default=5000,
        gt=0,
        description="Delay between attempts when the server gives no backoff hint",
    )
    wait_until: WaitUntil = Field(
        default="domcontentloaded",
        description="Default navigation wait condition for goto()",
    )
