"""Self-healing wrapper around a Playwright page."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from playwright.async_api import Page, Response

from ..core.policies import BackoffRequested, RetryPolicy
from ..core.types import ErrorCallback, PageProvider, PageSettings, RecoveryAction
from .errors import (
    GotoError,
    GotoErrorDetails,
    classify_navigation_error,
    classify_operation_error,
)
from .retry_after import parse_retry_after

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_error(error: BaseException) -> None:
    """Default error callback: report a recovered error through the logger."""
    logger.error(f"Recovered from page error: {error}", exc_info=error)


@dataclass(frozen=True)
class _Empty:
    pass


@dataclass(frozen=True)
class _Creating:
    task: "asyncio.Future[Page]"


@dataclass(frozen=True)
class _Ready:
    page: Page


PageSlot = _Empty | _Creating | _Ready

EMPTY = _Empty()


class GracefulPage:
    """A page handle that survives timeouts, network blips, crashes and 429s.

    The underlying Playwright page is created lazily from ``provider`` and
    recreated whenever a failure requires it. Callers hold on to the handle,
    never to the page itself.

    Usage::

        browser = await playwright.chromium.launch()
        async with GracefulPage(browser, retry_interval_ms=1000) as page:
            await page.goto("https://example.net")
            links = await page.evaluate("Array.from(document.links, a => a.href)")
    """

    def __init__(
        self,
        provider: PageProvider,
        page: Page | Awaitable[Page] | None = None,
        retry_interval_ms: int | None = None,
        on_error: ErrorCallback | None = None,
        settings: PageSettings | None = None,
    ):
        """Initialize the handle.

        Args:
            provider: Browser or BrowserContext used to open new pages
            page: Existing page (or awaitable of one) to start with. An
                awaitable that is not yet a future must be passed from
                inside the running event loop.
            retry_interval_ms: Pause between attempts (default 5000),
                overrides ``settings.retry_interval_ms``
            on_error: Called with every recovered error (default: log it)
            settings: Base settings, e.g. from load_settings()

        Raises:
            pydantic.ValidationError: If retry_interval_ms is not positive
        """
        settings = settings or PageSettings()
        if retry_interval_ms is not None:
            settings = PageSettings(
                **{**settings.model_dump(), "retry_interval_ms": retry_interval_ms}
            )

        self.provider = provider
        self.settings = settings
        self.on_error: ErrorCallback = on_error or log_error

        self._slot: PageSlot
        if page is None:
            self._slot = EMPTY
        elif inspect.isawaitable(page):
            self._slot = _Creating(asyncio.ensure_future(page))
        else:
            self._slot = _Ready(page)

    async def __aenter__(self) -> "GracefulPage":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @property
    def retry_interval_ms(self) -> int:
        return self.settings.retry_interval_ms

    def fork(self) -> "GracefulPage":
        """Return a handle with the same configuration and no page of its own."""
        return GracefulPage(self.provider, on_error=self.on_error, settings=self.settings)

    def _is_current(self, page: Page) -> bool:
        return isinstance(self._slot, _Ready) and self._slot.page is page

    async def get_page(self) -> Page:
        """Return the live page, opening one if there is none yet.

        Concurrent callers share a single pending creation: the task is
        stored in the slot before anything is awaited.
        """
        slot = self._slot
        if isinstance(slot, _Ready):
            return slot.page

        if isinstance(slot, _Empty):
            logger.debug("Opening new page")
            slot = _Creating(asyncio.ensure_future(self.provider.new_page()))
            self._slot = slot

        try:
            page = await asyncio.shield(slot.task)
        except Exception:
            if self._slot is slot:
                self._slot = EMPTY
            raise

        if self._slot is slot:
            self._slot = _Ready(page)
        return page

    async def restart(self, **options: Any) -> Page:
        """Close the current page and return a freshly opened one."""
        logger.info("Restarting page")
        await self.close(**options)
        return await self.get_page()

    async def close(self, **options: Any) -> None:
        """Close the current page, if any.

        The slot is cleared before the page is closed, so a get_page()
        issued meanwhile opens a new page. Close failures go to on_error.

        Args:
            **options: Forwarded to Page.close (run_before_unload, reason)
        """
        slot, self._slot = self._slot, EMPTY
        if isinstance(slot, _Empty):
            return

        try:
            page = slot.page if isinstance(slot, _Ready) else await slot.task
            await page.close(**options)
        except Exception as e:
            self.on_error(e)

    def _policy(self, classify: Callable[[BaseException], RecoveryAction]) -> RetryPolicy:
        return RetryPolicy(
            classify=classify,
            retry_interval_ms=self.retry_interval_ms,
            on_error=self.on_error,
            restart=self.restart,
        )

    async def goto(self, url: str, **options: Any) -> Response | None:
        """Graceful version of Page.goto.

        Timeouts and transient network errors are retried on the same page,
        a crashed page is replaced first, and a 429 response is retried after
        the delay given by its Retry-After header.

        Args:
            url: URL to navigate to
            **options: Forwarded to Page.goto; ``wait_until`` defaults to
                ``settings.wait_until``

        Returns:
            The navigation response (None for responses Playwright doesn't report)

        Raises:
            GotoError: On 429 Too Many Requests without a usable Retry-After header
            Exception: Any navigation error that is not known to be transient
        """
        nav_options = {"wait_until": self.settings.wait_until, **options}
        attempted_page: Page | None = None

        async def attempt() -> Response | None:
            nonlocal attempted_page
            attempted_page = None
            page = await self.get_page()
            attempted_page = page

            logger.debug(f"Navigating to {url}")
            response = await page.goto(url, **nav_options)
            if response is not None and response.status == 429:
                header_value = await response.header_value("Retry-After")
                interval = parse_retry_after(header_value)
                if interval:
                    raise BackoffRequested(interval)
                status_text = response.status_text or "Too Many Requests"
                raise GotoError(
                    status_text,
                    GotoErrorDetails(url=url, options=options, response=response),
                )
            return response

        def classify(exc: BaseException) -> RecoveryAction:
            # The page was closed or replaced under this navigation.
            if (
                not isinstance(exc, GotoError)
                and attempted_page is not None
                and not self._is_current(attempted_page)
            ):
                return RecoveryAction.RETRY_IN_PLACE
            return classify_navigation_error(exc, url)

        return await self._policy(classify).run(attempt)

    async def auto_retry_when_failed(self, operation: Callable[[], T | Awaitable[T]]) -> T:
        """Run ``operation``, restarting the page and rerunning it whenever
        Playwright reports the page's objects were collected under heap pressure.

        The operation is rerun from scratch, so it should navigate and read
        everything it needs by itself.
        """
        return await self._policy(classify_operation_error).run(operation)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Proxy to Page.evaluate on the live page."""
        page = await self.get_page()
        return await page.evaluate(expression, arg)

    async def wait_for_selector(self, selector: str, **options: Any) -> Any:
        """Proxy to Page.wait_for_selector on the live page."""
        page = await self.get_page()
        return await page.wait_for_selector(selector, **options)

    async def fill(self, selector: str, value: str, **options: Any) -> None:
        """Proxy to Page.fill on the live page."""
        page = await self.get_page()
        await page.fill(selector, value, **options)

    async def click(self, selector: str, **options: Any) -> None:
        """Proxy to Page.click on the live page."""
        page = await self.get_page()
        await page.click(selector, **options)

    async def content(self) -> str:
        page = await self.get_page()
        return await page.content()

    async def title(self) -> str:
        page = await self.get_page()
        return await page.title()

    async def inner_html(self, selector: str, **options: Any) -> str:
        page = await self.get_page()
        return await page.inner_html(selector, **options)

    async def inner_text(self, selector: str, **options: Any) -> str:
        page = await self.get_page()
        return await page.inner_text(selector, **options)
