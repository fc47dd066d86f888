"""Shared test helpers."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock


def make_response(
    status: int = 200,
    status_text: str = "OK",
    headers: dict[str, str] | None = None,
) -> MagicMock:
    """Create a Playwright Response double.

    Args:
        status: HTTP status code
        status_text: HTTP status text
        headers: Response headers (looked up case-insensitively)

    Returns:
        MagicMock with the Response attributes GracefulPage reads
    """
    lowered = {k.lower(): v for k, v in (headers or {}).items()}
    response = MagicMock()
    response.status = status
    response.status_text = status_text
    response.header_value = AsyncMock(side_effect=lambda name: lowered.get(name.lower()))
    return response


def make_page(goto_effects: list[Any] | None = None) -> AsyncMock:
    """Create a Playwright Page double.

    Args:
        goto_effects: Successive results of page.goto(); exceptions are raised

    Returns:
        AsyncMock standing in for a Page
    """
    page = AsyncMock()
    if goto_effects is not None:
        page.goto = AsyncMock(side_effect=goto_effects)
    else:
        page.goto = AsyncMock(return_value=make_response())
    return page


def make_provider(*pages: Any) -> MagicMock:
    """Create a Browser double whose new_page() hands out ``pages`` in order.

    With no pages given, every call returns a fresh Page double.
    """
    provider = MagicMock()
    if pages:
        provider.new_page = AsyncMock(side_effect=list(pages))
    else:
        provider.new_page = AsyncMock(side_effect=lambda: make_page())
    return provider
