"""CLI entrypoint: open a URL through a GracefulPage and list its links."""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from playwright.async_api import async_playwright

from ..browser.errors import GotoError
from ..browser.page import GracefulPage
from ..core.config import load_settings

# Load environment variables
load_dotenv()

RETRY_INTERVAL_ENV = "GRACEFUL_PAGE_RETRY_INTERVAL_MS"

LINKS_SCRIPT = "() => Array.from(document.querySelectorAll('a'), a => a.href)"


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration.

    Args:
        level: Logging level
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Graceful Page - navigate with automatic retries and print page links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print every link on a page
  graceful-page http://example.net

  # Retry every second instead of every 5 seconds
  graceful-page http://example.net --retry-interval-ms 1000

  # Watch the browser while it works
  graceful-page http://example.net --no-headless
        """,
    )

    parser.add_argument("url", type=str, help="URL to open")

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: configs/default.yaml)",
    )

    parser.add_argument(
        "--retry-interval-ms",
        type=int,
        help=f"Pause between attempts (default: ${RETRY_INTERVAL_ENV} or 5000)",
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in headed mode (visible)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


async def collect_links(page: GracefulPage, url: str) -> list[str]:
    """Navigate to ``url`` and return the href of every anchor on it."""

    async def visit() -> list[str]:
        await page.goto(url)
        links: list[str] = await page.evaluate(LINKS_SCRIPT)
        return links

    return await page.auto_retry_when_failed(visit)


async def main_async(argv: list[str] | None = None) -> int:
    """Async main function.

    Returns:
        Exit code
    """
    args = parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        retry_interval_ms = args.retry_interval_ms
        if retry_interval_ms is None and os.getenv(RETRY_INTERVAL_ENV):
            retry_interval_ms = int(os.environ[RETRY_INTERVAL_ENV])

        settings = load_settings(
            config_path=args.config,
            overrides={"retry_interval_ms": retry_interval_ms},
        )

        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=not args.no_headless)
            try:
                async with GracefulPage(browser, settings=settings) as page:
                    links = await collect_links(page, args.url)
            finally:
                await browser.close()

        logger.info(f"Found {len(links)} links on {args.url}")
        print(json.dumps(links, indent=2))
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except GotoError as e:
        logger.error(f"Gave up on {e.details.url}: {e}")
        return 1

    except Exception as e:
        logger.error(f"Failed: {e}", exc_info=True)
        return 1


def main() -> None:
    """Main CLI entrypoint."""
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
