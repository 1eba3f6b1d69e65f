"""Browser automation tiers: a managed Crawlee crawler and a bare Playwright fallback.

Both tiers share one process-wide slot, so at most one Chromium instance is
alive per process. Every launch is closed before the tier returns.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any
from uuid import uuid4

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webpresence.exceptions.custom import AutomationFailure
from webpresence.mappers.page_mapper import map_html_page
from webpresence.schemas.website import ScrapedPage
from webpresence.services.fetch_client import USER_AGENTS

logger = logging.getLogger(__name__)

# Single-concurrency policy for every browser launch in the process
browser_slot = asyncio.Semaphore(1)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
]

FOOTER_SELECTOR = "footer, .footer, #footer"
FOOTER_WAIT_MS = 5000
SETTLE_DELAY = 3.0  # seconds, when no footer shows up
NAVIGATION_TIMEOUT_MS = 30000


@asynccontextmanager
async def launched_browser() -> AsyncIterator[Browser]:
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=True, args=LAUNCH_ARGS)
        try:
            yield browser
        finally:
            await browser.close()


async def read_live_page(page: Page, url: str, strategy: str) -> ScrapedPage:
    """Wait for the footer (or a fixed delay) and extract from the rendered DOM."""
    await page.wait_for_load_state("domcontentloaded")
    try:
        await page.wait_for_selector(FOOTER_SELECTOR, timeout=FOOTER_WAIT_MS)
    except PlaywrightTimeoutError:
        logger.debug("No footer on %s after %dms", url, FOOTER_WAIT_MS)
        await asyncio.sleep(SETTLE_DELAY)
    html = await page.content()
    return map_html_page(url, html, strategy, final_url=page.url)


def build_crawler(max_retries: int, timeout: float) -> Any:
    # Crawlee pulls in a lot at import time; only load it when the tier runs
    from crawlee import ConcurrencySettings
    from crawlee.crawlers import PlaywrightCrawler

    return PlaywrightCrawler(
        max_request_retries=max_retries,
        request_handler_timeout=timedelta(seconds=timeout),
        concurrency_settings=ConcurrencySettings(max_concurrency=1, desired_concurrency=1),
        headless=True,
        browser_launch_options={"args": LAUNCH_ARGS},
        configure_logging=False,
    )


class ManagedCrawlerStrategy:
    """Crawlee-driven rendering with built-in retries."""

    name = "managed_crawler"

    def __init__(
        self,
        timeout: float = 60.0,
        max_retries: int = 3,
        slot: asyncio.Semaphore = browser_slot,
        crawler_factory: Callable[[int, float], Any] = build_crawler,
    ):
        self._timeout = timeout
        self._max_retries = max_retries
        self._slot = slot
        self._crawler_factory = crawler_factory

    async def attempt(self, url: str, previous: ScrapedPage | None = None) -> ScrapedPage:
        async with self._slot:
            try:
                return await asyncio.wait_for(self._crawl(url), timeout=self._timeout)
            except asyncio.TimeoutError as exc:
                raise AutomationFailure(f"timed out after {self._timeout}s", self.name) from exc

    async def _crawl(self, url: str) -> ScrapedPage:
        from crawlee import Request

        pages: list[ScrapedPage] = []
        errors: list[str] = []
        crawler = self._crawler_factory(self._max_retries, self._timeout)

        @crawler.router.default_handler
        async def handle(context) -> None:
            pages.append(await read_live_page(context.page, url, self.name))

        @crawler.failed_request_handler
        async def failed(context, error: Exception) -> None:
            errors.append(str(error))

        # Fresh unique key per run so the shared request queue never dedups it
        await crawler.run([Request.from_url(url, unique_key=uuid4().hex)])

        if not pages:
            raise AutomationFailure(errors[-1] if errors else "no page handled", self.name)
        return pages[0]


class DirectBrowserStrategy:
    """Plain Playwright lifecycle, used when the managed crawler is off or comes back empty."""

    name = "direct_browser"

    def __init__(self, timeout: float = 60.0, slot: asyncio.Semaphore = browser_slot):
        self._timeout = timeout
        self._slot = slot

    async def attempt(self, url: str, previous: ScrapedPage | None = None) -> ScrapedPage:
        async with self._slot:
            try:
                return await asyncio.wait_for(self._render(url), timeout=self._timeout)
            except asyncio.TimeoutError as exc:
                raise AutomationFailure(f"timed out after {self._timeout}s", self.name) from exc
            except PlaywrightError as exc:
                raise AutomationFailure(exc.message, self.name) from exc

    async def _render(self, url: str) -> ScrapedPage:
        async with launched_browser() as browser:
            context = await browser.new_context(
                user_agent=USER_AGENTS[0],
                viewport={"width": 1920, "height": 1080},
                ignore_https_errors=True,
            )
            page = await context.new_page()
            await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)
            return await read_live_page(page, url, self.name)
