import asyncio
import logging

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webpresence.services.browser import browser_slot, launched_browser

logger = logging.getLogger(__name__)


class RedirectInspector:
    """Finds JavaScript redirects that plain HTTP redirect following cannot see."""

    def __init__(self, timeout: float = 5.0, slot: asyncio.Semaphore = browser_slot):
        self._timeout = timeout
        self._slot = slot

    async def detect_client_redirect(self, url: str) -> str | None:
        """Rendered URL when it differs from *url*, else None. Best-effort, never raises."""
        try:
            async with self._slot:
                rendered = await asyncio.wait_for(self._render(url), timeout=self._timeout)
        except Exception as exc:
            logger.warning("Client redirect probe failed for %s: %s", url, exc)
            return None

        if rendered and rendered.rstrip("/") != url.rstrip("/"):
            logger.info("Client-side redirect %s -> %s", url, rendered)
            return rendered
        return None

    async def _render(self, url: str) -> str:
        async with launched_browser() as browser:
            page = await browser.new_page(ignore_https_errors=True)
            try:
                await page.goto(url, wait_until="networkidle", timeout=int(self._timeout * 1000))
            except PlaywrightTimeoutError:
                # Pages that never go idle have usually navigated already
                logger.debug("No network quiescence on %s", url)
            return page.url
