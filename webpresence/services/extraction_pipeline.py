"""Cascade of extraction tiers, cheapest first.

Each tier implements ``attempt(url, previous) -> ScrapedPage``. The cascade
stops at the first tier that finds a social link. A tier that raises is
collapsed into a failed ScrapedPage here, so nothing escapes ``extract``.
"""

import logging
from typing import Protocol

from webpresence.exceptions.custom import AutomationFailure
from webpresence.mappers.page_mapper import failed_page, map_html_page, map_source_page
from webpresence.schemas.website import ScrapedPage
from webpresence.services.fetch_client import FetchClient

logger = logging.getLogger(__name__)


class Strategy(Protocol):
    name: str

    async def attempt(self, url: str, previous: ScrapedPage | None = None) -> ScrapedPage: ...


class FastFetchStrategy:
    name = "fast_fetch"

    def __init__(self, fetcher: FetchClient, timeout: float = 3.0, retries: int = 1):
        self._fetcher = fetcher
        self._timeout = timeout
        self._retries = retries

    async def attempt(self, url: str, previous: ScrapedPage | None = None) -> ScrapedPage:
        result = await self._fetcher.fetch(url, retries=self._retries, timeout=self._timeout)
        if not result.ok:
            return failed_page(url, self.name, result.error)
        return map_html_page(url, result.html, self.name, final_url=result.final_url)


class RawSourceStrategy:
    """Regex scan of the raw text. Reuses the previous tier's body when there is one."""

    name = "raw_source"

    def __init__(self, fetcher: FetchClient):
        self._fetcher = fetcher

    async def attempt(self, url: str, previous: ScrapedPage | None = None) -> ScrapedPage:
        if previous is not None and previous.html:
            return map_source_page(url, previous.html, self.name, final_url=previous.final_url)

        result = await self._fetcher.fetch(url)
        if not result.ok:
            return failed_page(url, self.name, result.error)
        return map_source_page(url, result.html, self.name, final_url=result.final_url)


class ExtractionPipeline:
    def __init__(
        self,
        fast_fetch: Strategy,
        raw_source: Strategy,
        managed_crawler: Strategy | None = None,
        direct_browser: Strategy | None = None,
        use_headless: bool = True,
        fast_mode: bool = False,
    ):
        self._fast_fetch = fast_fetch
        self._raw_source = raw_source
        self._managed_crawler = managed_crawler
        self._direct_browser = direct_browser
        self._use_headless = use_headless
        self._fast_mode = fast_mode

    async def extract(self, url: str, fast_mode: bool = False) -> ScrapedPage:
        """Best page result for *url*. Never raises."""
        fast_mode = fast_mode or self._fast_mode

        first = await self._run(self._fast_fetch, url, None)
        if not self._use_headless or first.has_social_signal:
            return first

        # Fast mode gives up on sites that did not answer the quick fetch
        if fast_mode and not first.success:
            logger.info("Fast mode: %s unreachable, skipping remaining tiers", url)
            return first

        best = first
        for strategy in self._costlier_tiers(fast_mode):
            page = await self._run(strategy, url, best)
            if page.has_social_signal:
                return page
            if page.success:
                best = page

        return best

    def _costlier_tiers(self, fast_mode: bool) -> list[Strategy]:
        tiers: list[Strategy] = [self._raw_source]
        if fast_mode:
            return tiers
        if self._managed_crawler is not None:
            tiers.append(self._managed_crawler)
        if self._direct_browser is not None:
            tiers.append(self._direct_browser)
        return tiers

    async def _run(self, strategy: Strategy, url: str, previous: ScrapedPage | None) -> ScrapedPage:
        try:
            page = await strategy.attempt(url, previous)
        except AutomationFailure as exc:
            logger.warning("Tier %s failed for %s: %s", strategy.name, url, exc.message)
            return failed_page(url, strategy.name, exc.message)
        except Exception as exc:
            logger.exception("Tier %s crashed for %s", strategy.name, url)
            return failed_page(url, strategy.name, str(exc))

        if page.has_social_signal:
            logger.info(
                "Tier %s found %d social links on %s", strategy.name, len(page.social_links), url,
            )
        else:
            logger.debug("Tier %s found no social links on %s", strategy.name, url)
        return page
