import asyncio
import logging

from bs4 import BeautifulSoup

from webpresence.extractors.navigation import (
    classify_link,
    collect_site_links,
    find_splash_entry,
    is_contact_text,
    is_language_splash,
)
from webpresence.mappers.page_mapper import map_html_page
from webpresence.mappers.result_merger import merge_signals, page_signals
from webpresence.schemas.website import CrawlPage, PageType, ScrapedPage, SiteSignals
from webpresence.services.fetch_client import FetchClient

logger = logging.getLogger(__name__)

_CATEGORY_ORDER = (PageType.contact, PageType.about, PageType.privacy, PageType.terms)


def classify_links(links: list[tuple[str, str]]) -> list[CrawlPage]:
    pages = []
    for url, text in links:
        page_type = classify_link(url)
        if page_type is None and is_contact_text(text):
            page_type = PageType.contact
        if page_type is not None:
            pages.append(CrawlPage(url=url, page_type=page_type))
    return pages


def plan_crawl(pages: list[CrawlPage], max_pages: int) -> list[CrawlPage]:
    """First page of each category (contact, about, privacy, terms), then the rest."""
    planned: list[CrawlPage] = []
    for category in _CATEGORY_ORDER:
        first = next((p for p in pages if p.page_type == category), None)
        if first is not None:
            planned.append(first)
    planned.extend(p for p in pages if p not in planned)
    return planned[:max(0, max_pages)]


class SiteCrawler:
    def __init__(
        self,
        fetcher: FetchClient,
        max_pages: int = 5,
        page_retries: int = 2,
        delay: float = 0.5,
    ):
        self._fetcher = fetcher
        self._max_pages = max_pages
        self._page_retries = page_retries
        self._delay = delay

    async def crawl(
        self,
        homepage_url: str,
        homepage_html: str | None = None,
        max_pages: int | None = None,
    ) -> SiteSignals:
        """Homepage signals first, then a bounded set of secondary pages."""
        max_pages = self._max_pages if max_pages is None else max_pages

        home = await self._homepage(homepage_url, homepage_html)
        if home is None:
            return SiteSignals()

        soup = BeautifulSoup(home.html, "html.parser")
        home_url = home.final_url or homepage_url
        classified = classify_links(collect_site_links(soup, home_url))

        contact_page = next((p.url for p in classified if p.page_type == PageType.contact), None)
        if contact_page:
            logger.info("Contact page for %s: %s", home_url, contact_page)

        home_signals = page_signals(home)
        sources = [
            SiteSignals(
                social_links=home_signals.social_links,
                email=home_signals.email,
                phone=home_signals.phone,
                contact_page=contact_page,
                visited_pages=(home_url,),
            )
        ]

        for target in plan_crawl(classified, max_pages):
            await asyncio.sleep(self._delay)
            page = await self._scrape(target)
            if page is None:
                continue
            signals = page_signals(page)
            sources.append(
                SiteSignals(
                    social_links=signals.social_links,
                    email=signals.email,
                    phone=signals.phone,
                    visited_pages=(target.url,),
                )
            )

        return merge_signals(*sources)

    async def _homepage(self, url: str, html: str | None) -> ScrapedPage | None:
        if html is None:
            result = await self._fetcher.fetch(url, retries=self._page_retries)
            if not result.ok:
                logger.warning("Homepage %s unavailable: %s", url, result.error)
                return None
            url, html = result.final_url, result.html

        soup = BeautifulSoup(html, "html.parser")
        if is_language_splash(soup):
            entry = find_splash_entry(soup, url)
            if entry and entry.rstrip("/") != url.rstrip("/"):
                result = await self._fetcher.fetch(entry, retries=self._page_retries)
                if result.ok:
                    logger.info("Following language splash %s -> %s", url, result.final_url)
                    url, html = result.final_url, result.html

        return map_html_page(url, html, "crawl", final_url=url)

    async def _scrape(self, target: CrawlPage) -> ScrapedPage | None:
        try:
            result = await self._fetcher.fetch(target.url, retries=self._page_retries)
            if not result.ok:
                logger.warning("Skipping %s page %s: %s", target.page_type, target.url, result.error)
                return None
            page = map_html_page(target.url, result.html, "crawl", final_url=result.final_url)
        except Exception as exc:
            logger.warning("Skipping %s page %s: %s", target.page_type, target.url, exc)
            return None
        logger.debug("Scraped %s page %s", target.page_type, target.url)
        return page
