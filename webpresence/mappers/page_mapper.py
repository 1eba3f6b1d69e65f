from bs4 import BeautifulSoup

from webpresence.extractors.contact_info import (
    extract_contact_info,
    extract_contact_info_from_source,
)
from webpresence.extractors.social_links import (
    extract_social_links,
    extract_social_links_from_source,
)
from webpresence.schemas.website import ScrapedPage


def map_html_page(url: str, html: str, strategy: str, final_url: str | None = None) -> ScrapedPage:
    """Run the markup extractors over one page."""
    base_url = final_url or url
    soup = BeautifulSoup(html, "html.parser")
    return ScrapedPage(
        url=url,
        final_url=base_url,
        html=html,
        social_links=extract_social_links(soup, base_url),
        contact=extract_contact_info(soup),
        strategy=strategy,
        success=True,
    )


def map_source_page(url: str, html: str, strategy: str, final_url: str | None = None) -> ScrapedPage:
    """Regex pass over the raw text, for links inside scripts or broken markup."""
    return ScrapedPage(
        url=url,
        final_url=final_url or url,
        html=html,
        social_links=extract_social_links_from_source(html),
        contact=extract_contact_info_from_source(html),
        strategy=strategy,
        success=True,
    )


def failed_page(url: str, strategy: str, error: str | None) -> ScrapedPage:
    return ScrapedPage(url=url, strategy=strategy, success=False, error=error or "unknown error")
