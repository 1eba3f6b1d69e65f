"""Link discovery and page classification for in-site crawling."""

import re
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from webpresence.schemas.website import PageType

# Keyword families matched against link URLs (and link text for contact)
PAGE_KEYWORDS: dict[PageType, tuple[str, ...]] = {
    PageType.contact: (
        "contact", "contact-us", "contactus", "get-in-touch", "reach-us",
        "connect", "kontakt", "contato", "contacto",
    ),
    PageType.about: (
        "about", "about-us", "aboutus", "who-we-are", "our-story", "company",
        "uber-uns", "ueber-uns", "sobre",
    ),
    PageType.privacy: ("privacy", "privacy-policy", "privacypolicy", "datenschutz"),
    PageType.terms: ("terms", "terms-conditions", "terms-of-service", "tos", "agb"),
}

LANGUAGE_WORDS = ("english", "italiano", "français", "deutsch", "español", "nederlands", "português")
SPLASH_ENTRY_WORDS = ("english", "home", "enter")
_SPLASH_ENTRY_RE = re.compile(r"\b(?:" + "|".join(SPLASH_ENTRY_WORDS) + r")\b")
MAX_SPLASH_NAV_LINKS = 5

_NAV_LINK_SELECTOR = "nav a[href], header a[href], .menu a[href], .navigation a[href]"
_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")


def _bare_host(url: str) -> str:
    return urlparse(url).netloc.lower().split(":")[0].removeprefix("www.")


def same_site(url: str, other: str) -> bool:
    return _bare_host(url) == _bare_host(other)


def absolute_link(href: str | None, base_url: str) -> str | None:
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith(_SKIPPED_SCHEMES):
        return None
    url, _ = urldefrag(urljoin(base_url, href))
    if urlparse(url).scheme not in ("http", "https"):
        return None
    return url


def count_nav_links(soup: BeautifulSoup) -> int:
    return len(soup.select(_NAV_LINK_SELECTOR))


def is_language_splash(soup: BeautifulSoup) -> bool:
    """Few navigation links plus multilingual vocabulary."""
    if count_nav_links(soup) >= MAX_SPLASH_NAV_LINKS:
        return False
    body = soup.body or soup
    text = body.get_text(" ").lower()
    return any(word in text for word in LANGUAGE_WORDS)


def find_splash_entry(soup: BeautifulSoup, base_url: str) -> str | None:
    """Link on a splash page that leads to the main (English) content."""
    for a in soup.find_all("a", href=True):
        text = a.get_text(" ", strip=True).lower()
        if _SPLASH_ENTRY_RE.search(text):
            url = absolute_link(a["href"], base_url)
            if url:
                return url
    return None


def classify_link(url: str) -> PageType | None:
    lower = url.lower()
    path = urlparse(lower).path
    for page_type, keywords in PAGE_KEYWORDS.items():
        if any(kw in path for kw in keywords):
            return page_type
    return None


def is_contact_text(text: str) -> bool:
    lower = text.lower()
    return any(kw in lower for kw in PAGE_KEYWORDS[PageType.contact])


def collect_site_links(soup: BeautifulSoup, base_url: str) -> list[tuple[str, str]]:
    """Unique same-site links as (absolute url, link text), in document order."""
    seen: set[str] = set()
    links: list[tuple[str, str]] = []
    for a in soup.find_all("a", href=True):
        url = absolute_link(a["href"], base_url)
        if not url or not same_site(url, base_url):
            continue
        if url.rstrip("/") == base_url.rstrip("/") or url in seen:
            continue
        seen.add(url)
        links.append((url, a.get_text(" ", strip=True)))
    return links
