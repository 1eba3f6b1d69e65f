import logging
import re

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Substrings that mark placeholder, error and splash pages
_INVALID_PHRASES = (
    "stay tuned", "coming soon", "under construction", "home page", "homepage",
    "main page", "loading", "please wait", "redirecting",
    "403", "404", "500", "502", "503", "forbidden", "not found", "error",
    "access denied", "unauthorized", "bad gateway", "service unavailable",
    "untitled", "new page", "test page",
)

# Whole values that are generic page titles rather than names
_GENERIC_NAMES = frozenset({
    "welcome", "home", "index", "default", "company", "website", "site",
})

_BRAND_SELECTORS = (
    ".navbar-brand", ".brand", ".site-title", ".company-name",
    ".logo-text", "header .name", "nav .brand-name", ".header-brand",
)

_LOGO_SELECTORS = (
    'img[alt*="logo" i]', "img.logo", ".logo img", ".brand img",
    ".navbar-brand img", "header img", ".site-logo img",
)

_TITLE_SEPARATORS_RE = re.compile(r"\s+[-–—:·•]\s+|\s*\|\s*")
_HTTP_ERROR_RE = re.compile(r"^\d{3}\s*[-–—]\s*")
_TRADEMARKS_RE = re.compile(r"[®™©]")


def is_valid_company_name(name: str | None) -> bool:
    if not name:
        return False
    name = name.strip()
    if len(name) < 2 or len(name) > 100:
        return False
    lower = name.lower()
    if lower in _GENERIC_NAMES:
        return False
    if any(phrase in lower for phrase in _INVALID_PHRASES):
        return False
    digits = sum(c.isdigit() for c in name)
    if digits > len(name) / 2:
        return False
    if _HTTP_ERROR_RE.match(name):
        return False
    return True


def clean_company_name(name: str) -> str:
    name = _TRADEMARKS_RE.sub("", name)
    return re.sub(r"\s+", " ", name).strip()


def name_from_domain(domain: str) -> str:
    """acme-robotics.co.uk -> Acme Robotics"""
    host = domain.lower().removeprefix("www.")
    label = host.split(".")[0]
    words = [w for w in re.split(r"[-_]", label) if w]
    return " ".join(w.capitalize() for w in words)


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content.strip() if content else None


def _candidates(soup: BeautifulSoup):
    yield "og:site_name", _meta_content(soup, property="og:site_name")
    yield "application-name", _meta_content(soup, name="application-name")

    for selector in _BRAND_SELECTORS:
        el = soup.select_one(selector)
        if el is not None:
            text = el.get_text(" ", strip=True)
            if len(text) < 50:
                yield f"brand ({selector})", text

    for selector in _LOGO_SELECTORS:
        el = soup.select_one(selector)
        if el is not None and el.get("alt"):
            yield f"logo-alt ({selector})", re.sub(r"\s*logo\s*", " ", el["alt"], flags=re.I).strip()

    h1 = soup.find("h1")
    if h1 is not None:
        text = h1.get_text(" ", strip=True)
        if len(text) < 50:
            yield "h1", text

    if soup.title is not None:
        for part in _TITLE_SEPARATORS_RE.split(soup.title.get_text(" ", strip=True)):
            if len(part.strip()) >= 3:
                yield "title", part


def find_company_name(soup: BeautifulSoup) -> str | None:
    """First valid name from the page markup, or None."""
    for source, candidate in _candidates(soup):
        if not candidate:
            continue
        cleaned = clean_company_name(candidate)
        if is_valid_company_name(cleaned):
            logger.debug("Company name from %s: %r", source, cleaned)
            return cleaned
    return None


def extract_company_name(soup: BeautifulSoup, domain: str) -> str:
    """Name from markup, falling back to the title-cased first label of the domain."""
    return find_company_name(soup) or name_from_domain(domain)
