"""Social profile link detection.

Platform coverage is data: add a pattern to PLATFORM_PATTERNS (and optionally
SOURCE_PATTERNS) to support a new network. Patterns are ``host[/path-prefix]``
and are tried in list order, most specific first.
"""

import logging
import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from webpresence.schemas.enrichment import Platform

logger = logging.getLogger(__name__)

PLATFORM_PATTERNS: dict[Platform, tuple[str, ...]] = {
    Platform.linkedin: (
        "linkedin.com/company/",
        "linkedin.com/in/",
        "linkedin.com/school/",
        "linkedin.com",
    ),
    Platform.facebook: ("facebook.com/", "fb.com/", "facebook.com", "fb.com"),
    Platform.twitter: ("twitter.com/", "x.com/", "twitter.com", "x.com"),
    Platform.instagram: ("instagram.com/", "instagram.com"),
    Platform.youtube: (
        "youtube.com/channel/",
        "youtube.com/c/",
        "youtube.com/@",
        "youtube.com/user/",
        "youtube.com",
        "youtu.be",
    ),
    Platform.tiktok: ("tiktok.com/@", "tiktok.com"),
    Platform.pinterest: ("pinterest.com/", "pinterest.com"),
    Platform.github: ("github.com/", "github.com"),
    Platform.discord: ("discord.gg/", "discord.com/invite/", "discord.com"),
}

# Path segments that mark share widgets and generic platform pages
EXCLUDED_PATH_SEGMENTS = frozenset({
    "sharer", "sharer.php", "share", "share.php", "intent", "sharearticle",
    "dialog", "search", "login", "signup", "privacy", "terms", "legal",
    "policies", "hashtag", "sharing", "share-offsite",
})

# Leading path segments of share buttons, tracking pixels and embeds
EXCLUDED_PATH_PREFIXES: dict[Platform, tuple[tuple[str, ...], ...]] = {
    Platform.facebook: (("tr",), ("plugins",), ("2008",)),
    Platform.linkedin: (("cws", "share"),),
    # /pin/<id> is a single pin, /pin/create/ the share button
    Platform.pinterest: (("pin",),),
}

# Host prefixes that do not change which profile a URL points to
_HOST_PREFIXES = ("www.", "m.", "mobile.", "web.")

# Used on raw page source, where links may sit in scripts or broken markup
SOURCE_PATTERNS: dict[Platform, re.Pattern[str]] = {
    Platform.linkedin: re.compile(
        r"https?://(?:[a-z]{2,3}\.|www\.)?linkedin\.com/(?:company|in|school)/[a-zA-Z0-9_%-]+", re.I
    ),
    Platform.facebook: re.compile(r"https?://(?:www\.|m\.)?(?:facebook|fb)\.com/[a-zA-Z0-9._-]+", re.I),
    Platform.twitter: re.compile(r"https?://(?:www\.|mobile\.)?(?:twitter|x)\.com/[a-zA-Z0-9_]+", re.I),
    Platform.instagram: re.compile(r"https?://(?:www\.)?instagram\.com/[a-zA-Z0-9._]+", re.I),
    Platform.youtube: re.compile(
        r"https?://(?:www\.|m\.)?youtube\.com/(?:channel/|c/|user/|@)[a-zA-Z0-9_.-]+", re.I
    ),
    Platform.tiktok: re.compile(r"https?://(?:www\.)?tiktok\.com/@[a-zA-Z0-9._]+", re.I),
    Platform.pinterest: re.compile(r"https?://(?:[a-z]{2}\.|www\.)?pinterest\.com/[a-zA-Z0-9_]+", re.I),
    Platform.github: re.compile(r"https?://(?:www\.)?github\.com/[a-zA-Z0-9_-]+", re.I),
    Platform.discord: re.compile(r"https?://(?:www\.)?discord(?:\.gg|\.com/invite)/[a-zA-Z0-9_-]+", re.I),
}

_META_PREFIXES = ("og:", "twitter:", "article:")


def canonicalize_social_url(url: str) -> str:
    """Strip query string and fragment."""
    return url.strip().split("#")[0].split("?")[0]


def _split(url: str) -> tuple[str, str]:
    parsed = urlparse(url.lower())
    host = parsed.netloc.split("@")[-1].split(":")[0]
    for prefix in _HOST_PREFIXES:
        if host.startswith(prefix):
            host = host[len(prefix):]
            break
    return host, parsed.path


def _matches(host: str, path: str, pattern: str) -> bool:
    domain, slash, path_prefix = pattern.partition("/")
    if host != domain and not host.endswith("." + domain):
        return False
    if slash and path_prefix:
        return path.startswith("/" + path_prefix)
    return True


def _is_excluded(platform: Platform, path: str) -> bool:
    segments = [s for s in path.split("/") if s]
    if not segments:
        # Bare platform homepage
        return True
    if any(s in EXCLUDED_PATH_SEGMENTS for s in segments):
        return True
    return any(
        tuple(segments[:len(prefix)]) == prefix
        for prefix in EXCLUDED_PATH_PREFIXES.get(platform, ())
    )


def classify_social_url(url: str) -> Platform | None:
    """Return the platform a profile URL belongs to, or None if it is not a usable profile."""
    clean = canonicalize_social_url(url)
    if not clean.lower().startswith(("http://", "https://")):
        return None
    host, path = _split(clean)
    for platform, patterns in PLATFORM_PATTERNS.items():
        for pattern in patterns:
            if _matches(host, path, pattern):
                if _is_excluded(platform, path):
                    logger.debug("Excluded %s link %s", platform, clean)
                    return None
                return platform
    return None


def _absolute(href: str, base_url: str) -> str | None:
    href = href.strip()
    if not href or href.startswith(("mailto:", "tel:", "javascript:", "#", "data:")):
        return None
    if href.startswith("//"):
        return "https:" + href
    return urljoin(base_url, href)


def extract_social_links(soup: BeautifulSoup, base_url: str) -> dict[Platform, str]:
    """Collect at most one profile URL per platform; first in document order wins."""
    found: dict[Platform, str] = {}
    for tag in soup.find_all(["a", "meta"]):
        if tag.name == "a":
            href = tag.get("href")
            if not href:
                continue
            url = _absolute(href, base_url)
        else:
            key = (tag.get("property") or tag.get("name") or "").lower()
            content = tag.get("content")
            if not content or not key.startswith(_META_PREFIXES):
                continue
            url = content.strip()
        if not url:
            continue
        platform = classify_social_url(url)
        if platform is not None and platform not in found:
            found[platform] = canonicalize_social_url(url)
            logger.debug("Found %s: %s", platform, found[platform])
    return found


def extract_social_links_from_source(text: str) -> dict[Platform, str]:
    """Regex scan of raw page text, bypassing the HTML parser."""
    found: dict[Platform, str] = {}
    for platform, pattern in SOURCE_PATTERNS.items():
        for match in pattern.finditer(text):
            url = canonicalize_social_url(match.group(0))
            if classify_social_url(url) == platform:
                found[platform] = url
                break
    return found
