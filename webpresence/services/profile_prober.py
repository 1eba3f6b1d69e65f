"""Guess social profile URLs from the company name.

Off by default: several platforms answer 200 for any handle (login walls,
soft 404s), so a hit here is weaker evidence than a link on the site itself.
"""

import logging
import re

import httpx

from webpresence.extractors.social_links import canonicalize_social_url
from webpresence.schemas.enrichment import Platform
from webpresence.schemas.website import SiteSignals
from webpresence.services.fetch_client import USER_AGENTS

logger = logging.getLogger(__name__)

PROFILE_TEMPLATES: dict[Platform, tuple[str, ...]] = {
    Platform.linkedin: ("https://www.linkedin.com/company/{}", "https://linkedin.com/company/{}"),
    Platform.twitter: ("https://twitter.com/{}", "https://x.com/{}"),
    Platform.facebook: ("https://www.facebook.com/{}", "https://facebook.com/{}"),
    Platform.instagram: ("https://www.instagram.com/{}", "https://instagram.com/{}"),
    Platform.youtube: (
        "https://www.youtube.com/@{}",
        "https://www.youtube.com/c/{}",
        "https://www.youtube.com/user/{}",
    ),
    Platform.tiktok: ("https://www.tiktok.com/@{}", "https://tiktok.com/@{}"),
    Platform.github: ("https://github.com/{}",),
    Platform.pinterest: ("https://www.pinterest.com/{}", "https://pinterest.com/{}"),
}

_TLD_SUFFIX_RE = re.compile(r"\.(com|io|net|org|co|ai|dev|app|tech)$", re.IGNORECASE)


def handle_variations(company_name: str) -> list[str]:
    clean = _TLD_SUFFIX_RE.sub("", company_name.strip()).strip().lower()
    if not clean:
        return []
    variations = [
        re.sub(r"\s+", "", clean),
        re.sub(r"\s+", "-", clean),
        re.sub(r"\s+", "_", clean),
        re.sub(r"[^a-z0-9]", "", clean),
        clean.split()[0],
    ]
    return list(dict.fromkeys(v for v in variations if v))


class SocialProfileProber:
    def __init__(self, client: httpx.AsyncClient, timeout: float = 5.0):
        self._client = client
        self._timeout = timeout

    async def probe(self, company_name: str, platforms: list[Platform]) -> SiteSignals:
        """Profile URLs answering HTTP 200, one per platform. Best-effort, never raises."""
        found: dict[Platform, str] = {}
        handles = handle_variations(company_name)
        for platform in platforms:
            templates = PROFILE_TEMPLATES.get(platform)
            if not templates:
                continue
            for handle in handles:
                url = await self._first_live(template.format(handle) for template in templates)
                if url:
                    logger.info("Guessed %s profile for %r: %s", platform, company_name, url)
                    found[platform] = canonicalize_social_url(url)
                    break
        return SiteSignals(social_links=found)

    async def _first_live(self, urls) -> str | None:
        for url in urls:
            if await self._is_live(url):
                return url
        return None

    async def _is_live(self, url: str) -> bool:
        headers = {"User-Agent": USER_AGENTS[0]}
        for method in ("HEAD", "GET"):
            try:
                resp = await self._client.request(
                    method, url, headers=headers, timeout=self._timeout, follow_redirects=True,
                )
            except httpx.HTTPError as exc:
                logger.debug("%s %s failed: %s", method, url, exc)
                continue
            if resp.status_code == 200:
                return True
        return False
