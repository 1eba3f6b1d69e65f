"""Company name (or partial domain) to reachable website.

Candidates are probed in a fixed order and the first one that answers wins.
There is no scoring across candidates, so an unrelated business with the same
name on an earlier TLD will be picked over the right one.
"""

import logging
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from webpresence.extractors.navigation import is_language_splash
from webpresence.schemas.website import CandidateDomain
from webpresence.services.fetch_client import FetchClient
from webpresence.services.redirect_inspector import RedirectInspector

logger = logging.getLogger(__name__)

# General business TLDs first, then country codes
TLDS = (
    "com", "io", "net", "org", "co", "ai", "dev", "app", "tech", "us",
    "co.uk", "de", "fr", "ca", "au", "in",
)

_URL_LIKE_RE = re.compile(
    r"^(?:https?://)?(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}(?::\d+)?(?:[/?#]\S*)?$",
    re.IGNORECASE,
)


def looks_like_url(value: str) -> bool:
    value = value.strip()
    return "." in value and not any(c.isspace() for c in value) and bool(_URL_LIKE_RE.match(value))


def normalize_url(value: str) -> str:
    """Default to plain http and let the server upgrade us."""
    value = value.strip()
    if value.lower().startswith(("http://", "https://")):
        return value
    return f"http://{value}"


def name_variations(name: str) -> list[str]:
    clean = name.strip().lower()
    variations = [
        re.sub(r"\s+", "", clean),
        re.sub(r"\s+", "-", clean),
        re.sub(r"\s+", "_", clean),
        re.sub(r"[^a-z0-9]", "", clean),
    ]
    return list(dict.fromkeys(v for v in variations if v))


def candidate_domains(name: str) -> list[CandidateDomain]:
    return [
        CandidateDomain(name=variation, tld=tld)
        for variation in name_variations(name)
        for tld in TLDS
    ]


class DomainResolver:
    def __init__(
        self,
        fetcher: FetchClient,
        inspector: RedirectInspector | None = None,
        probe_timeout: float = 10.0,
        splash_timeout: float = 3.0,
    ):
        self._fetcher = fetcher
        self._inspector = inspector
        self._probe_timeout = probe_timeout
        self._splash_timeout = splash_timeout

    async def resolve(self, name_or_url: str) -> str | None:
        """Reachable, post-redirect URL for the input, or None."""
        if looks_like_url(name_or_url):
            url = normalize_url(name_or_url)
            final = await self._fetcher.probe(url, timeout=self._probe_timeout)
            if final is None:
                logger.info("Input URL %s is not reachable", url)
                return None
            return await self._past_splash(final)

        candidates = candidate_domains(name_or_url)
        for candidate in candidates:
            url = normalize_url(candidate.host)
            final = await self._fetcher.probe(url, timeout=self._probe_timeout)
            if final is None:
                logger.debug("Candidate %s did not answer", candidate.host)
                continue
            logger.info("Resolved %r to %s", name_or_url, final)
            return await self._past_splash(final)

        logger.info("No website found for %r after %d candidates", name_or_url, len(candidates))
        return None

    async def _past_splash(self, url: str) -> str:
        if self._inspector is None or urlparse(url).path not in ("", "/"):
            return url

        result = await self._fetcher.fetch(url, retries=1, timeout=self._splash_timeout)
        if not result.ok:
            return url
        if not is_language_splash(BeautifulSoup(result.html, "html.parser")):
            return url

        logger.debug("%s looks like a language splash page", url)
        return await self._inspector.detect_client_redirect(url) or url
