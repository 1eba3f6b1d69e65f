import logging

from webpresence.extractors.keywords import extract_keywords
from webpresence.schemas.enrichment import KeywordsResponse
from webpresence.services.domain_resolver import normalize_url
from webpresence.services.fetch_client import FetchClient

logger = logging.getLogger(__name__)


class KeywordService:
    def __init__(self, fetcher: FetchClient, timeout: float = 3.0):
        self._fetcher = fetcher
        self._timeout = timeout

    async def keywords(self, url: str) -> KeywordsResponse:
        """Weighted keywords of one page. Empty list when the page cannot be fetched."""
        url = normalize_url(url)
        result = await self._fetcher.fetch(url, retries=1, timeout=self._timeout)
        if not result.ok:
            logger.info("No keywords for %s: %s", url, result.error)
            return KeywordsResponse(url=url)
        return KeywordsResponse(url=url, keywords=extract_keywords(result.html))
