import logging
from dataclasses import dataclass, field
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from webpresence.extractors.company_name import find_company_name, name_from_domain
from webpresence.mappers.result_merger import (
    CONTACT_FIELDS,
    SOCIAL_FIELDS,
    build_record,
    merge_signals,
    page_signals,
    wants,
)
from webpresence.schemas.enrichment import EnrichmentRecord, EnrichmentRequest, Platform
from webpresence.schemas.website import SiteSignals
from webpresence.services.domain_resolver import DomainResolver, looks_like_url, normalize_url
from webpresence.services.extraction_pipeline import ExtractionPipeline
from webpresence.services.profile_prober import SocialProfileProber
from webpresence.services.site_crawler import SiteCrawler

logger = logging.getLogger(__name__)


def bare_domain(url: str) -> str:
    return urlparse(url).netloc.lower().split(":")[0].removeprefix("www.")


def provisional_name(company: str) -> str:
    """The input itself for a name; the title-cased host label for a URL."""
    if looks_like_url(company):
        return name_from_domain(bare_domain(normalize_url(company)))
    return company.strip()


@dataclass
class _Progress:
    """What one enrichment run has learned so far, highest priority source first."""

    company_name: str
    website: str | None = None
    domain: str | None = None
    sources: list[SiteSignals] = field(default_factory=list)


class EnrichmentService:
    def __init__(
        self,
        resolver: DomainResolver,
        pipeline: ExtractionPipeline,
        crawler: SiteCrawler,
        prober: SocialProfileProber | None = None,
    ):
        self._resolver = resolver
        self._pipeline = pipeline
        self._crawler = crawler
        self._prober = prober

    async def enrich(self, request: EnrichmentRequest) -> EnrichmentRecord:
        """Resolve the website and collect contact and social signals.

        Best-effort, never raises: whatever was found before a failure is
        returned, every missing field holding the sentinel.
        """
        progress = _Progress(company_name=provisional_name(request.company))
        try:
            await self._do_enrich(request, progress)
        except Exception:
            logger.exception("Enrichment failed for %r", request.company)

        return build_record(
            progress.company_name,
            progress.website,
            progress.domain,
            merge_signals(*progress.sources),
            request.fields_to_extract,
        )

    async def _do_enrich(self, request: EnrichmentRequest, progress: _Progress) -> None:
        website = await self._resolver.resolve(request.company)
        if website is None:
            logger.info("No website for %r", request.company)
            return

        progress.website = website
        progress.domain = bare_domain(website)
        if looks_like_url(request.company):
            progress.company_name = name_from_domain(progress.domain)

        home = await self._pipeline.extract(website, fast_mode=request.fast_mode)
        if home.html:
            name = find_company_name(BeautifulSoup(home.html, "html.parser"))
            if name:
                progress.company_name = name
        progress.sources.append(page_signals(home))

        fields = request.fields_to_extract
        if not any(wants(f, fields) for f in CONTACT_FIELDS | SOCIAL_FIELDS):
            logger.info("No contact or social field requested for %r, skipping crawl", request.company)
            return

        crawl = await self._crawler.crawl(
            home.final_url or website,
            homepage_html=home.html or None,
            max_pages=0 if request.fast_mode else None,
        )
        progress.sources.append(crawl)

        if self._prober is None:
            return
        found = merge_signals(*progress.sources).social_links
        missing = [p for p in Platform if p not in found and wants(p.value, fields)]
        if missing:
            progress.sources.append(await self._prober.probe(progress.company_name, missing))
