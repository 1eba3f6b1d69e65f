import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from webpresence.config import Settings
from webpresence.exceptions.handlers import enrich_validation_error_handler
from webpresence.routers.enrichment import router as enrichment_router
from webpresence.services.browser import DirectBrowserStrategy, ManagedCrawlerStrategy
from webpresence.services.domain_resolver import DomainResolver
from webpresence.services.enrichment import EnrichmentService
from webpresence.services.extraction_pipeline import (
    ExtractionPipeline,
    FastFetchStrategy,
    RawSourceStrategy,
)
from webpresence.services.fetch_client import FetchClient
from webpresence.services.keywords import KeywordService
from webpresence.services.profile_prober import SocialProfileProber
from webpresence.services.redirect_inspector import RedirectInspector
from webpresence.services.site_crawler import SiteCrawler


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # verify=False: we only read public pages, many of them with broken certificates
    async with httpx.AsyncClient(
        timeout=settings.fetch_timeout,
        verify=False,
        follow_redirects=True,
        max_redirects=10,
    ) as client:
        fetcher = FetchClient(client, retries=settings.fetch_retries, timeout=settings.fetch_timeout)

        resolver = DomainResolver(
            fetcher,
            inspector=RedirectInspector(timeout=settings.redirect_probe_timeout),
            probe_timeout=settings.probe_timeout,
            splash_timeout=settings.fast_fetch_timeout,
        )

        managed: ManagedCrawlerStrategy | None = None
        if settings.enable_crawlee:
            managed = ManagedCrawlerStrategy(timeout=settings.browser_timeout)

        pipeline = ExtractionPipeline(
            FastFetchStrategy(fetcher, timeout=settings.fast_fetch_timeout),
            RawSourceStrategy(fetcher),
            managed_crawler=managed,
            direct_browser=DirectBrowserStrategy(timeout=settings.browser_timeout),
            use_headless=settings.use_headless,
            fast_mode=settings.fast_mode,
        )

        crawler = SiteCrawler(
            fetcher,
            max_pages=settings.max_secondary_pages,
            page_retries=settings.secondary_page_retries,
            delay=settings.crawl_delay,
        )

        prober: SocialProfileProber | None = None
        if settings.probe_social_profiles:
            prober = SocialProfileProber(client)

        app.state.enrichment_service = EnrichmentService(resolver, pipeline, crawler, prober=prober)
        app.state.keyword_service = KeywordService(fetcher, timeout=settings.fast_fetch_timeout)

        yield


app = FastAPI(title="Web Presence", lifespan=lifespan)

app.add_exception_handler(RequestValidationError, enrich_validation_error_handler)

app.include_router(enrichment_router)
