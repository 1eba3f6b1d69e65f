import logging
from typing import Any

from fastapi import APIRouter

from webpresence.dependencies import EnrichmentDep, KeywordDep
from webpresence.schemas.enrichment import EnrichmentRequest, KeywordsRequest, KeywordsResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/enrich")
async def enrich_company(request: EnrichmentRequest, service: EnrichmentDep) -> dict[str, Any]:
    record = await service.enrich(request)
    logger.info("Enriched %r -> %s", request.company, record.website)
    return record.to_output()


@router.post("/keywords", response_model=KeywordsResponse)
async def page_keywords(request: KeywordsRequest, service: KeywordDep) -> KeywordsResponse:
    return await service.keywords(request.url)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
