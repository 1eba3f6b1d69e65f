from typing import Annotated

from fastapi import Depends, Request

from webpresence.services.enrichment import EnrichmentService
from webpresence.services.keywords import KeywordService


def get_enrichment_service(request: Request) -> EnrichmentService:
    return request.app.state.enrichment_service


def get_keyword_service(request: Request) -> KeywordService:
    return request.app.state.keyword_service


EnrichmentDep = Annotated[EnrichmentService, Depends(get_enrichment_service)]
KeywordDep = Annotated[KeywordService, Depends(get_keyword_service)]
