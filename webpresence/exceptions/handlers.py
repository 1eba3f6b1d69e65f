import logging

from fastapi import Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from webpresence.schemas.enrichment import EnrichmentRecord

logger = logging.getLogger(__name__)

ENRICH_PATH = "/enrich"


async def enrich_validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Missing or blank company on /enrich: 400 with an all-sentinel record."""
    if request.url.path != ENRICH_PATH:
        return await request_validation_exception_handler(request, exc)
    logger.warning("Rejected enrichment request: %s", exc.errors())
    return JSONResponse(status_code=400, content=EnrichmentRecord().to_output())
