"""HTTP retrieval with user-agent rotation and a per-error-class retry policy.

Certificate validation is deliberately off on the shared client
(``httpx.AsyncClient(verify=False)``): the goal is reading public marketing
pages, and many small-business sites run expired or self-signed certificates.
Nothing fetched here is trusted beyond text extraction.
"""

import asyncio
import logging
import ssl
from urllib.parse import urljoin, urlparse, urlunparse

import httpx

from webpresence.exceptions.custom import (
    CertificateFailure,
    ClientErrorResponse,
    EmptyContentError,
    FetchError,
    NetworkFailure,
    ServerErrorResponse,
)
from webpresence.schemas.website import FetchResult, StatusClass

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
)

_BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,de;q=0.8,fr;q=0.7,es;q=0.6",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0",
}

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3
MIN_CONTENT_LENGTH = 100  # bytes; shorter bodies are soft failures
BACKOFF_BASE = 0.5  # seconds, doubled per attempt

_ALTERNATE_STATUSES = (403, 404)
_CERT_MARKERS = ("certificate", "cert_", "ssl", "tls")


def _headers(user_agent: str) -> dict[str, str]:
    return {"User-Agent": user_agent, **_BASE_HEADERS}


def toggle_www(url: str) -> str:
    """https://www.acme.com/x <-> https://acme.com/x"""
    parsed = urlparse(url)
    host = parsed.netloc
    host = host[4:] if host.startswith("www.") else f"www.{host}"
    return urlunparse(parsed._replace(netloc=host))


def absolute_final_url(original: str, final: str) -> str:
    """Rebuild a redirect target that only carries a path against the original origin."""
    if urlparse(final).netloc:
        return final
    return urljoin(original, final)


def _is_certificate_error(exc: BaseException) -> bool:
    cause: BaseException | None = exc
    while cause is not None:
        if isinstance(cause, ssl.SSLError):
            return True
        cause = cause.__cause__ or cause.__context__
    text = str(exc).lower()
    return any(marker in text for marker in _CERT_MARKERS)


def _status_class(exc: FetchError | None) -> StatusClass:
    if isinstance(exc, ServerErrorResponse):
        return StatusClass.server_error
    if isinstance(exc, ClientErrorResponse):
        return StatusClass.client_error
    return StatusClass.network_error


def _failure(url: str, exc: FetchError | None) -> FetchResult:
    return FetchResult(
        final_url=url,
        status_class=_status_class(exc),
        status_code=exc.status_code if exc else None,
        error=exc.message if exc else "no attempts made",
    )


class FetchClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        retries: int = DEFAULT_RETRIES,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._client = client
        self._retries = retries
        self._timeout = timeout

    async def fetch(
        self,
        url: str,
        retries: int | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        """GET a page. Never raises; failures come back as a non-ok FetchResult."""
        attempts = max(1, retries if retries is not None else self._retries)
        timeout = timeout if timeout is not None else self._timeout
        last_error: FetchError | None = None

        for attempt in range(attempts):
            user_agent = USER_AGENTS[attempt % len(USER_AGENTS)]
            try:
                return await self._get(url, user_agent, timeout)
            except CertificateFailure as exc:
                logger.info("Certificate error for %s, not retrying: %s", url, exc.message)
                return _failure(url, exc)
            except ClientErrorResponse as exc:
                if exc.status_code in _ALTERNATE_STATUSES:
                    return await self._fetch_alternate(url, user_agent, timeout, exc)
                logger.info("Client error for %s: %s", url, exc.message)
                return _failure(url, exc)
            except (ServerErrorResponse, NetworkFailure, EmptyContentError) as exc:
                last_error = exc
                logger.debug(
                    "Fetch %s failed (attempt %d/%d): %s", url, attempt + 1, attempts, exc.message,
                )

            if attempt < attempts - 1:
                await asyncio.sleep(BACKOFF_BASE * 2**attempt)

        logger.info("Giving up on %s after %d attempts", url, attempts)
        return _failure(url, last_error)

    async def probe(self, url: str, timeout: float | None = None) -> str | None:
        """HEAD, then GET if HEAD is refused. Returns the post-redirect URL on 2xx-3xx."""
        timeout = timeout if timeout is not None else self._timeout
        headers = _headers(USER_AGENTS[0])
        for method in ("HEAD", "GET"):
            try:
                resp = await self._client.request(
                    method, url, headers=headers, timeout=timeout, follow_redirects=True,
                )
            except (httpx.RequestError, httpx.InvalidURL) as exc:
                logger.debug("%s %s failed: %s", method, url, exc)
                continue
            if 200 <= resp.status_code < 400:
                return absolute_final_url(url, str(resp.url))
            logger.debug("%s %s -> HTTP %d", method, url, resp.status_code)
        return None

    async def _fetch_alternate(
        self,
        url: str,
        user_agent: str,
        timeout: float,
        original: ClientErrorResponse,
    ) -> FetchResult:
        alternate = toggle_www(url)
        logger.info("HTTP %s for %s, trying %s", original.status_code, url, alternate)
        try:
            return await self._get(alternate, user_agent, timeout)
        except FetchError as exc:
            logger.debug("Alternate %s also failed: %s", alternate, exc.message)
            return _failure(url, original)

    async def _get(self, url: str, user_agent: str, timeout: float) -> FetchResult:
        try:
            resp = await self._client.get(
                url, headers=_headers(user_agent), timeout=timeout, follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            raise NetworkFailure(f"timeout: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise ClientErrorResponse(f"invalid url: {exc}") from exc
        except httpx.RequestError as exc:
            if _is_certificate_error(exc):
                raise CertificateFailure(str(exc)) from exc
            raise NetworkFailure(str(exc) or type(exc).__name__) from exc

        status = resp.status_code
        if status >= 500:
            raise ServerErrorResponse(f"HTTP {status}", status_code=status)
        if status >= 400:
            raise ClientErrorResponse(f"HTTP {status}", status_code=status)

        html = resp.text
        if len(html) <= MIN_CONTENT_LENGTH:
            raise EmptyContentError(f"body too short ({len(html)} chars)", status_code=status)

        return FetchResult(
            html=html,
            final_url=absolute_final_url(url, str(resp.url)),
            status_class=StatusClass.success,
            status_code=status,
        )
