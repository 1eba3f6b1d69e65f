"""Tests for DomainResolver."""

from unittest.mock import AsyncMock

import httpx
import pytest
import respx
from httpx import Response

from webpresence.services.domain_resolver import (
    TLDS,
    DomainResolver,
    candidate_domains,
    looks_like_url,
    name_variations,
    normalize_url,
)
from webpresence.services.fetch_client import FetchClient

SPLASH = (
    "<html><body><h1>Choose your language</h1>"
    '<a href="/en/">English</a> <a href="/de/">Deutsch</a> <a href="/fr/">Français</a>'
    "</body></html>"
)
HOME = (
    "<html><body><nav>"
    + "".join(f'<a href="/p{i}">Page {i}</a>' for i in range(6))
    + "</nav><p>Welcome to Acme</p></body></html>"
)


@pytest.fixture
def fetcher():
    return FetchClient(httpx.AsyncClient(), retries=1, timeout=5.0)


@pytest.fixture
def inspector():
    mock = AsyncMock()
    mock.detect_client_redirect.return_value = None
    return mock


@pytest.fixture
def resolver(fetcher, inspector):
    return DomainResolver(fetcher, inspector=inspector, probe_timeout=5.0)


# --- candidates ---


def test_name_variations():
    assert name_variations("Acme Robotics") == ["acmerobotics", "acme-robotics", "acme_robotics"]
    assert name_variations("AT&T Labs") == ["at&tlabs", "at&t-labs", "at&t_labs", "attlabs"]


def test_candidate_order_general_tlds_first():
    candidates = candidate_domains("Acme Robotics")
    assert [c.host for c in candidates[:3]] == ["acmerobotics.com", "acmerobotics.io", "acmerobotics.net"]
    assert candidates[len(TLDS)].host == "acme-robotics.com"
    assert len(candidates) == 3 * len(TLDS)


def test_looks_like_url():
    assert looks_like_url("acme.com")
    assert looks_like_url("https://www.acme.co.uk/en/")
    assert not looks_like_url("Acme Robotics")
    assert not looks_like_url("acme")


def test_normalize_url():
    assert normalize_url("acme.com") == "http://acme.com"
    assert normalize_url("https://acme.com/") == "https://acme.com/"


# --- resolve ---


@respx.mock
async def test_url_input_resolves_to_post_redirect_url(resolver):
    respx.route(method="HEAD", host="acme.com").mock(
        return_value=Response(301, headers={"Location": "https://www.acme.com/"})
    )
    respx.route(method="HEAD", host="www.acme.com").mock(return_value=Response(200))
    respx.route(method="GET", host="www.acme.com").mock(return_value=Response(200, html=HOME))

    resolved = await resolver.resolve("acme.com")

    assert resolved == "https://www.acme.com/"


@respx.mock
async def test_resolving_resolved_url_is_idempotent(resolver):
    respx.route(method="HEAD", host="www.acme.com").mock(return_value=Response(200))
    respx.route(method="GET", host="www.acme.com").mock(return_value=Response(200, html=HOME))

    first = await resolver.resolve("https://www.acme.com/")
    second = await resolver.resolve(first)

    assert first == second == "https://www.acme.com/"


@respx.mock
async def test_first_reachable_candidate_wins(resolver):
    respx.route(host="acmerobotics.io").mock(return_value=Response(200, html=HOME))
    unreachable = respx.route().mock(side_effect=httpx.ConnectError("unreachable"))

    resolved = await resolver.resolve("Acme Robotics")

    assert resolved.rstrip("/") == "http://acmerobotics.io"
    assert {c.request.url.host for c in unreachable.calls} == {"acmerobotics.com"}


@respx.mock
async def test_head_blocked_falls_back_to_get(resolver):
    respx.route(method="HEAD", host="acmerobotics.com").mock(return_value=Response(405))
    respx.route(method="GET", host="acmerobotics.com").mock(return_value=Response(200, html=HOME))

    resolved = await resolver.resolve("Acme Robotics")

    assert resolved.rstrip("/") == "http://acmerobotics.com"


@respx.mock
async def test_nothing_reachable_returns_none(resolver):
    route = respx.route().mock(side_effect=httpx.ConnectError("unreachable"))

    assert await resolver.resolve("Acme Robotics") is None
    assert route.calls[0].request.url.host == "acmerobotics.com"
    assert route.call_count >= 2 * len(TLDS)


@respx.mock
async def test_unreachable_url_input_returns_none(resolver):
    respx.route().mock(side_effect=httpx.ConnectError("unreachable"))

    assert await resolver.resolve("acme.com") is None


@respx.mock
async def test_language_splash_uses_client_redirect(resolver, inspector):
    inspector.detect_client_redirect.return_value = "https://acme.com/en/"
    respx.route(method="HEAD", host="acme.com").mock(return_value=Response(200))
    respx.route(method="GET", host="acme.com").mock(return_value=Response(200, html=SPLASH))

    resolved = await resolver.resolve("https://acme.com/")

    assert resolved == "https://acme.com/en/"
    inspector.detect_client_redirect.assert_awaited_once_with("https://acme.com/")


@respx.mock
async def test_failed_client_redirect_keeps_original(resolver, inspector):
    respx.route(method="HEAD", host="acme.com").mock(return_value=Response(200))
    respx.route(method="GET", host="acme.com").mock(return_value=Response(200, html=SPLASH))

    assert await resolver.resolve("https://acme.com/") == "https://acme.com/"


@respx.mock
async def test_deep_path_skips_splash_check(resolver, inspector):
    respx.route(method="HEAD", host="acme.com").mock(return_value=Response(200))

    assert await resolver.resolve("https://acme.com/en/") == "https://acme.com/en/"
    inspector.detect_client_redirect.assert_not_awaited()


@respx.mock
async def test_regular_homepage_skips_inspector(resolver, inspector):
    respx.route(method="HEAD", host="acme.com").mock(return_value=Response(200))
    respx.route(method="GET", host="acme.com").mock(return_value=Response(200, html=HOME))

    assert await resolver.resolve("https://acme.com/") == "https://acme.com/"
    inspector.detect_client_redirect.assert_not_awaited()
