"""Tests for SocialProfileProber."""

import httpx
import pytest
import respx
from httpx import Response

from webpresence.schemas.enrichment import Platform
from webpresence.services.profile_prober import SocialProfileProber, handle_variations


@pytest.fixture
def prober():
    return SocialProfileProber(httpx.AsyncClient(), timeout=1.0)


def test_handle_variations():
    assert handle_variations("Acme Robotics") == [
        "acmerobotics", "acme-robotics", "acme_robotics", "acme",
    ]
    assert handle_variations("acme.io") == ["acme"]


@respx.mock
async def test_first_live_profile_per_platform(prober):
    respx.route(host="github.com", path="/acme-robotics").mock(return_value=Response(200))
    respx.route().mock(return_value=Response(404))

    signals = await prober.probe("Acme Robotics", [Platform.github, Platform.instagram])

    assert signals.social_links == {Platform.github: "https://github.com/acme-robotics"}


@respx.mock
async def test_head_refused_then_get(prober):
    respx.route(method="HEAD", host="www.tiktok.com").mock(return_value=Response(405))
    respx.route(method="GET", host="www.tiktok.com", path="/@acme").mock(return_value=Response(200))

    signals = await prober.probe("Acme", [Platform.tiktok])

    assert signals.social_links == {Platform.tiktok: "https://www.tiktok.com/@acme"}


@respx.mock
async def test_network_errors_are_not_fatal(prober):
    respx.route().mock(side_effect=httpx.ConnectError("refused"))

    signals = await prober.probe("Acme", [Platform.linkedin, Platform.discord])

    assert signals.social_links == {}
