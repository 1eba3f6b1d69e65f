from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from httpx import ASGITransport


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("ENABLE_CRAWLEE", "false")
    monkeypatch.setenv("USE_HEADLESS", "false")
    monkeypatch.setenv("FETCH_RETRIES", "1")
    monkeypatch.setenv("CRAWL_DELAY", "0")


@pytest.fixture
async def client(mock_env):
    from webpresence.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
def live_page():
    """Stand-in for a Playwright Page."""
    page = MagicMock()
    page.url = "https://acme.com/"
    page.goto = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.content = AsyncMock(return_value="<html><body></body></html>")
    return page


@pytest.fixture
def fake_browser(live_page):
    """Patch async_playwright so launches hand out *live_page*; yields the browser mock."""
    browser = MagicMock()
    browser.close = AsyncMock()
    browser.new_page = AsyncMock(return_value=live_page)
    context = MagicMock()
    context.new_page = AsyncMock(return_value=live_page)
    browser.new_context = AsyncMock(return_value=context)

    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser)
    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=pw)
    manager.__aexit__ = AsyncMock(return_value=False)

    with patch("webpresence.services.browser.async_playwright", return_value=manager):
        yield browser
