"""
Test fixtures for the LinkedIn scraper tests.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport
from pydantic import SecretStr

from linkedin_scraper.api.deps import get_scraping_service
from linkedin_scraper.main import app
from linkedin_scraper.scrapers.linkedin import LinkedInScraper
from linkedin_scraper.scrapers.records import Credentials, SessionState
from linkedin_scraper.scrapers.selectors import SelectorSet

from fakes import FakePage


@pytest.fixture
def selectors():
    return SelectorSet()


@pytest.fixture
def credentials():
    return Credentials(identifier="jane@example.com", secret=SecretStr("hunter2"))


@pytest.fixture
def make_scraper(tmp_path):
    """A LinkedInScraper driving a FakePage instead of a real browser."""
    def _make(page: FakePage, artifacts: bool = False) -> LinkedInScraper:
        scraper = LinkedInScraper(
            page_settle_ms=0,
            artifacts_dir=tmp_path / "artifacts" if artifacts else None,
        )
        scraper._page = page
        scraper._context = page.context
        return scraper
    return _make


@pytest.fixture
def mock_service():
    service = MagicMock()
    service.search_people = AsyncMock()
    service.fetch_profile = AsyncMock()
    service.scraper.is_started = False
    service.session.state = SessionState.NO_SESSION
    service.session.last_error = None
    return service


@pytest.fixture(scope="function")
async def client(mock_service):
    """
    Create an async test client with the scraping service replaced by a mock.
    """
    app.dependency_overrides[get_scraping_service] = lambda: mock_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    app.dependency_overrides.clear()
