"""Tests for the tool API endpoints."""
import pytest

from linkedin_scraper.exceptions import (
    BrowserStartError,
    ChallengeRequiredError,
    InputValidationError,
    NavigationError,
    NavigationTimeoutError,
    ScraperError,
)
from linkedin_scraper.scrapers.records import (
    Certification,
    Experience,
    FullProfile,
    ProfileSummary,
    SearchFilters,
)
from linkedin_scraper.services.scraping_service import ProfileOutcome, SearchOutcome


def search_outcome(records, status="success", diagnostics=None):
    return SearchOutcome(
        filters=SearchFilters(),
        url="https://www.linkedin.com/search/results/people/?keywords=x",
        status=status,
        records=records,
        diagnostics=diagnostics or [],
    )


class TestHealthEndpoint:
    async def test_health_check(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["browser"] == "stopped"
        assert data["session"] == "no_session"

    async def test_ping(self, client):
        response = await client.get("/ping")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestListTools:
    async def test_lists_both_tools(self, client):
        response = await client.get("/tools")
        assert response.status_code == 200
        tools = {t["name"]: t for t in response.json()["tools"]}
        assert set(tools) == {"search-people", "fetch-profile"}

        search_schema = tools["search-people"]["inputSchema"]
        assert set(search_schema["properties"]) == {"keywords", "location", "networkDegree"}
        assert tools["fetch-profile"]["inputSchema"]["required"] == ["profileUrl"]


class TestSearchPeopleAPI:
    async def test_search_people(self, client, mock_service):
        mock_service.search_people.return_value = search_outcome([
            ProfileSummary(
                display_name="Jane Doe",
                profile_url="https://www.linkedin.com/in/jane-doe",
                headline="Engineer",
            ),
        ])

        response = await client.post(
            "/tools/search-people",
            json={"keywords": "software engineer", "networkDegree": "first"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 1
        assert data["status"] == "success"
        assert data["records"][0] == {
            "displayName": "Jane Doe",
            "profileUrl": "https://www.linkedin.com/in/jane-doe",
            "headline": "Engineer",
        }
        assert data["echoedFilters"] == {
            "keywords": "software engineer",
            "location": None,
            "networkDegree": "first",
        }

        filters = mock_service.search_people.await_args.args[0]
        assert filters == SearchFilters(keywords="software engineer", network_degree="first")

    async def test_empty_search(self, client, mock_service):
        mock_service.search_people.return_value = search_outcome([], status="no_results")

        response = await client.post("/tools/search-people", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 0
        assert data["records"] == []
        assert data["status"] == "no_results"

    async def test_invalid_network_degree_is_not_rejected(self, client, mock_service):
        mock_service.search_people.return_value = search_outcome(
            [], diagnostics=["Invalid network degree filter: 'fourth'"]
        )

        response = await client.post("/tools/search-people", json={"networkDegree": "fourth"})

        assert response.status_code == 200
        assert response.json()["diagnostics"] == ["Invalid network degree filter: 'fourth'"]

    @pytest.mark.parametrize("error,status_code", [
        (ChallengeRequiredError("challenge"), 401),
        (NavigationTimeoutError("https://www.linkedin.com/search/results/people/", 60000), 504),
        (NavigationError("https://www.linkedin.com/search/results/people/", "net::ERR_TOO_MANY_REDIRECTS"), 502),
        (BrowserStartError("Failed to launch browser: Executable doesn't exist"), 503),
        (InputValidationError("bad"), 422),
        (ScraperError("browser crashed"), 500),
    ])
    async def test_error_mapping(self, client, mock_service, error, status_code):
        mock_service.search_people.side_effect = error

        response = await client.post("/tools/search-people", json={"keywords": "x"})

        assert response.status_code == status_code
        assert response.json()["detail"] == str(error)


class TestFetchProfileAPI:
    async def test_fetch_profile(self, client, mock_service):
        mock_service.fetch_profile.return_value = ProfileOutcome(
            record=FullProfile(
                display_name="Jane Doe",
                profile_url="https://www.linkedin.com/in/jane-doe",
                experience=[Experience("Engineer", "Acme", "2020 – Present")],
                skills=["Python"],
                certifications=[Certification("CKA", "CNCF", issue_date="Feb 2021")],
            ),
            missing_fields=["about"],
        )

        response = await client.post(
            "/tools/fetch-profile",
            json={"profileUrl": "https://www.linkedin.com/in/jane-doe"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        record = data["record"]
        assert record["displayName"] == "Jane Doe"
        assert record["experience"][0] == {
            "title": "Engineer",
            "organization": "Acme",
            "durationText": "2020 – Present",
            "description": None,
        }
        assert record["certifications"][0]["issueDate"] == "Feb 2021"
        assert record["certifications"][0]["expirationDate"] is None
        assert record["skills"] == ["Python"]
        assert data["missingFields"] == ["about"]

    async def test_missing_profile_url_is_validation_error(self, client, mock_service):
        response = await client.post("/tools/fetch-profile", json={})

        assert response.status_code == 422
        mock_service.fetch_profile.assert_not_awaited()

    async def test_blank_profile_url_is_validation_error(self, client, mock_service):
        response = await client.post("/tools/fetch-profile", json={"profileUrl": "  "})

        assert response.status_code == 422
        mock_service.fetch_profile.assert_not_awaited()

    async def test_login_failure_is_401(self, client, mock_service):
        mock_service.fetch_profile.side_effect = ChallengeRequiredError("challenge")

        response = await client.post(
            "/tools/fetch-profile",
            json={"profileUrl": "https://www.linkedin.com/in/jane-doe"},
        )

        assert response.status_code == 401
