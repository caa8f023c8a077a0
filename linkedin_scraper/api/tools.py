"""Tool endpoints: people search and profile fetch."""
import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from linkedin_scraper.api.deps import get_operation_lock, get_scraping_service
from linkedin_scraper.exceptions import (
    BrowserStartError,
    InputValidationError,
    NavigationError,
    NavigationTimeoutError,
    ScraperError,
    SessionError,
)
from linkedin_scraper.schemas import (
    FetchProfileRequest,
    FetchProfileResponse,
    SearchPeopleRequest,
    SearchPeopleResponse,
)
from linkedin_scraper.services.scraping_service import ScrapingService

logger = logging.getLogger(__name__)

router = APIRouter()


TOOLS = [
    {
        "name": "search-people",
        "description": "Search for people on LinkedIn",
        "request_model": SearchPeopleRequest,
    },
    {
        "name": "fetch-profile",
        "description": "Fetch detailed LinkedIn profile information",
        "request_model": FetchProfileRequest,
    },
]


def to_http_exception(error: ScraperError) -> HTTPException:
    if isinstance(error, InputValidationError):
        status_code = 422
    elif isinstance(error, SessionError):
        status_code = 401
    elif isinstance(error, NavigationTimeoutError):
        status_code = 504
    elif isinstance(error, NavigationError):
        status_code = 502
    elif isinstance(error, BrowserStartError):
        status_code = 503
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=str(error))


@router.get("")
async def list_tools():
    return {
        "tools": [
            {
                "name": tool["name"],
                "description": tool["description"],
                "inputSchema": tool["request_model"].model_json_schema(by_alias=True),
            }
            for tool in TOOLS
        ]
    }


@router.post("/search-people", response_model=SearchPeopleResponse)
async def search_people(
    data: SearchPeopleRequest,
    service: ScrapingService = Depends(get_scraping_service),
    lock: asyncio.Lock = Depends(get_operation_lock),
):
    async with lock:
        try:
            outcome = await service.search_people(data.to_filters())
        except ScraperError as e:
            logger.error(f"❌ Error searching people: {e}")
            raise to_http_exception(e)

    return SearchPeopleResponse.from_outcome(outcome, data)


@router.post("/fetch-profile", response_model=FetchProfileResponse)
async def fetch_profile(
    data: FetchProfileRequest,
    service: ScrapingService = Depends(get_scraping_service),
    lock: asyncio.Lock = Depends(get_operation_lock),
):
    async with lock:
        try:
            outcome = await service.fetch_profile(data.profile_url)
        except ScraperError as e:
            logger.error(f"❌ Error fetching profile: {e}")
            raise to_http_exception(e)

    return FetchProfileResponse.from_outcome(outcome)
