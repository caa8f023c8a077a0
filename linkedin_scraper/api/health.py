from fastapi import APIRouter, Depends

from linkedin_scraper.api.deps import get_scraping_service
from linkedin_scraper.services.scraping_service import ScrapingService

router = APIRouter()


@router.get("/health")
async def health_check(service: ScrapingService = Depends(get_scraping_service)):
    session = service.session
    return {
        "status": "ok",
        "browser": "started" if service.scraper.is_started else "stopped",
        "session": session.state.value,
        "lastError": session.last_error,
    }
