import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from linkedin_scraper import __version__
from linkedin_scraper.api import health, tools
from linkedin_scraper.config import get_settings
from linkedin_scraper.services.scraping_service import ScrapingService

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting LinkedIn scraper tool server")
    # The browser is launched by the first operation, not here

    yield

    logger.info("🛑 Shutting down LinkedIn scraper tool server")
    try:
        await app.state.scraping_service.close()
        logger.info("✅ Browser closed")
    except Exception as e:
        logger.error(f"❌ Shutdown error: {e}")


app = FastAPI(
    title="LinkedIn Scraper",
    description="People search and profile extraction tools over an authenticated browser session",
    version=__version__,
    lifespan=lifespan
)

app.state.scraping_service = ScrapingService.from_settings(settings)
app.state.operation_lock = asyncio.Lock()

app.include_router(tools.router, prefix="/tools", tags=["tools"])
app.include_router(health.router, tags=["health"])


@app.get("/ping")
async def ping():
    """Simple ping endpoint for liveness checks."""
    return {"status": "ok"}
