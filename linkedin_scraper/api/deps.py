import asyncio

from fastapi import Request

from linkedin_scraper.services.scraping_service import ScrapingService


def get_scraping_service(request: Request) -> ScrapingService:
    return request.app.state.scraping_service


def get_operation_lock(request: Request) -> asyncio.Lock:
    """One browser page, so one operation at a time."""
    return request.app.state.operation_lock
