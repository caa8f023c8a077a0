"""
Command line entry point.

    python -m linkedin_scraper serve [--host HOST] [--port PORT]
    python -m linkedin_scraper search --keywords "software engineer" --network first
    python -m linkedin_scraper profile https://www.linkedin.com/in/username/

search and profile run one operation in a fresh browser and print the
result as JSON, in the same shape the tool endpoints return.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from linkedin_scraper.config import get_settings
from linkedin_scraper.exceptions import ScraperError
from linkedin_scraper.schemas import (
    FetchProfileResponse,
    SearchPeopleRequest,
    SearchPeopleResponse,
)
from linkedin_scraper.services.scraping_service import ScrapingService

logger = logging.getLogger("linkedin_scraper.cli")


def _print_json(model) -> None:
    print(json.dumps(model.model_dump(by_alias=True), indent=2, ensure_ascii=False))


async def _run_search(service: ScrapingService, request: SearchPeopleRequest) -> SearchPeopleResponse:
    try:
        outcome = await service.search_people(request.to_filters())
    finally:
        await service.close()
    return SearchPeopleResponse.from_outcome(outcome, request)


async def _run_profile(service: ScrapingService, profile_url: str) -> FetchProfileResponse:
    try:
        outcome = await service.fetch_profile(profile_url)
    finally:
        await service.close()
    return FetchProfileResponse.from_outcome(outcome)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("linkedin_scraper.main:app", host=args.host, port=args.port)
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    request = SearchPeopleRequest(
        keywords=args.keywords,
        location=args.location,
        network_degree=args.network,
    )
    service = ScrapingService.from_settings(get_settings())
    try:
        response = asyncio.run(_run_search(service, request))
    except ScraperError as e:
        logger.error(f"❌ Search failed: {e}")
        return 1

    _print_json(response)
    return 0


def cmd_profile(args: argparse.Namespace) -> int:
    service = ScrapingService.from_settings(get_settings())
    try:
        response = asyncio.run(_run_profile(service, args.url))
    except ScraperError as e:
        logger.error(f"❌ Profile fetch failed: {e}")
        return 1

    _print_json(response)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkedin_scraper",
        description="LinkedIn people search and profile extraction.",
    )
    sub = parser.add_subparsers(dest="command")

    serve_parser = sub.add_parser("serve", help="Run the tool HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=cmd_serve)

    search_parser = sub.add_parser("search", help="Search for people and print the results")
    search_parser.add_argument("--keywords", help="Search keywords")
    search_parser.add_argument("--location", help="geoUrn code or free-text location")
    search_parser.add_argument("--network", help="Network degree: first, second or thirdPlus")
    search_parser.set_defaults(func=cmd_search)

    profile_parser = sub.add_parser("profile", help="Fetch one profile and print it")
    profile_parser.add_argument("url", help="LinkedIn profile URL")
    profile_parser.set_defaults(func=cmd_profile)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
