"""
Scraping orchestration service.

Sequences one operation against the shared browser session:
1. Ensure the browser is up and the saved session restored
2. Navigate
3. Detect a login wall, log in once and re-navigate if one is shown
4. Locate results / read the page
5. Extract records, skipping the ones that cannot be identified
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from linkedin_scraper.config import Settings
from linkedin_scraper.exceptions import InputValidationError, NavigationError, SessionError
from linkedin_scraper.scrapers.extractors import (
    ContainerLocator,
    ProfileExtractor,
    ProfileSummaryExtractor,
)
from linkedin_scraper.scrapers.linkedin import LinkedInScraper
from linkedin_scraper.scrapers.records import FullProfile, ProfileSummary, SearchFilters
from linkedin_scraper.scrapers.selectors import SelectorSet, load_selector_set
from linkedin_scraper.scrapers.session import CookieStore, SessionManager
from linkedin_scraper.utils.url_builder import canonicalize_profile_url, encode_search_filters

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    """Result of one people search. Empty records are a valid outcome."""
    filters: SearchFilters
    url: str
    status: str  # success | no_results | layout_change
    records: List[ProfileSummary] = field(default_factory=list)
    skipped: int = 0
    container_strategy: Optional[str] = None
    row_strategy: Optional[str] = None
    diagnostics: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


@dataclass
class ProfileOutcome:
    record: FullProfile
    missing_fields: List[str] = field(default_factory=list)


def validate_profile_url(profile_url: Optional[str]) -> str:
    """Check and canonicalize a caller-supplied profile URL."""
    if profile_url is None or not profile_url.strip():
        raise InputValidationError("profileUrl is required for fetch-profile")

    url = profile_url.strip()
    if "://" in url and not url.startswith(("http://", "https://")):
        raise InputValidationError(f"profileUrl must be an http(s) URL, got {profile_url!r}")
    return canonicalize_profile_url(url)


class ScrapingService:
    """
    Runs search and profile operations on one browser session.

    Operations are strictly sequential: the caller must not start a second
    operation while one is in flight (the tool API holds a lock for this).
    """

    def __init__(
        self,
        scraper: LinkedInScraper,
        session: SessionManager,
        selectors: SelectorSet,
        container_wait_ms: int = 15000,
        expand_delay: float = 1.0,
        default_geo_urn: str = "104195383",
    ):
        self.scraper = scraper
        self.session = session
        self.selectors = selectors
        self.default_geo_urn = default_geo_urn

        self.container_locator = ContainerLocator.for_search_results(selectors, container_wait_ms)
        self.summary_extractor = ProfileSummaryExtractor(selectors)
        self.profile_extractor = ProfileExtractor(selectors, expand_delay=expand_delay)
        self._restored = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScrapingService":
        selectors = load_selector_set(settings.selectors_file or None)
        scraper = LinkedInScraper(
            headless=settings.headless,
            slow_mo_ms=settings.slow_mo_ms,
            user_agent=settings.user_agent,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            page_settle_ms=settings.page_settle_ms,
            artifacts_dir=Path(settings.artifacts_dir) if settings.artifacts_dir else None,
        )
        session = SessionManager(
            credentials=settings.credentials,
            cookie_store=CookieStore(settings.cookies_path),
            selectors=selectors,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            element_timeout_ms=settings.element_timeout_ms,
            login_settle_ms=settings.login_settle_ms,
            page_settle_ms=settings.page_settle_ms,
        )
        return cls(
            scraper,
            session,
            selectors,
            container_wait_ms=settings.container_wait_ms,
            expand_delay=settings.expand_delay_ms / 1000,
            default_geo_urn=settings.default_geo_urn,
        )

    async def ensure_session(self) -> None:
        """Start the browser and restore the saved session on first use."""
        if not self.scraper.is_started:
            await self.scraper.start()
            self._restored = False

        if not self._restored:
            await self.session.restore(self.scraper.context)
            self._restored = True

    async def _open(self, url: str) -> None:
        """
        Navigate to url, recovering from a login wall at most once.

        A login wall means the remote session expired (or never existed).
        Exactly one login attempt and one re-navigation follow; a login wall
        that survives a successful login is a session error.
        """
        await self.scraper.navigate(url)

        if not await self.session.is_login_wall(self.scraper.page):
            return

        logger.info("🔑 Login required, attempting automatic login...")
        self.session.mark_expired()
        try:
            await self.session.login(self.scraper.page)
        except (SessionError, NavigationError):
            await self.scraper.save_failure_artifacts("login_failed")
            raise

        logger.info("🔄 Redirecting after login...")
        await self.scraper.navigate(url)

        if await self.session.is_login_wall(self.scraper.page):
            self.session.mark_expired()
            await self.scraper.save_failure_artifacts("login_wall")
            raise SessionError("Still seeing the login form after a successful login")

    async def search_people(self, filters: SearchFilters) -> SearchOutcome:
        """Run a people search and extract one summary per result row."""
        encoded = encode_search_filters(filters, self.default_geo_urn)
        logger.info(f"🔍 Searching for people with filters: {filters.as_dict()}")

        await self.ensure_session()
        await self._open(encoded.url)

        location = await self.container_locator.locate(self.scraper.page)
        outcome = SearchOutcome(
            filters=filters,
            url=encoded.url,
            status=location.status,
            container_strategy=location.container_strategy,
            row_strategy=location.row_strategy,
            diagnostics=encoded.diagnostics + location.diagnostics,
        )

        if location.status == "layout_change":
            logger.warning(f"⚠️  No results recognized on page ({await self.scraper.describe_page()})")
            await self.scraper.save_failure_artifacts("layout_change")
            return outcome

        seen_urls = set()
        logger.info(f"🎯 Processing {len(location.rows)} profile results...")
        for index, row in enumerate(location.rows):
            result = await self.summary_extractor.extract(row, index)
            if result.skipped:
                outcome.skipped += 1
                continue

            summary = result.record
            if summary.profile_url in seen_urls:
                logger.debug(f"Duplicate result {summary.profile_url} dropped")
                continue
            seen_urls.add(summary.profile_url)
            outcome.records.append(summary)

        if outcome.skipped:
            outcome.diagnostics.append(f"{outcome.skipped} result rows skipped (no profile URL)")

        logger.info(
            f"Extracted {outcome.count} profiles from {len(location.rows)} rows "
            f"(container: {location.container_strategy}, rows: {location.row_strategy})"
        )
        return outcome

    async def fetch_profile(self, profile_url: Optional[str]) -> ProfileOutcome:
        """Load one profile page and extract everything it shows."""
        url = validate_profile_url(profile_url)
        logger.info(f"🔍 Scraping profile: {url}")

        await self.ensure_session()
        await self._open(url)

        result = await self.profile_extractor.extract(self.scraper.page, url)
        logger.info(
            f"Extracted profile {result.record.display_name!r}: "
            f"{len(result.record.experience)} positions, {len(result.record.education)} schools, "
            f"{len(result.record.skills)} skills, {len(result.record.certifications)} certifications"
        )
        return ProfileOutcome(record=result.record, missing_fields=result.missing_fields)

    async def close(self) -> None:
        await self.scraper.close()
        self._restored = False
