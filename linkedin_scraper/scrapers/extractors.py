"""
Multi-fallback extraction for LinkedIn search results and profiles.

Every logical field is read through a SelectorChain: an ordered list of
candidate selectors tried until one produces a value. Fields compose into
records, records into sections and pages.

Principles:
1. Try current markup first, fall back to legacy and structural patterns
2. A failing query is a miss, never an exception
3. A missing optional field leaves the record intact (value None)
4. A missing required field skips the record, with a logged reason
5. Log which strategy succeeded, so drift shows up in the logs first
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Union

from playwright.async_api import Page, ElementHandle, Error as PlaywrightError

from linkedin_scraper.scrapers.records import (
    Certification,
    Education,
    Experience,
    FullProfile,
    ProfileSummary,
    UNKNOWN_COMPANY,
    UNKNOWN_DURATION,
    UNKNOWN_ISSUER,
    UNKNOWN_NAME,
    UNKNOWN_TITLE,
)
from linkedin_scraper.scrapers.selectors import SelectorSet, Strategy
from linkedin_scraper.utils.url_builder import canonicalize_profile_url

logger = logging.getLogger(__name__)

Scope = Union[Page, ElementHandle]
Reader = Callable[[ElementHandle], Awaitable[Optional[str]]]


# =============================================================================
# Results
# =============================================================================

@dataclass
class ExtractionResult:
    """Result of extracting one field: a value, or absent."""
    success: bool
    value: Any = None
    strategy_name: str = ""
    fallback_level: int = -1  # Which strategy succeeded (0 = primary)
    attempts: int = 0         # Candidates evaluated
    raw_text: str = ""

    @classmethod
    def absent(cls, attempts: int = 0) -> "ExtractionResult":
        return cls(success=False, attempts=attempts)


@dataclass
class ChainMatch:
    """Elements matched by the first candidate with a non-empty result set."""
    elements: List[ElementHandle] = field(default_factory=list)
    strategy_name: str = ""
    fallback_level: int = -1
    attempts: int = 0

    @property
    def found(self) -> bool:
        return len(self.elements) > 0


@dataclass
class RecordResult:
    """Result of extracting one record: the record, or a skip with a reason."""
    record: Optional[Any] = None
    skip_reason: Optional[str] = None
    missing_fields: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.record is None


# =============================================================================
# Selector Chain
# =============================================================================

def _normalize_strategy(entry: Union[str, Strategy], index: int) -> Strategy:
    if isinstance(entry, str):
        return {"name": entry, "selector": entry, "level": index}
    return entry


class SelectorChain:
    """
    Ordered fallback selectors for one logical field.

    Candidates are evaluated in order and the first non-empty match wins;
    the rest are never queried. A candidate that raises (malformed selector,
    detached node, closed page) counts as no match.
    """

    def __init__(self, name: str, strategies: Sequence[Union[str, Strategy]]):
        self.name = name
        self.strategies: List[Strategy] = [
            _normalize_strategy(entry, i) for i, entry in enumerate(strategies)
        ]

    @classmethod
    def from_selectors(cls, selectors: SelectorSet, name: str) -> "SelectorChain":
        return cls(name, selectors.get(name))

    def __len__(self) -> int:
        return len(self.strategies)

    def __repr__(self) -> str:
        return f"SelectorChain({self.name!r}, {len(self.strategies)} candidates)"

    async def query(self, scope: Scope) -> ChainMatch:
        """Return the elements of the first candidate that matches anything."""
        attempts = 0
        for strategy in self.strategies:
            attempts += 1
            try:
                elements = await scope.query_selector_all(strategy["selector"])
            except Exception as e:
                logger.debug(f"{self.name}: strategy {strategy['name']} failed: {e}")
                continue

            if elements:
                return ChainMatch(
                    elements=list(elements),
                    strategy_name=strategy["name"],
                    fallback_level=strategy["level"],
                    attempts=attempts,
                )

        return ChainMatch(attempts=attempts)

    async def first_value(self, scope: Scope, reader: Reader) -> ExtractionResult:
        """
        Return the first value `reader` produces, walking candidates in order.

        Within a candidate, elements are read in document order. A candidate
        whose elements all read as None falls through to the next candidate.
        """
        attempts = 0
        for strategy in self.strategies:
            attempts += 1
            try:
                elements = await scope.query_selector_all(strategy["selector"])
            except Exception as e:
                logger.debug(f"{self.name}: strategy {strategy['name']} failed: {e}")
                continue

            for element in elements:
                try:
                    value = await reader(element)
                except Exception as e:
                    logger.debug(f"{self.name}: element read failed via {strategy['name']}: {e}")
                    continue

                if value:
                    return ExtractionResult(
                        success=True,
                        value=value,
                        strategy_name=strategy["name"],
                        fallback_level=strategy["level"],
                        attempts=attempts,
                        raw_text=value[:100],
                    )

        return ExtractionResult.absent(attempts)


# =============================================================================
# Readers and normalizers
# =============================================================================

async def read_text(element: ElementHandle) -> Optional[str]:
    return await element.text_content()


async def read_single_line_text(element: ElementHandle) -> Optional[str]:
    """Text of an element that renders as one line; None for multi-line blocks."""
    text = await element.text_content()
    if text and "\n" in text.strip():
        return None
    return text


def attribute_reader(attribute: str) -> Reader:
    async def _read(element: ElementHandle) -> Optional[str]:
        return await element.get_attribute(attribute)
    return _read


def collapse_whitespace(text: Optional[str]) -> str:
    if not text:
        return ""
    return " ".join(text.split())


# Certification date line, e.g. "Issued Jan 2020 · Expires Jan 2023"
ISSUED_PATTERN = r"Issued\s+(.+?)(?:\s*[·•|–-]?\s*(?:Expire[sd]|No Expiration).*)?$"
EXPIRES_PATTERN = r"Expire[sd]\s+(.+)$"
CREDENTIAL_ID_PATTERN = r"Credential ID\s*:?\s*(.+)$"

# Visually-hidden labels the legacy markup puts in front of values
DATES_EMPLOYED_PATTERN = r"^(?:Dates Employed\s*)?(.+)$"
DATES_ATTENDED_PATTERN = r"^(?:Dates attended or expected graduation\s*)?(.+)$"
DEGREE_NAME_PATTERN = r"^(?:Degree Name\s*)?(.+)$"
COMPANY_NAME_PATTERN = r"^(?:Company Name\s*)?(.+)$"

MAX_SKILL_NAME_LENGTH = 80


class FieldExtractor:
    """
    One field = one SelectorChain + a reader + normalization.

    Normalization order: collapse whitespace, optional regex sub-extraction
    (first group), optional validation, optional transform. A value that
    normalizes to empty or fails validation is a miss for that element, and
    the chain moves on.
    """

    def __init__(
        self,
        name: str,
        chain: SelectorChain,
        reader: Reader = read_text,
        pattern: Optional[str] = None,
        validate: Optional[Callable[[str], bool]] = None,
        transform: Optional[Callable[[str], str]] = None,
    ):
        self.name = name
        self.chain = chain
        self.reader = reader
        self.pattern = re.compile(pattern, re.IGNORECASE) if pattern else None
        self.validate = validate
        self.transform = transform

    def normalize(self, raw: Optional[str]) -> Optional[str]:
        text = collapse_whitespace(raw)
        if not text:
            return None

        if self.pattern is not None:
            match = self.pattern.search(text)
            if not match:
                return None
            text = collapse_whitespace(match.group(1))
            if not text:
                return None

        if self.validate is not None and not self.validate(text):
            return None

        if self.transform is not None:
            text = self.transform(text)

        return text or None

    async def _read(self, element: ElementHandle) -> Optional[str]:
        return self.normalize(await self.reader(element))

    async def extract(self, scope: Scope) -> ExtractionResult:
        result = await self.chain.first_value(scope, self._read)
        if result.success:
            logger.debug(
                f"{self.name} extracted via {result.strategy_name} "
                f"(level {result.fallback_level})"
            )
        return result


# =============================================================================
# Record Extractors
# =============================================================================

class RecordExtractor:
    """
    Builds one typed record from one element.

    required: every one of these must be present or the element is skipped.
    any_of: at least one of these must be present or the element is skipped.
    Other fields are optional and simply absent when not found.
    """

    record_name = "record"
    required: Sequence[str] = ()
    any_of: Sequence[str] = ()

    def __init__(self, fields: Dict[str, FieldExtractor]):
        self.fields = fields

    def _field_order(self) -> Iterable[str]:
        # Required fields first so a skip costs as few queries as possible
        yield from self.required
        for name in self.fields:
            if name not in self.required:
                yield name

    async def extract(self, element: Scope, index: int = 0) -> RecordResult:
        values: Dict[str, str] = {}
        missing: List[str] = []

        for name in self._field_order():
            result = await self.fields[name].extract(element)
            if result.success:
                values[name] = result.value
                continue

            missing.append(name)
            if name in self.required:
                reason = f"missing required field {name!r}"
                logger.info(f"⚠️  Skipping {self.record_name} {index + 1}: {reason}")
                return RecordResult(skip_reason=reason, missing_fields=missing)

        if self.any_of and not any(name in values for name in self.any_of):
            reason = f"none of {', '.join(self.any_of)} found"
            logger.debug(f"Skipping {self.record_name} {index + 1}: {reason}")
            return RecordResult(skip_reason=reason, missing_fields=missing)

        if missing:
            logger.debug(f"{self.record_name} {index + 1}: missing optional fields {missing}")

        return RecordResult(record=self.build(values), missing_fields=missing)

    def build(self, values: Dict[str, str]) -> Any:
        raise NotImplementedError


def _is_profile_href(href: str) -> bool:
    return "/in/" in href


class ProfileSummaryExtractor(RecordExtractor):
    """One search-result row. The canonical profile URL is required."""

    record_name = "search result"
    required = ("profile_url",)

    def __init__(self, selectors: SelectorSet):
        super().__init__({
            "profile_url": FieldExtractor(
                "profile_url",
                SelectorChain.from_selectors(selectors, "search.profile_url"),
                reader=attribute_reader("href"),
                validate=_is_profile_href,
                transform=canonicalize_profile_url,
            ),
            "display_name": FieldExtractor(
                "display_name", SelectorChain.from_selectors(selectors, "search.name")
            ),
            "headline": FieldExtractor(
                "headline", SelectorChain.from_selectors(selectors, "search.headline")
            ),
        })

    def build(self, values: Dict[str, str]) -> ProfileSummary:
        return ProfileSummary(
            display_name=values.get("display_name", UNKNOWN_NAME),
            profile_url=values["profile_url"],
            headline=values.get("headline"),
        )


class ExperienceExtractor(RecordExtractor):
    """One position. Kept when at least a title or an organization is found."""

    record_name = "experience"
    any_of = ("title", "organization")

    def __init__(self, selectors: SelectorSet):
        super().__init__({
            "title": FieldExtractor(
                "title", SelectorChain.from_selectors(selectors, "experience.title")
            ),
            "organization": FieldExtractor(
                "organization",
                SelectorChain.from_selectors(selectors, "experience.organization"),
                pattern=COMPANY_NAME_PATTERN,
            ),
            "duration_text": FieldExtractor(
                "duration_text",
                SelectorChain.from_selectors(selectors, "experience.duration"),
                pattern=DATES_EMPLOYED_PATTERN,
            ),
            "description": FieldExtractor(
                "description", SelectorChain.from_selectors(selectors, "experience.description")
            ),
        })

    def build(self, values: Dict[str, str]) -> Experience:
        return Experience(
            title=values.get("title", UNKNOWN_TITLE),
            organization=values.get("organization", UNKNOWN_COMPANY),
            duration_text=values.get("duration_text", UNKNOWN_DURATION),
            description=values.get("description"),
        )


class EducationExtractor(RecordExtractor):
    record_name = "education"
    required = ("institution",)

    def __init__(self, selectors: SelectorSet):
        super().__init__({
            "institution": FieldExtractor(
                "institution", SelectorChain.from_selectors(selectors, "education.institution")
            ),
            "degree": FieldExtractor(
                "degree",
                SelectorChain.from_selectors(selectors, "education.degree"),
                pattern=DEGREE_NAME_PATTERN,
            ),
            "dates_text": FieldExtractor(
                "dates_text",
                SelectorChain.from_selectors(selectors, "education.dates"),
                pattern=DATES_ATTENDED_PATTERN,
            ),
        })

    def build(self, values: Dict[str, str]) -> Education:
        return Education(
            institution=values["institution"],
            degree=values.get("degree"),
            dates_text=values.get("dates_text"),
        )


class CertificationExtractor(RecordExtractor):
    """
    One license or certification.

    Issue and expiration dates usually share one line
    ("Issued Jan 2020 · Expires Jan 2023"), so both fields read the same
    chain and pull their part out with a regex.
    """

    record_name = "certification"
    required = ("name",)

    def __init__(self, selectors: SelectorSet):
        dates = SelectorChain.from_selectors(selectors, "certifications.dates")
        super().__init__({
            "name": FieldExtractor(
                "name", SelectorChain.from_selectors(selectors, "certifications.name")
            ),
            "issuer": FieldExtractor(
                "issuer", SelectorChain.from_selectors(selectors, "certifications.issuer")
            ),
            "issue_date": FieldExtractor("issue_date", dates, pattern=ISSUED_PATTERN),
            "expiration_date": FieldExtractor("expiration_date", dates, pattern=EXPIRES_PATTERN),
            "credential_id": FieldExtractor(
                "credential_id",
                SelectorChain.from_selectors(selectors, "certifications.credential_id"),
                pattern=CREDENTIAL_ID_PATTERN,
            ),
        })

    def build(self, values: Dict[str, str]) -> Certification:
        return Certification(
            name=values["name"],
            issuer=values.get("issuer", UNKNOWN_ISSUER),
            issue_date=values.get("issue_date"),
            expiration_date=values.get("expiration_date"),
            credential_id=values.get("credential_id"),
        )


class SkillExtractor(RecordExtractor):
    record_name = "skill"
    required = ("name",)

    def __init__(self, selectors: SelectorSet):
        super().__init__({
            "name": FieldExtractor(
                "name",
                SelectorChain.from_selectors(selectors, "skills.name"),
                reader=read_single_line_text,
                validate=lambda text: len(text) <= MAX_SKILL_NAME_LENGTH,
            ),
        })

    def build(self, values: Dict[str, str]) -> str:
        return values["name"]


# =============================================================================
# Sections (repeating records inside a page)
# =============================================================================

async def click_expander(scope: Scope, chain: SelectorChain, delay_seconds: float) -> bool:
    """Click the first "show more" control the chain finds. Best effort."""
    match = await chain.query(scope)
    if not match.found:
        return False

    try:
        await match.elements[0].click()
    except Exception as e:
        logger.debug(f"{chain.name}: expander click failed: {e}")
        return False

    if delay_seconds > 0:
        await asyncio.sleep(delay_seconds)
    return True


@dataclass
class SectionResult:
    items: List[Any] = field(default_factory=list)
    strategy_name: str = ""
    skipped: int = 0


class SectionExtractor:
    """A list section: an item chain plus a record extractor per item."""

    def __init__(
        self,
        name: str,
        items_chain: SelectorChain,
        item_extractor: RecordExtractor,
        expand_chain: Optional[SelectorChain] = None,
        expand_delay: float = 1.0,
    ):
        self.name = name
        self.items_chain = items_chain
        self.item_extractor = item_extractor
        self.expand_chain = expand_chain
        self.expand_delay = expand_delay

    async def extract(self, scope: Scope) -> SectionResult:
        if self.expand_chain is not None:
            await click_expander(scope, self.expand_chain, self.expand_delay)

        match = await self.items_chain.query(scope)
        if not match.found:
            logger.debug(f"{self.name}: no items after {match.attempts} strategies")
            return SectionResult()

        section = SectionResult(strategy_name=match.strategy_name)
        for index, element in enumerate(match.elements):
            result = await self.item_extractor.extract(element, index)
            if result.skipped:
                section.skipped += 1
            else:
                section.items.append(result.record)

        logger.debug(
            f"{self.name}: {len(section.items)} items via {match.strategy_name}"
            f"{f', {section.skipped} skipped' if section.skipped else ''}"
        )
        return section


# =============================================================================
# Full profile
# =============================================================================

@dataclass
class ProfileResult:
    record: FullProfile
    missing_fields: List[str] = field(default_factory=list)


class ProfileExtractor:
    """
    Extracts a FullProfile from a rendered profile page.

    The profile URL is supplied by the caller, so the page is never skipped:
    at worst the result is the URL, an "Unknown" name, and empty sections.
    """

    def __init__(self, selectors: SelectorSet, expand_delay: float = 1.0):
        def chain(name: str) -> SelectorChain:
            return SelectorChain.from_selectors(selectors, name)

        self.fields = {
            "display_name": FieldExtractor("display_name", chain("profile.name")),
            "headline": FieldExtractor("headline", chain("profile.headline")),
            "location": FieldExtractor("location", chain("profile.location")),
            "about": FieldExtractor("about", chain("profile.about")),
        }
        self.about_expander = chain("profile.about_expand")
        self.expand_delay = expand_delay

        self.experience = SectionExtractor(
            "experience",
            chain("experience.items"),
            ExperienceExtractor(selectors),
            expand_chain=chain("profile.experience_expand"),
            expand_delay=expand_delay,
        )
        self.education = SectionExtractor(
            "education", chain("education.items"), EducationExtractor(selectors)
        )
        self.skills = SectionExtractor(
            "skills",
            chain("skills.items"),
            SkillExtractor(selectors),
            expand_chain=chain("profile.skills_expand"),
            expand_delay=expand_delay,
        )
        self.certifications = SectionExtractor(
            "certifications", chain("certifications.items"), CertificationExtractor(selectors)
        )

    async def extract(self, page: Scope, profile_url: str) -> ProfileResult:
        values: Dict[str, str] = {}
        missing: List[str] = []

        await click_expander(page, self.about_expander, self.expand_delay)

        for name, extractor in self.fields.items():
            result = await extractor.extract(page)
            if result.success:
                values[name] = result.value
            else:
                missing.append(name)

        experience = await self.experience.extract(page)
        education = await self.education.extract(page)
        skills = await self.skills.extract(page)
        certifications = await self.certifications.extract(page)

        for section_name, section in (
            ("experience", experience),
            ("education", education),
            ("skills", skills),
            ("certifications", certifications),
        ):
            if not section.items:
                missing.append(section_name)

        profile = FullProfile(
            display_name=values.get("display_name", UNKNOWN_NAME),
            profile_url=profile_url,
            headline=values.get("headline"),
            location=values.get("location"),
            about=values.get("about"),
            experience=experience.items,
            education=education.items,
            skills=list(dict.fromkeys(skills.items)),
            certifications=certifications.items,
        )

        if missing:
            logger.info(f"Profile {profile_url}: nothing found for {', '.join(missing)}")

        return ProfileResult(record=profile, missing_fields=missing)


# =============================================================================
# Container Locator
# =============================================================================

@dataclass
class ContainerLocation:
    """
    Where the result rows are, and how they were found.

    status:
    - success: rows found
    - no_results: a results area or an empty-state marker is present, no rows
    - layout_change: nothing recognizable, the markup has probably moved
    """
    status: str
    rows: List[ElementHandle] = field(default_factory=list)
    container_strategy: Optional[str] = None
    row_strategy: Optional[str] = None
    container_attempts: int = 0
    row_attempts: int = 0
    diagnostics: List[str] = field(default_factory=list)

    @property
    def container_found(self) -> bool:
        return self.container_strategy is not None


class ContainerLocator:
    """
    Two-stage lookup of repeating result rows.

    Stage 1 waits (bounded, per candidate) for a results container, which
    separates "still loading" and "no results" from "markup changed".
    Stage 2 enumerates rows inside it. Some container candidates match a
    single row rather than the list wrapper: when the winning container
    selector is also a row selector, or nothing matches inside the container,
    the row chain is re-run against the whole page and the larger match wins.
    """

    def __init__(
        self,
        container_chain: SelectorChain,
        row_chain: SelectorChain,
        empty_state_chain: Optional[SelectorChain] = None,
        wait_timeout_ms: int = 15000,
    ):
        self.container_chain = container_chain
        self.row_chain = row_chain
        self.empty_state_chain = empty_state_chain
        self.wait_timeout_ms = wait_timeout_ms

    def _is_row_level(self, container_strategy: Optional[str]) -> bool:
        row_selectors = {s["selector"] for s in self.row_chain.strategies}
        return any(
            s["name"] == container_strategy and s["selector"] in row_selectors
            for s in self.container_chain.strategies
        )

    @classmethod
    def for_search_results(cls, selectors: SelectorSet, wait_timeout_ms: int = 15000) -> "ContainerLocator":
        return cls(
            SelectorChain.from_selectors(selectors, "search.container"),
            SelectorChain.from_selectors(selectors, "search.row"),
            SelectorChain.from_selectors(selectors, "search.no_results"),
            wait_timeout_ms=wait_timeout_ms,
        )

    async def _wait_for_container(self, page: Page, location: ContainerLocation) -> Optional[ElementHandle]:
        for strategy in self.container_chain.strategies:
            location.container_attempts += 1
            try:
                container = await page.wait_for_selector(
                    strategy["selector"], state="attached", timeout=self.wait_timeout_ms
                )
            except PlaywrightError as e:
                # TimeoutError is a subclass: an element wait that runs out is a miss
                logger.debug(f"⏳ Container selector {strategy['name']!r} not found: {e}")
                continue

            if container:
                location.container_strategy = strategy["name"]
                logger.info(f"✅ Found results container using selector: {strategy['selector']}")
                return container

        return None

    async def locate(self, page: Page) -> ContainerLocation:
        location = ContainerLocation(status="layout_change")

        container = await self._wait_for_container(page, location)
        if container is None:
            location.diagnostics.append(
                f"No results container matched after {location.container_attempts} candidates"
            )
            logger.warning("⚠️  No search results container found")

        match = await self.row_chain.query(container or page)
        location.row_attempts = match.attempts

        if container is not None and (not match.found or self._is_row_level(location.container_strategy)):
            page_match = await self.row_chain.query(page)
            location.row_attempts += page_match.attempts
            if len(page_match.elements) > len(match.elements):
                match = page_match

        if match.found:
            location.status = "success"
            location.rows = match.elements
            location.row_strategy = match.strategy_name
            logger.info(f"📋 Found {len(match.elements)} rows using selector: {match.strategy_name}")
            return location

        location.diagnostics.append(f"No row selector matched after {location.row_attempts} attempts")

        if container is not None:
            location.status = "no_results"
        elif self.empty_state_chain is not None and (await self.empty_state_chain.query(page)).found:
            location.status = "no_results"
            location.diagnostics.append("Empty-state marker present")
        else:
            logger.warning("⚠️  No result rows found. The page structure might have changed.")

        return location
