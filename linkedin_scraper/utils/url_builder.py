"""People-search URL construction."""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import quote, urlencode

from linkedin_scraper.scrapers.records import NetworkDegree, SearchFilters

logger = logging.getLogger(__name__)

LINKEDIN_BASE_URL = "https://www.linkedin.com"
PEOPLE_SEARCH_URL = f"{LINKEDIN_BASE_URL}/search/results/people/"

# Fallback geoUrn used when the caller gives no location
DEFAULT_GEO_URN = "104195383"

FACETED_ORIGIN = "FACETED_SEARCH"

_GEO_URN_PATTERN = re.compile(r"^\d+$")


@dataclass
class EncodedQuery:
    """A search URL plus the ordered parameters and any input problems found."""
    url: str
    params: List[Tuple[str, str]]
    diagnostics: List[str] = field(default_factory=list)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _list_param(value: str) -> str:
    return f'["{value}"]'


def encode_search_filters(
    filters: SearchFilters,
    default_geo_urn: str = DEFAULT_GEO_URN,
) -> EncodedQuery:
    """
    Encode search filters into the people-search query string.

    This is the SINGLE source of truth for search URL construction. Rules:
    - keywords are passed through verbatim.
    - A purely numeric location is a geoUrn and becomes a faceted
      geoUrn=["<code>"] parameter. Any other location is appended to the
      keywords, since the search page has no free-text location parameter.
      No location means the default geoUrn.
    - network degree first/second/thirdPlus maps to F/S/O. Anything else is
      reported in diagnostics and dropped; the search runs unfiltered.

    The output depends only on the input, so the same filters always give a
    byte-identical URL.
    """
    diagnostics: List[str] = []

    keywords = _clean(filters.keywords)
    location = _clean(filters.location) or default_geo_urn

    geo_urn: Optional[str] = None
    if _GEO_URN_PATTERN.match(location):
        geo_urn = location
    else:
        keywords = f"{keywords} {location}" if keywords else location

    network_code: Optional[str] = None
    raw_network = _clean(filters.network_degree)
    if raw_network is not None:
        try:
            network_code = NetworkDegree(raw_network).code
        except ValueError:
            message = (
                f"Invalid network degree filter: {filters.network_degree!r}. "
                f"Valid options: {', '.join(d.value for d in NetworkDegree)}"
            )
            logger.warning(f"⚠️  {message}")
            diagnostics.append(message)

    params: List[Tuple[str, str]] = []
    if keywords:
        params.append(("keywords", keywords))
    if geo_urn or network_code:
        params.append(("origin", FACETED_ORIGIN))
    if geo_urn:
        params.append(("geoUrn", _list_param(geo_urn)))
    if network_code:
        params.append(("network", _list_param(network_code)))

    url = f"{PEOPLE_SEARCH_URL}?{urlencode(params, quote_via=quote)}"
    return EncodedQuery(url=url, params=params, diagnostics=diagnostics)


def canonicalize_profile_url(url: str) -> str:
    """Strip tracking parameters and fragments, and make the URL absolute."""
    clean = url.strip().split("#")[0].split("?")[0]
    if not clean.startswith("http"):
        clean = f"{LINKEDIN_BASE_URL}/{clean.lstrip('/')}"
    return clean


def build_people_search_url(
    filters: SearchFilters,
    default_geo_urn: str = DEFAULT_GEO_URN,
) -> str:
    """Build the people-search URL for a set of filters."""
    return encode_search_filters(filters, default_geo_urn).url
