"""
Tests for people-search URL construction.
"""
import pytest
from urllib.parse import parse_qsl, unquote, urlsplit

from linkedin_scraper.scrapers.records import SearchFilters
from linkedin_scraper.utils.url_builder import (
    DEFAULT_GEO_URN,
    PEOPLE_SEARCH_URL,
    build_people_search_url,
    canonicalize_profile_url,
    encode_search_filters,
)


def query_params(url: str) -> dict:
    return dict(parse_qsl(urlsplit(url).query))


class TestEncodeSearchFilters:
    """Tests for encode_search_filters()."""

    def test_keywords_only_uses_default_location(self):
        url = build_people_search_url(SearchFilters(keywords="software engineer"))
        assert url.startswith(PEOPLE_SEARCH_URL)
        assert "keywords=software%20engineer" in url
        assert DEFAULT_GEO_URN in unquote(url)
        assert "network" not in query_params(url)

    def test_free_text_location_becomes_keywords(self):
        url = build_people_search_url(SearchFilters(location="San Francisco"))
        params = query_params(url)
        assert params["keywords"] == "San Francisco"
        assert "geoUrn" not in params
        assert "location" not in params

    def test_free_text_location_merges_with_keywords(self):
        url = build_people_search_url(SearchFilters(keywords="data engineer", location="Berlin"))
        assert query_params(url)["keywords"] == "data engineer Berlin"

    def test_numeric_location_is_geo_urn(self):
        url = build_people_search_url(SearchFilters(keywords="nurse", location="90000084"))
        params = query_params(url)
        assert params["geoUrn"] == '["90000084"]'
        assert params["origin"] == "FACETED_SEARCH"
        assert params["keywords"] == "nurse"

    def test_network_degree_first(self):
        url = build_people_search_url(SearchFilters(network_degree="first"))
        params = query_params(url)
        assert params["origin"] == "FACETED_SEARCH"
        assert params["network"] == '["F"]'

    @pytest.mark.parametrize("degree,code", [("first", "F"), ("second", "S"), ("thirdPlus", "O")])
    def test_network_degree_codes(self, degree, code):
        encoded = encode_search_filters(SearchFilters(network_degree=degree))
        assert ("network", f'["{code}"]') in encoded.params
        assert encoded.diagnostics == []

    @pytest.mark.parametrize("degree", ["fourth", "FIRST", "3rd", "F"])
    def test_invalid_network_degree_dropped_with_diagnostic(self, degree):
        with_invalid = encode_search_filters(SearchFilters(keywords="cto", network_degree=degree))
        without = encode_search_filters(SearchFilters(keywords="cto"))

        assert with_invalid.url == without.url
        assert len(with_invalid.diagnostics) == 1
        assert degree in with_invalid.diagnostics[0]

    def test_origin_emitted_once(self):
        encoded = encode_search_filters(
            SearchFilters(keywords="pm", location="103644278", network_degree="second")
        )
        assert [name for name, _ in encoded.params] == ["keywords", "origin", "geoUrn", "network"]

    def test_blank_values_count_as_absent(self):
        blank = build_people_search_url(SearchFilters(keywords="  ", location="", network_degree=" "))
        empty = build_people_search_url(SearchFilters())
        assert blank == empty
        assert "keywords" not in query_params(blank)

    def test_custom_default_geo_urn(self):
        url = build_people_search_url(SearchFilters(keywords="chef"), default_geo_urn="101174742")
        assert query_params(url)["geoUrn"] == '["101174742"]'

    def test_same_filters_give_identical_urls(self):
        filters = SearchFilters(keywords="software engineer", location="London", network_degree="second")
        assert build_people_search_url(filters) == build_people_search_url(filters)


class TestCanonicalizeProfileUrl:
    def test_strips_query_and_fragment(self):
        url = "https://www.linkedin.com/in/jane-doe?miniProfileUrn=urn%3Ali%3Afs#experience"
        assert canonicalize_profile_url(url) == "https://www.linkedin.com/in/jane-doe"

    def test_relative_url_made_absolute(self):
        assert canonicalize_profile_url("/in/jane-doe/") == "https://www.linkedin.com/in/jane-doe/"
