from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from linkedin_scraper.scrapers.records import NetworkDegree, SearchFilters


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SearchPeopleRequest(CamelModel):
    keywords: Optional[str] = Field(None, description="Search keywords (e.g., 'software engineer')")
    location: Optional[str] = Field(
        None,
        description="Location: a numeric geoUrn code, or free text appended to the keywords",
    )
    # Not an enum field: an unknown value is reported in diagnostics and
    # dropped instead of rejecting the whole search
    network_degree: Optional[str] = Field(
        None,
        description="Network degree filter",
        json_schema_extra={"enum": [d.value for d in NetworkDegree]},
    )

    def to_filters(self) -> SearchFilters:
        return SearchFilters(
            keywords=self.keywords,
            location=self.location,
            network_degree=self.network_degree,
        )


class ProfileSummaryResponse(CamelModel):
    display_name: str
    profile_url: str
    headline: Optional[str] = None


class SearchPeopleResponse(CamelModel):
    success: bool = True
    count: int
    records: List[ProfileSummaryResponse]
    echoed_filters: SearchPeopleRequest
    status: str
    diagnostics: List[str] = []

    @classmethod
    def from_outcome(cls, outcome, request: SearchPeopleRequest) -> "SearchPeopleResponse":
        return cls(
            success=True,
            count=outcome.count,
            records=[ProfileSummaryResponse.model_validate(r) for r in outcome.records],
            echoed_filters=request,
            status=outcome.status,
            diagnostics=outcome.diagnostics,
        )
