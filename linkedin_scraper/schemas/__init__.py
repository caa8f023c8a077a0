from linkedin_scraper.schemas.search import (
    ProfileSummaryResponse,
    SearchPeopleRequest,
    SearchPeopleResponse,
)
from linkedin_scraper.schemas.profile import (
    FetchProfileRequest,
    FetchProfileResponse,
    FullProfileResponse,
)

__all__ = [
    "ProfileSummaryResponse",
    "SearchPeopleRequest",
    "SearchPeopleResponse",
    "FetchProfileRequest",
    "FetchProfileResponse",
    "FullProfileResponse",
]
