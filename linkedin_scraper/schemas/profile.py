from typing import List, Optional

from pydantic import Field, field_validator

from linkedin_scraper.schemas.search import CamelModel


class FetchProfileRequest(CamelModel):
    profile_url: str = Field(
        ...,
        description="LinkedIn profile URL (e.g., https://www.linkedin.com/in/username/)",
    )

    @field_validator("profile_url")
    @classmethod
    def profile_url_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("profileUrl must not be blank")
        return v


class ExperienceResponse(CamelModel):
    title: str
    organization: str
    duration_text: str
    description: Optional[str] = None


class EducationResponse(CamelModel):
    institution: str
    degree: Optional[str] = None
    dates_text: Optional[str] = None


class CertificationResponse(CamelModel):
    name: str
    issuer: str
    issue_date: Optional[str] = None
    expiration_date: Optional[str] = None
    credential_id: Optional[str] = None


class FullProfileResponse(CamelModel):
    display_name: str
    profile_url: str
    headline: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    experience: List[ExperienceResponse] = []
    education: List[EducationResponse] = []
    skills: List[str] = []
    certifications: List[CertificationResponse] = []


class FetchProfileResponse(CamelModel):
    success: bool = True
    record: FullProfileResponse
    missing_fields: List[str] = []

    @classmethod
    def from_outcome(cls, outcome) -> "FetchProfileResponse":
        return cls(
            success=True,
            record=FullProfileResponse.model_validate(outcome.record),
            missing_fields=outcome.missing_fields,
        )
