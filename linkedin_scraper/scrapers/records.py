"""
Typed records produced by the extraction pipeline.

Optional fields default to None when extraction finds nothing. Only the
display name and the text fields of list items fall back to explicit
"Unknown ..." sentinels, and only when the record is otherwise salvageable.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, List

from pydantic import SecretStr

UNKNOWN_NAME = "Unknown"
UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_DURATION = "Unknown Duration"
UNKNOWN_ISSUER = "Unknown Issuer"


def mask_identifier(identifier: str) -> str:
    """Mask a login identifier for log output: jane@example.com -> j***@example.com."""
    if not identifier:
        return ""
    local, sep, domain = identifier.partition("@")
    return f"{local[:1]}***{sep}{domain}"


@dataclass(frozen=True)
class Credentials:
    """Login credentials. Supplied once at start-up and never mutated."""
    identifier: str
    secret: SecretStr

    def __repr__(self) -> str:
        return f"Credentials(identifier={mask_identifier(self.identifier)!r}, secret='**********')"

    __str__ = __repr__


class SessionState(str, enum.Enum):
    NO_SESSION = "no_session"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"
    LOGGING_IN = "logging_in"
    LOGIN_FAILED = "login_failed"


class NetworkDegree(str, enum.Enum):
    """Connection degree filter and the code the search page expects for it."""
    FIRST = "first"
    SECOND = "second"
    THIRD_PLUS = "thirdPlus"

    @property
    def code(self) -> str:
        return {
            NetworkDegree.FIRST: "F",
            NetworkDegree.SECOND: "S",
            NetworkDegree.THIRD_PLUS: "O",
        }[self]


@dataclass(frozen=True)
class SearchFilters:
    """Input to one people search. network_degree is kept as raw text so an
    invalid value can be reported and dropped instead of failing the search."""
    keywords: Optional[str] = None
    location: Optional[str] = None
    network_degree: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "keywords": self.keywords,
            "location": self.location,
            "networkDegree": self.network_degree,
        }


@dataclass
class ProfileSummary:
    """One search-result row. profile_url is the de-duplication key."""
    display_name: str
    profile_url: str
    headline: Optional[str] = None


@dataclass
class Experience:
    title: str
    organization: str
    duration_text: str
    description: Optional[str] = None


@dataclass
class Education:
    institution: str
    degree: Optional[str] = None
    dates_text: Optional[str] = None


@dataclass
class Certification:
    name: str
    issuer: str
    issue_date: Optional[str] = None
    expiration_date: Optional[str] = None
    credential_id: Optional[str] = None


@dataclass
class FullProfile:
    display_name: str
    profile_url: str
    headline: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    experience: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
