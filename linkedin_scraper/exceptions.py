"""
Error taxonomy for the scraping pipeline.

Only these interrupt an operation: bad caller input, a session that could
not be (re)established, and a browser that could not start or load a
top-level page.
Field and record misses are values (see extractors.ExtractionResult), not
exceptions.
"""
from typing import Optional


class ScraperError(Exception):
    """Base class for errors that abort a scraping operation."""
    pass


class InputValidationError(ScraperError):
    """Malformed or missing caller input. Surfaced immediately, never retried."""
    pass


class SessionError(ScraperError):
    """The authenticated session could not be established for this operation."""
    pass


class LoginFailedError(SessionError):
    """Credential submission did not reach an authenticated page."""
    pass


class ChallengeRequiredError(SessionError):
    """The site demands manual verification before it will accept a login.

    Not retried automatically: resolve the challenge out of band, then issue
    a fresh operation.
    """
    pass


class BrowserStartError(ScraperError):
    """Chromium could not be launched."""
    pass


class NavigationError(ScraperError):
    """A top-level page load failed, e.g. net::ERR_TOO_MANY_REDIRECTS."""

    def __init__(self, url: str, reason: str, message: Optional[str] = None):
        self.url = url
        self.reason = reason
        super().__init__(message or f"Could not load {url}: {reason}")


class NavigationTimeoutError(NavigationError):
    """A top-level page load exceeded its bound."""

    def __init__(self, url: str, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(url, "timeout", f"Page load timed out after {timeout_ms // 1000} seconds: {url}")
