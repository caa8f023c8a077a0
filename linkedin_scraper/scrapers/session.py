"""
Authenticated session ownership: cookie snapshot and login state machine.

    NO_SESSION -> RESTORING -> AUTHENTICATED -> (EXPIRED) -> LOGGING_IN
                                                  -> AUTHENTICATED | LOGIN_FAILED

The remote session can be invalidated at any time and nothing tells us so.
Expiry is only ever observed: the orchestrator sees a login form where
content should be and calls mark_expired(). LOGIN_FAILED ends the current
operation; a later operation may try again once the cause (bad credentials,
a manual challenge) has been dealt with out of band.
"""

import json
import logging
from pathlib import Path
from typing import List, Literal, Optional

from playwright.async_api import BrowserContext, Page, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from linkedin_scraper.exceptions import (
    ChallengeRequiredError,
    LoginFailedError,
    NavigationError,
    NavigationTimeoutError,
)
from linkedin_scraper.scrapers.extractors import SelectorChain
from linkedin_scraper.scrapers.records import Credentials, SessionState, mask_identifier
from linkedin_scraper.scrapers.selectors import SelectorSet

logger = logging.getLogger(__name__)

LOGIN_URL = "https://www.linkedin.com/login"

LoginOutcome = Literal["success", "challenge", "failure"]

# Pages only an authenticated session can reach
AUTHENTICATED_URL_MARKERS = ("/feed/", "/in/")

# Manual verification (email code, captcha, app approval)
CHALLENGE_URL_MARKERS = ("/checkpoint/challenge", "/challenge/")


def classify_login_url(url: str) -> LoginOutcome:
    """Classify where a login attempt landed."""
    if any(marker in url for marker in CHALLENGE_URL_MARKERS):
        return "challenge"
    if any(marker in url for marker in AUTHENTICATED_URL_MARKERS):
        return "success"
    return "failure"


class CookieStore:
    """
    Persistent cookie snapshot: a JSON array of browser cookie records
    (name, value, domain, path, expires, httpOnly, secure, sameSite).
    """

    REQUIRED_KEYS = ("name", "value")

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> List[dict]:
        """Read the snapshot. Missing, unreadable or malformed means no cookies."""
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error loading cookies from {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"❌ Cookie snapshot {self.path} is not a list, ignoring it")
            return []

        cookies = [
            c for c in data
            if isinstance(c, dict) and all(key in c for key in self.REQUIRED_KEYS)
        ]
        if len(cookies) < len(data):
            logger.warning(f"Dropped {len(data) - len(cookies)} malformed cookie records")
        return cookies

    def save(self, cookies: List[dict]) -> bool:
        """Overwrite the snapshot."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(cookies, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"❌ Error saving cookies to {self.path}: {e}")
            return False
        return True


class SessionManager:
    """
    Owns the authenticated state of one browsing context.

    No other component reads or writes the cookie store.
    """

    def __init__(
        self,
        credentials: Optional[Credentials],
        cookie_store: CookieStore,
        selectors: SelectorSet,
        navigation_timeout_ms: int = 60000,
        element_timeout_ms: int = 10000,
        login_settle_ms: int = 5000,
        page_settle_ms: int = 3000,
    ):
        self.credentials = credentials
        self.cookie_store = cookie_store
        self.navigation_timeout_ms = navigation_timeout_ms
        self.element_timeout_ms = element_timeout_ms
        self.login_settle_ms = login_settle_ms
        self.page_settle_ms = page_settle_ms

        self.identifier_chain = SelectorChain.from_selectors(selectors, "login.identifier")
        self.secret_chain = SelectorChain.from_selectors(selectors, "login.secret")
        self.submit_chain = SelectorChain.from_selectors(selectors, "login.submit")

        self.state = SessionState.NO_SESSION
        self.last_error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    async def restore(self, context: BrowserContext) -> SessionState:
        """Load the persisted snapshot into the browsing context, if there is one."""
        self.state = SessionState.RESTORING
        cookies = self.cookie_store.load()

        if not cookies:
            logger.info("No saved session to restore")
            self.state = SessionState.NO_SESSION
            return self.state

        try:
            await context.add_cookies(cookies)
        except PlaywrightError as e:
            logger.error(f"❌ Error loading cookies into browser: {e}")
            self.state = SessionState.NO_SESSION
            return self.state

        # Optimistic: the cookies may already be stale, which we find out on first navigation
        logger.info(f"🍪 Session cookies loaded ({len(cookies)} cookies)")
        self.state = SessionState.AUTHENTICATED
        return self.state

    def mark_expired(self) -> None:
        logger.info("🔑 Session expired (login wall observed)")
        self.state = SessionState.EXPIRED

    async def is_login_wall(self, page: Page) -> bool:
        """True if a visible login form is on the page."""
        match = await self.identifier_chain.query(page)
        for element in match.elements:
            try:
                if await element.is_visible():
                    return True
            except PlaywrightError:
                continue
        return False

    async def _wait_for_visible(self, page: Page, chain: SelectorChain) -> Optional[str]:
        """Return the first candidate selector that becomes visible in time."""
        for strategy in chain.strategies:
            try:
                element = await page.wait_for_selector(
                    strategy["selector"], state="visible", timeout=self.element_timeout_ms
                )
            except PlaywrightError:
                continue
            if element:
                return strategy["selector"]
        return None

    def _fail(self, error: Exception) -> Exception:
        self.state = SessionState.LOGIN_FAILED
        self.last_error = str(error)
        logger.error(f"❌ {error}")
        return error

    async def _persist(self, context: BrowserContext) -> None:
        try:
            cookies = await context.cookies()
        except PlaywrightError as e:
            logger.error(f"❌ Error reading cookies from browser: {e}")
            return
        if self.cookie_store.save(cookies):
            logger.info("💾 Session cookies saved")

    async def login(self, page: Page) -> None:
        """
        Submit credentials and classify the result.

        Raises LoginFailedError, ChallengeRequiredError or NavigationError
        (NavigationTimeoutError when the login page load runs out). Never
        retries: repeated failed logins make the site escalate.
        """
        if self.credentials is None:
            raise self._fail(LoginFailedError(
                "Login required but no LinkedIn credentials are configured"
            ))

        self.state = SessionState.LOGGING_IN
        logger.info(f"🔐 Attempting to log in as {mask_identifier(self.credentials.identifier)}...")

        try:
            await page.goto(LOGIN_URL, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeout:
            raise self._fail(NavigationTimeoutError(LOGIN_URL, self.navigation_timeout_ms))
        except PlaywrightError as e:
            raise self._fail(NavigationError(LOGIN_URL, str(e)))
        await page.wait_for_timeout(self.page_settle_ms)

        if classify_login_url(page.url) == "success":
            logger.info("✅ Already logged in")
            await self._persist(page.context)
            self.state = SessionState.AUTHENTICATED
            return

        identifier_selector = await self._wait_for_visible(page, self.identifier_chain)
        secret_selector = await self._wait_for_visible(page, self.secret_chain)
        submit = await self.submit_chain.query(page)

        if not identifier_selector or not secret_selector or not submit.found:
            raise self._fail(LoginFailedError(
                f"Login form not found on {page.url}. The page structure might have changed."
            ))

        try:
            await page.fill(identifier_selector, self.credentials.identifier)
            await page.fill(secret_selector, self.credentials.secret.get_secret_value())
            logger.info("🚀 Submitting login form...")
            await submit.elements[0].click()
        except PlaywrightError as e:
            raise self._fail(LoginFailedError(f"Could not submit login form: {e}"))

        await page.wait_for_timeout(self.login_settle_ms)

        outcome = classify_login_url(page.url)
        if outcome == "challenge":
            raise self._fail(ChallengeRequiredError(
                "LinkedIn security challenge detected. Please complete the challenge "
                "manually and try again."
            ))
        if outcome == "failure":
            raise self._fail(LoginFailedError(
                "Login failed. Please check your credentials."
            ))

        logger.info("✅ Login successful")
        await self._persist(page.context)
        self.state = SessionState.AUTHENTICATED
        self.last_error = None
