import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Error as PlaywrightError,
    Playwright,
    TimeoutError as PlaywrightTimeout,
)

from linkedin_scraper.exceptions import BrowserStartError, NavigationError, NavigationTimeoutError, ScraperError

logger = logging.getLogger(__name__)


class LinkedInScraper:
    """
    One long-lived browser, context and page.

    The page is not safe to share across concurrent navigations: callers
    run one operation at a time against it. The browser is started
    explicitly with start() and released with close(); nothing here is
    process-global.
    """

    # Browser launch arguments for headless operation
    BROWSER_ARGS = [
        "--disable-blink-features=AutomationControlled",
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--disable-extensions",
        "--disable-background-networking",
        "--disable-default-apps",
        "--disable-sync",
        "--disable-translate",
        "--mute-audio",
    ]

    VIEWPORT = {"width": 1920, "height": 1080}

    def __init__(
        self,
        headless: bool = True,
        slow_mo_ms: int = 0,
        user_agent: Optional[str] = None,
        navigation_timeout_ms: int = 60000,
        page_settle_ms: int = 5000,
        artifacts_dir: Optional[Path] = None,
    ):
        self.headless = headless
        self.slow_mo_ms = slow_mo_ms
        self.user_agent = user_agent
        self.navigation_timeout_ms = navigation_timeout_ms
        self.page_settle_ms = page_settle_ms
        self.artifacts_dir = artifacts_dir

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def is_started(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise ScraperError("Browser not initialized. Call start() first.")
        return self._page

    @property
    def context(self) -> BrowserContext:
        if self._context is None:
            raise ScraperError("Browser not initialized. Call start() first.")
        return self._context

    async def start(self) -> None:
        if self.is_started:
            return

        logger.info(f"Launching Chromium (headless={self.headless}, slow_mo={self.slow_mo_ms}ms)")
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                slow_mo=self.slow_mo_ms,
                args=self.BROWSER_ARGS,
            )
            self._context = await self._browser.new_context(
                viewport=self.VIEWPORT,
                user_agent=self.user_agent,
            )
            self._page = await self._context.new_page()
        except PlaywrightError as e:
            logger.error(f"❌ Failed to launch browser: {e}")
            await self.close()
            raise BrowserStartError(f"Failed to launch browser: {e}") from e

    async def navigate(self, url: str) -> None:
        """
        Load a page and let it settle.

        A load that exceeds the navigation timeout aborts the operation with
        NavigationTimeoutError, and any other load failure with
        NavigationError; everything below this level degrades to "not found"
        instead.
        """
        page = self.page
        logger.info(f"🌐 Navigating to: {url}")
        try:
            await page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeout:
            await self.save_failure_artifacts("timeout")
            raise NavigationTimeoutError(url, self.navigation_timeout_ms)
        except PlaywrightError as e:
            logger.error(f"❌ Navigation to {url} failed: {e}")
            await self.save_failure_artifacts("navigation_error")
            raise NavigationError(url, str(e)) from e

        await page.wait_for_timeout(self.page_settle_ms)

    async def describe_page(self) -> str:
        """Title and URL of the current page, for diagnostics."""
        try:
            title = await self.page.title()
        except Exception:
            title = "?"
        return f"title={title!r} url={self.page.url}"

    async def save_failure_artifacts(self, reason: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Save screenshot and HTML snapshot of the current page for debugging.

        Disabled unless an artifacts directory is configured.
        Returns: (screenshot_path, html_path)
        """
        if self.artifacts_dir is None or self._page is None:
            return None, None

        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        prefix = f"{timestamp}_{reason}"

        screenshot_path: Optional[str] = None
        html_path: Optional[str] = None

        try:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create artifacts directory {self.artifacts_dir}: {e}")
            return None, None

        try:
            screenshot_file = self.artifacts_dir / f"{prefix}.png"
            await self._page.screenshot(path=str(screenshot_file), full_page=True)
            screenshot_path = str(screenshot_file)
        except Exception as e:
            logger.debug(f"Screenshot failed: {e}")

        try:
            html_file = self.artifacts_dir / f"{prefix}.html"
            html_file.write_text(await self._page.content(), encoding="utf-8")
            html_path = str(html_file)
        except Exception as e:
            logger.debug(f"HTML snapshot failed: {e}")

        if screenshot_path or html_path:
            logger.info(f"Saved failure artifacts for {reason}: {screenshot_path}, {html_path}")
        return screenshot_path, html_path

    async def close(self) -> None:
        """Close context, browser and playwright. Safe to call more than once."""
        if self._context:
            try:
                await self._context.close()
            except Exception:
                pass
            self._context = None
            self._page = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception:
                pass
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception:
                pass
            self._playwright = None
