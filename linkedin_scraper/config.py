import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkedin_scraper.scrapers.records import Credentials

logger = logging.getLogger(__name__)

PLACEHOLDER_EMAIL = "your-email@example.com"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    linkedin_email: str = ""
    linkedin_password: SecretStr = SecretStr("")

    # Browser
    headless: bool = True
    slow_mo_ms: int = 1000
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    )
    cookies_path: str = "./cookies.json"

    # Timeouts and pauses (milliseconds)
    navigation_timeout_ms: int = 60000
    page_settle_ms: int = 5000
    login_settle_ms: int = 5000
    element_timeout_ms: int = 10000
    container_wait_ms: int = 15000
    expand_delay_ms: int = 1000

    # Search
    default_geo_urn: str = "104195383"

    # Diagnostics
    artifacts_dir: str = ""    # Screenshots + HTML on failure; empty disables
    selectors_file: str = ""   # JSON selector-chain overrides
    log_level: str = "INFO"

    # Legacy JSON config, read when credentials are not in the environment
    config_file: str = "config.json"

    def model_post_init(self, __context):
        if self.linkedin_email == PLACEHOLDER_EMAIL:
            raise ValueError(
                f"Please update your configuration with real LinkedIn credentials "
                f"(found placeholder {PLACEHOLDER_EMAIL})"
            )

    @property
    def credentials(self) -> Optional[Credentials]:
        if not self.linkedin_email or not self.linkedin_password.get_secret_value():
            return None
        return Credentials(identifier=self.linkedin_email, secret=self.linkedin_password)


def read_config_file(path: str) -> Dict[str, Any]:
    """
    Map a legacy config.json onto Settings fields.

    Shape: {"linkedin": {"email", "password"},
            "browser": {"headless", "slowMo", "cookiesPath"}}
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    linkedin = data.get("linkedin", {})
    browser = data.get("browser", {})

    values: Dict[str, Any] = {}
    if "email" in linkedin:
        values["linkedin_email"] = linkedin["email"]
    if "password" in linkedin:
        values["linkedin_password"] = linkedin["password"]
    if "headless" in browser:
        values["headless"] = browser["headless"]
    if "slowMo" in browser:
        values["slow_mo_ms"] = browser["slowMo"]
    if "cookiesPath" in browser:
        values["cookies_path"] = browser["cookiesPath"]
    return values


def load_settings() -> Settings:
    """
    Build settings from the environment, falling back to the JSON config
    file for anything the environment does not set.
    """
    settings = Settings()
    if settings.credentials is not None:
        return settings

    config_path = Path(settings.config_file)
    if not config_path.exists():
        logger.warning(
            "No LinkedIn credentials configured. Set LINKEDIN_EMAIL and LINKEDIN_PASSWORD "
            f"or provide {config_path}; only a restored cookie session will work"
        )
        return settings

    try:
        file_values = read_config_file(str(config_path))
    except (OSError, ValueError, AttributeError) as e:
        raise ValueError(
            f"Error loading configuration from {config_path}: {e}. Please make sure it exists "
            "and is properly formatted, or set LINKEDIN_EMAIL and LINKEDIN_PASSWORD"
        ) from e

    # Environment wins over the file
    overrides = {
        key: value for key, value in file_values.items()
        if key.upper() not in os.environ
    }
    logger.info(f"Loaded configuration from {config_path}")
    return Settings(**overrides)


@lru_cache
def get_settings() -> Settings:
    return load_settings()
