import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RANKING_URL = "https://myhockeyrankings.com/rank.php?y=2025&v=123"


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Run defaults (overridden by the run input file when present)
    ranking_url: str = Field(
        DEFAULT_RANKING_URL, description="Rankings page the crawl starts from."
    )
    max_teams: int = Field(
        0,
        ge=0,
        description="Maximum teams taken from each rankings page (0 = unlimited).",
    )

    # Output (records go to the default crawlee dataset under CRAWLEE_STORAGE_DIR)
    export_path: Optional[str] = Field(
        None, description="If set, the whole dataset is exported here as JSON."
    )

    # Crawler
    headless: bool = True
    max_concurrency: int = Field(4, ge=1)
    max_requests_per_crawl: int = Field(
        500, ge=1, description="Upper bound on requests accepted per run."
    )
    max_request_retries: int = Field(
        3, ge=0, description="Retries after the first failed attempt."
    )
    request_handler_timeout_secs: float = Field(60.0, gt=0)

    # Page waits
    table_wait_timeout_secs: float = Field(30.0, gt=0)
    body_wait_timeout_secs: float = Field(30.0, gt=0)
    settle_timeout_secs: float = Field(
        3.0,
        ge=0,
        description="Upper bound on waiting for the rendered DOM to stop changing.",
    )
    settle_poll_interval_secs: float = Field(0.5, gt=0)

    # Diagnostics
    save_debug_screenshot: bool = True
    debug_screenshot_path: str = "team-page-debug.png"

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    log_file: Optional[str] = Field(
        None, description="Optional rotating log file in addition to stderr."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
