"""
Configuration settings for the Graduate Harvester.
Loads values from .env file and provides typed access.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Determine project root
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
env_path = os.path.join(project_root, ".env")
load_dotenv(env_path)


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Storage
    db_path: str = field(
        default_factory=lambda: os.getenv(
            "DB_PATH", os.path.join(project_root, "data", "harvester.db")
        )
    )
    export_dir: str = field(
        default_factory=lambda: os.getenv("EXPORT_DIR", "export")
    )
    sources_config: str = field(
        default_factory=lambda: os.getenv(
            "SOURCES_CONFIG", os.path.join(project_root, "config", "sources.yaml")
        )
    )

    # HTTP fetching
    request_timeout: int = field(
        default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "30"))
    )
    max_retries: int = field(
        default_factory=lambda: int(os.getenv("MAX_RETRIES", "1"))
    )

    # Browser automation (seconds)
    browser_engine: str = field(
        default_factory=lambda: os.getenv("BROWSER_ENGINE", "playwright")
    )
    headless: bool = field(
        default_factory=lambda: os.getenv("HEADLESS", "true").lower() == "true"
    )
    navigation_timeout: float = field(
        default_factory=lambda: float(os.getenv("NAVIGATION_TIMEOUT", "30"))
    )
    detail_timeout: float = field(
        default_factory=lambda: float(os.getenv("DETAIL_TIMEOUT", "20"))
    )
    wait_timeout: float = field(
        default_factory=lambda: float(os.getenv("WAIT_TIMEOUT", "10"))
    )

    # Job-search API
    reed_api_key: str = field(
        default_factory=lambda: os.getenv("REED_API_KEY", "")
    )

    # Query overrides (empty means "use sources.yaml")
    scrape_keywords: str = field(
        default_factory=lambda: os.getenv("SCRAPE_KEYWORDS", "")
    )
    scrape_location: str = field(
        default_factory=lambda: os.getenv("SCRAPE_LOCATION", "")
    )
    scrape_max_jobs: Optional[int] = field(
        default_factory=lambda: _optional_int("SCRAPE_MAX_JOBS")
    )

    # Scheduler
    schedule_minutes: int = field(
        default_factory=lambda: int(os.getenv("SCHEDULE_MINUTES", "360"))
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )


# Singleton instance
settings = Settings()
