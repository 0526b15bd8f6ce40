"""
Pipeline state — the LangGraph state that flows between stages, and the
context object every stage receives.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Annotated, Callable, Optional, TypedDict

from config.settings import Settings, settings as default_settings
from models.config import ScrapeQuery, SourcesConfig
from tools.browser import BrowserFactory, browser_factory


def merge_lists(left: list, right: list) -> list:
    """Reducer that merges two lists (used for accumulating results across stages)."""
    return left + right


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def no_lookup(name: str) -> Optional[str]:
    """Default external careers-URL lookup: never finds anything."""
    return None


class PipelineState(TypedDict):
    """
    Shared state for the LangGraph workflow.
    Each stage node appends its summary or its error.
    """

    # Stages to run, in order
    stages: list[str]

    # Per-stage summaries: {"stage": name, ...counts}
    results: Annotated[list[dict], merge_lists]

    # Isolated failures: "stage: message"
    errors: Annotated[list[str], merge_lists]


@dataclass
class PipelineContext:
    """Everything a stage needs, injected so tests can swap in fakes."""

    settings: Settings = field(default_factory=lambda: default_settings)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    query: Optional[ScrapeQuery] = None

    # Browser session factory: PacingPolicy -> Browser
    browser_factory: Optional[BrowserFactory] = None

    # External careers-URL lookup hook: employer name -> URL or None
    careers_lookup: Callable[[str], Optional[str]] = no_lookup

    # Board/API connectors to run instead of the configured ones
    connectors: Optional[list] = None

    clock: Callable[[], datetime] = utc_now

    def __post_init__(self):
        if self.query is None:
            self.query = self.sources.query
        if self.browser_factory is None:
            self.browser_factory = browser_factory(self.settings.browser_engine)

    @property
    def db_path(self) -> str:
        return self.settings.db_path

    def now(self) -> str:
        return self.clock().isoformat()

    def open_browser(self, connector: str = ""):
        """New browser session paced for the given connector."""
        return self.browser_factory(self.sources.pacing_for(connector), settings=self.settings)
