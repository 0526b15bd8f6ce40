"""
Source configuration models — validated view of config/sources.yaml.

Every heuristic table and pacing constant the connectors use is carried by
these models and passed into each connector or discovery call.
"""

from typing import Optional
from pydantic import BaseModel, Field


class ScrapeQuery(BaseModel):
    """Search input for one connector run."""

    keywords: str = Field(default="software engineer", description="Search keywords")
    location: str = Field(default="United Kingdom", description="Search location")
    max_results: int = Field(default=25, ge=1, description="Upper bound on postings per run")


class PacingPolicy(BaseModel):
    """Fixed-delay pacing applied by a browser session."""

    detail_delay: float = Field(default=2.0, ge=0, description="Minimum seconds between navigations")
    scroll_cycles: int = Field(default=3, ge=0, description="Scroll-and-wait cycles on a listing page")
    scroll_pause: float = Field(default=1.0, ge=0, description="Seconds to wait after each scroll")
    scroll_pixels: int = Field(default=1000, ge=0, description="Pixels scrolled per cycle")


class HarvestRules(BaseModel):
    """Anchor filter for employer career pages."""

    keywords: list[str] = Field(
        default_factory=lambda: [
            "graduate", "grad scheme", "early career", "analyst", "intern", "placement",
        ]
    )
    min_text_length: int = 6
    max_text_length: int = 99
    location_sentinel: str = "Unknown"

    def accepts(self, text: str) -> bool:
        if not self.min_text_length <= len(text) <= self.max_text_length:
            return False
        lower = text.lower()
        return any(keyword in lower for keyword in self.keywords)


class UrlHeuristic(BaseModel):
    match: str
    url: str


class DiscoveryRules(BaseModel):
    heuristics: list[UrlHeuristic] = Field(
        default_factory=lambda: [
            UrlHeuristic(match="google", url="https://careers.google.com/"),
            UrlHeuristic(match="amazon", url="https://www.amazon.jobs/"),
            UrlHeuristic(match="deloitte", url="https://www2.deloitte.com/uk/en/careers/careers.html"),
            UrlHeuristic(match="pwc", url="https://www.pwc.co.uk/careers.html"),
        ]
    )

    def lookup(self, name: str) -> Optional[str]:
        """First table entry whose substring occurs in the lower-cased name."""
        lower = name.lower()
        for heuristic in self.heuristics:
            if heuristic.match.lower() in lower:
                return heuristic.url
        return None


class RankingSource(BaseModel):
    name: str
    url: str


class RankingRules(BaseModel):
    min_yield: int = 10
    sources: list[RankingSource] = Field(
        default_factory=lambda: [
            RankingSource(name="uk300", url="https://targetjobs.co.uk/careers-advice/uk300"),
            RankingSource(name="cibyl", url="https://cibyl.com/rankings/uk-300"),
        ]
    )


class SourcesConfig(BaseModel):
    """Top-level contents of sources.yaml."""

    query: ScrapeQuery = Field(default_factory=ScrapeQuery)
    connectors: list[str] = Field(default_factory=lambda: ["linkedin", "glassdoor", "reed"])
    pacing: PacingPolicy = Field(default_factory=PacingPolicy)
    connector_pacing: dict[str, dict] = Field(default_factory=dict)
    harvest: HarvestRules = Field(default_factory=HarvestRules)
    discovery: DiscoveryRules = Field(default_factory=DiscoveryRules)
    rankings: RankingRules = Field(default_factory=RankingRules)

    def pacing_for(self, connector: str) -> PacingPolicy:
        """Default pacing with any per-connector overrides applied."""
        overrides = self.connector_pacing.get(connector, {})
        return PacingPolicy(**{**self.pacing.model_dump(), **overrides})
