"""
Ranking-list connector — employer names from published graduate-employer rankings.
"""

import logging
import re
from typing import Optional

from config.settings import Settings, settings as default_settings
from models.config import RankingRules, RankingSource
from tools.browser import Browser, NavigationError
from tools.dom import Node

logger = logging.getLogger(__name__)


RANK_PREFIX = re.compile(r"^\d+(?:\.\s*|\s+)")


def clean_employer_name(name: str) -> str:
    """Strip a leading rank number such as "1. " or "12 "."""
    return RANK_PREFIX.sub("", name).strip()


def extract_employer_names(document: Node, list_title: str = "The UK 300") -> list[str]:
    """
    Employer names on a ranking page, in page order, without duplicates.

    Table rows give the name in their second cell (rank, name, ...); short
    rows mentioning "Rank" or "Employer" are headers. Headings are also taken
    as names, except the list's own title.
    """
    candidates = []

    for row in document.select("tr, .ranking-row, li"):
        text = row.text()
        if not (2 < len(text) < 50) or "Rank" in text or "Employer" in text:
            continue
        cells = row.select("td")
        if len(cells) >= 2:
            candidates.append(cells[1].text())

    for heading in document.select("h3, h4"):
        text = heading.text()
        if text and list_title not in text:
            candidates.append(text)

    names = []
    seen = set()
    for candidate in candidates:
        name = clean_employer_name(candidate)
        if len(name) > 1 and name.lower() not in seen:
            seen.add(name.lower())
            names.append(name)
    return names


class RankingListConnector:
    name = "rankings"

    def __init__(self, rules: Optional[RankingRules] = None, settings: Optional[Settings] = None):
        self.rules = rules or RankingRules()
        self.settings = settings or default_settings

    def fetch_source(self, browser: Browser, source: RankingSource) -> list[str]:
        logger.info("[%s] Navigating to %s", self.name, source.url)
        try:
            browser.navigate(source.url, timeout=max(self.settings.navigation_timeout, 60))
        except NavigationError as e:
            logger.error("[%s] Error scraping %s: %s", self.name, source.name, e)
            return []
        return extract_employer_names(browser.document())

    def collect(self, browser: Browser) -> list[tuple[str, str]]:
        """
        (name, source name) pairs, trying sources in order until the
        combined yield reaches the configured minimum.
        """
        found: list[tuple[str, str]] = []
        seen = set()

        for source in self.rules.sources:
            for name in self.fetch_source(browser, source):
                if name.lower() not in seen:
                    seen.add(name.lower())
                    found.append((name, source.name))

            if len(found) >= self.rules.min_yield:
                break
            logger.info("[%s] %s yield low (%d), trying next source", self.name, source.name, len(found))

        return found
