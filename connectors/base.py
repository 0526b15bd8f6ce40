"""
Connector base classes.

A connector turns one external source into a list of RawPosting for a given
query. BoardConnector implements the browser-driven listing pipeline shared
by the job boards:

    navigate to search URL → wait for listing → scroll cycles → extract cards
    → (optionally) visit each posting for its description

Subclasses only declare their search URL and selector fallback lists.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from config.settings import Settings, settings as default_settings
from models.config import PacingPolicy, ScrapeQuery
from models.job import RawPosting
from tools.browser import Browser, BrowserFactory, NavigationError
from tools.dom import Node
from tools.extractors import ContainerList, FieldExtractor

logger = logging.getLogger(__name__)


class Connector(ABC):
    """Extracts raw postings from exactly one source type."""

    name: str = ""
    source: str = ""

    @abstractmethod
    def scrape(self, query: ScrapeQuery) -> list[RawPosting]:
        """Run once for `query`. Failures degrade to fewer (or no) postings."""


class BoardConnector(Connector):
    """Job board scraped through a browser session."""

    # Selector waited for after the listing page loads
    listing_wait: str = ""

    containers: ContainerList = ContainerList()

    # RawPosting field name -> extractor, applied to each card
    fields: dict = {}

    # Cards missing any of these fields are dropped
    required: tuple = ("title", "url")

    # Extractor for the posting's own page; None skips detail visits
    description: Optional[FieldExtractor] = None
    detail_wait: str = ""
    detail_settle: float = 0.0

    def __init__(
        self,
        browser_factory: BrowserFactory,
        pacing: Optional[PacingPolicy] = None,
        settings: Optional[Settings] = None,
    ):
        self.browser_factory = browser_factory
        self.pacing = pacing or PacingPolicy()
        self.settings = settings or default_settings

    @classmethod
    def from_context(cls, context) -> "BoardConnector":
        return cls(
            context.browser_factory,
            pacing=context.sources.pacing_for(cls.name),
            settings=context.settings,
        )

    @abstractmethod
    def search_url(self, query: ScrapeQuery) -> str:
        ...

    def scrape(self, query: ScrapeQuery) -> list[RawPosting]:
        url = self.search_url(query)
        logger.info("[%s] Searching for %r in %r", self.name, query.keywords, query.location)

        postings: list[RawPosting] = []
        with self.browser_factory(self.pacing, settings=self.settings) as browser:
            try:
                browser.navigate(url, timeout=self.settings.navigation_timeout)
            except NavigationError as e:
                logger.error("[%s] %s", self.name, e)
                return postings

            if self.listing_wait and not browser.wait_for(self.listing_wait, self.settings.wait_timeout):
                logger.info("[%s] Listing selector not found, extracting what is there", self.name)

            browser.load_more()
            cards = self.containers.find(browser.document())
            logger.info("[%s] Found %d job cards", self.name, len(cards))

            for card in cards[: query.max_results]:
                posting = self.extract_card(card)
                if posting is not None:
                    postings.append(posting)

            if self.description is not None:
                for index, posting in enumerate(postings, 1):
                    logger.debug("[%s] [%d/%d] Fetching description for %s", self.name, index, len(postings), posting.title)
                    self.enrich(browser, posting)

        logger.info("[%s] Extracted %d job listings", self.name, len(postings))
        return postings

    def extract_card(self, card: Node) -> Optional[RawPosting]:
        values = {name: extractor.extract(card) for name, extractor in self.fields.items()}
        missing = [name for name in self.required if not values.get(name)]
        if missing:
            logger.debug("[%s] Dropped card without %s", self.name, ", ".join(missing))
            return None
        return RawPosting(**self.postprocess(values))

    def postprocess(self, values: dict) -> dict:
        """Hook for connector-specific field conversion."""
        return values

    def enrich(self, browser: Browser, posting: RawPosting) -> None:
        """Fill in the description from the posting's own page. Never raises."""
        try:
            browser.navigate(posting.url, timeout=self.settings.detail_timeout)
            if self.detail_wait:
                browser.wait_for(self.detail_wait, self.settings.wait_timeout)
            browser.pause(self.detail_settle)
            posting.description = self.description.extract(browser.document())
        except Exception as e:
            logger.warning("[%s] Could not fetch description for %s: %s", self.name, posting.title, e)
            posting.description = ""
