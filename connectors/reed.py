"""
Reed connector — the Reed.co.uk job-search API (no browser needed).
"""

import logging
from typing import Callable, Optional

from connectors.base import Connector
from config.settings import Settings, settings as default_settings
from models.config import ScrapeQuery
from models.job import RawPosting
from tools.api_fetcher import REED_SEARCH_URL, fetch_json, parse_reed_jobs_api

logger = logging.getLogger(__name__)


class ReedConnector(Connector):
    name = "reed"
    source = "Reed.co.uk"

    # The API returns at most 100 results per request
    PAGE_SIZE = 100
    MAX_PAGES = 5

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        fetch: Callable[..., dict] = fetch_json,
    ):
        self.settings = settings or default_settings
        self.api_key = self.settings.reed_api_key if api_key is None else api_key
        self.fetch = fetch

    @classmethod
    def from_context(cls, context) -> "ReedConnector":
        return cls(settings=context.settings)

    def scrape(self, query: ScrapeQuery) -> list[RawPosting]:
        if not self.api_key:
            logger.error("[%s] REED_API_KEY is missing; set it in .env", self.name)
            return []

        logger.info("[%s] Searching for %r in %r", self.name, query.keywords, query.location)
        postings: list[RawPosting] = []

        for page in range(self.MAX_PAGES):
            take = min(self.PAGE_SIZE, query.max_results - len(postings))
            if take <= 0:
                break

            result = self.fetch(
                REED_SEARCH_URL,
                params={
                    "keywords": query.keywords,
                    "locationName": query.location,
                    "resultsToTake": take,
                    "resultsToSkip": len(postings),
                },
                auth=(self.api_key, ""),
                timeout=self.settings.request_timeout,
            )
            if not result["success"]:
                logger.error("[%s] API error on page %d: %s", self.name, page + 1, result["error"])
                break

            page_postings = parse_reed_jobs_api(result["data"])
            postings.extend(page_postings)
            logger.debug("[%s] Page %d: %d jobs (total so far: %d)", self.name, page + 1, len(page_postings), len(postings))

            if len(page_postings) < take:
                break

        logger.info("[%s] Extracted %d job listings", self.name, len(postings))
        return postings[: query.max_results]
