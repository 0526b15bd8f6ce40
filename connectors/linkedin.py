"""
LinkedIn connector — public job search pages, no login.
"""

from urllib.parse import urlencode

from connectors.base import BoardConnector
from models.config import ScrapeQuery
from tools.extractors import ContainerList, FieldExtractor, Strategy, text_of, url_of


class LinkedInConnector(BoardConnector):
    name = "linkedin"
    source = "LinkedIn Scraper"

    SEARCH_URL = "https://www.linkedin.com/jobs/search/"

    listing_wait = ".jobs-search__results-list"

    containers = ContainerList((
        ".job-search-card",
        ".base-card",
        "ul.jobs-search__results-list > li",
    ))

    fields = {
        "title": text_of(".base-search-card__title", "h3"),
        "company": text_of(".base-search-card__subtitle", "h4"),
        "location": text_of(".job-search-card__location", ".job-card-container__metadata-item"),
        "url": url_of("a.base-card__full-link", "a"),
        "posted_at": FieldExtractor((Strategy("time", attr="datetime"),)),
    }

    description = text_of(
        ".description__text .show-more-less-html__markup",
        ".show-more-less-html__markup",
        ".description__text",
        '[class*="description"]',
    )
    detail_wait = ".description__text, .show-more-less-html__markup"

    def search_url(self, query: ScrapeQuery) -> str:
        params = urlencode({"keywords": query.keywords, "location": query.location})
        return f"{self.SEARCH_URL}?{params}"

    def postprocess(self, values: dict) -> dict:
        values["posted_at"] = values.get("posted_at") or None
        return values
