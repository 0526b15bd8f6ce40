"""
Glassdoor connector — public UK job search pages, no login.

Cards carry a relative listing age ("2d", "3 days ago") instead of a date,
and logos are often lazy-loaded, so both get extra handling here.
"""

from urllib.parse import urlencode

from connectors.base import BoardConnector
from models.config import ScrapeQuery
from tools.extractors import (
    ContainerList,
    FieldExtractor,
    LongestText,
    Strategy,
    first_srcset_entry,
    text_of,
    url_of,
)
from tools.text_extractor import parse_relative_date

LOGO_IMAGES = (
    '[data-test="employer-logo"] img',
    ".JobCard_logo__2mS8Z img",
    'img[alt*="Logo"]',
)
LOGO_ATTRS = ("src", "data-src", "data-original", "data-delayed-url", "data-lazy")


def _logo_extractor() -> FieldExtractor:
    strategies = [Strategy(image, attr=attr, resolve=True) for image in LOGO_IMAGES for attr in LOGO_ATTRS]
    strategies += [
        Strategy(image, attr=attr, resolve=True, transform=first_srcset_entry)
        for image in LOGO_IMAGES
        for attr in ("srcset", "data-srcset")
    ]
    return FieldExtractor(tuple(strategies))


DESCRIPTION_SELECTORS = (
    ".JobDetails_jobDescription__6RMtx",
    '[data-test="jobDescriptionContent"]',
    ".jobDescriptionContent",
    ".description",
    ".desc",
    '[class*="jobDescription"]',
    '[class*="JobDescription"]',
    ".css-1glx05o",
    'div[data-brandviews="MODULE:n=jobDetails:oc=joDescription"]',
    "#JobDescriptionContainer",
    'section[data-test="jobDescription"]',
)


class GlassdoorConnector(BoardConnector):
    name = "glassdoor"
    source = "Glassdoor"

    SEARCH_URL = "https://www.glassdoor.co.uk/Job/jobs.htm"

    listing_wait = '[data-test="jobListing"], .JobCard_jobCardContainer__arQlW, .react-job-listing'

    containers = ContainerList((
        '[data-test="jobListing"]',
        ".JobCard_jobCardContainer__arQlW",
        ".react-job-listing",
        "[data-id]",
    ))

    fields = {
        "title": text_of('[data-test="job-link"]', ".JobCard_jobTitle__GLyJ1", 'a[data-test="job-title"]'),
        "company": text_of(
            '[data-test="employer-short-name"]',
            ".EmployerProfile_employerName__mSLUq",
            ".job-search-key-l2wjgv",
        ),
        "location": text_of('[data-test="emp-location"]', ".JobCard_location__Ds1fM", ".location"),
        "url": url_of('a[href*="/job-listing/"]', 'a[data-test="job-link"]'),
        "logo": _logo_extractor(),
        "listing_age": text_of(
            '[data-test="job-age"]',
            ".JobCard_listingAge__KuaxZ",
            ".job-age",
            '[class*="listingAge"]',
        ),
    }

    # Cards without a link are kept; they are stored under a content hash
    required = ("title",)

    description = FieldExtractor(
        tuple(Strategy(selector, min_length=51) for selector in DESCRIPTION_SELECTORS) + (LongestText(),)
    )
    detail_settle = 2.0

    def search_url(self, query: ScrapeQuery) -> str:
        params = urlencode({
            "sc.keyword": query.keywords,
            "locT": "N",
            "locId": "194",
            "locKeyword": query.location,
        })
        return f"{self.SEARCH_URL}?{params}"

    def postprocess(self, values: dict) -> dict:
        values["posted_at"] = parse_relative_date(values.pop("listing_age", ""))
        return values

    def enrich(self, browser, posting) -> None:
        if posting.url:
            super().enrich(browser, posting)
