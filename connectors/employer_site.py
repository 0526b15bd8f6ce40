"""
Employer-site harvester — early-career postings straight from a careers page.

Every anchor on the page whose text passes the harvest rules becomes a
posting. This is deliberately high-recall: no location or description is
extracted beyond the anchor text itself.
"""

import logging
from typing import Optional

from config.settings import Settings, settings as default_settings
from models.config import HarvestRules
from models.job import Employer, RawPosting
from tools.browser import Browser, NavigationError
from tools.text_extractor import extract_job_links

logger = logging.getLogger(__name__)


class EmployerSiteHarvester:
    name = "employer_site"
    source = "EmployerSite"
    employment_type = "Graduate"

    def __init__(self, rules: Optional[HarvestRules] = None, settings: Optional[Settings] = None):
        self.rules = rules or HarvestRules()
        self.settings = settings or default_settings

    def harvest(self, browser: Browser, employer: Employer) -> list[RawPosting]:
        """Candidate postings on the employer's careers page (empty if it won't load)."""
        if not employer.careers_url:
            return []

        logger.info("[%s] Scraping %s at %s", self.name, employer.name, employer.careers_url)
        try:
            browser.navigate(employer.careers_url, timeout=self.settings.navigation_timeout)
        except NavigationError as e:
            logger.error("[%s] Failed to scrape %s: %s", self.name, employer.name, e)
            return []

        browser.wait_for("a[href]", 5)
        links = extract_job_links(browser.document(), self.rules)
        logger.info("[%s] Found %d potential jobs for %s", self.name, len(links), employer.name)

        return [
            RawPosting(
                title=link["text"],
                company=employer.name,
                location=self.rules.location_sentinel,
                url=link["url"],
                description=link["text"],
                raw_text_snippet=link["text"],
                employment_type=self.employment_type,
            )
            for link in links
        ]
