"""
Harvest Stage — scrapes every Resolved employer's careers page and stores the postings.
"""

import logging

from connectors.employer_site import EmployerSiteHarvester
from models.state import PipelineContext
from stages.dedup import save_postings
from tools import job_store

logger = logging.getLogger(__name__)


def scrape_jobs(context: PipelineContext) -> dict:
    """Harvest all employers with a careers URL, one at a time in a shared browser."""
    logger.info("Starting job harvest...")
    employers = job_store.get_employers_with_careers_url(context.db_path)
    logger.info("Harvesting from %d employers", len(employers))

    harvester = EmployerSiteHarvester(context.sources.harvest, settings=context.settings)
    totals = {"employers": len(employers), "found": 0, "inserted": 0, "updated": 0, "skipped": 0}
    failed = []

    with context.open_browser(harvester.name) as browser:
        for employer in employers:
            try:
                postings = harvester.harvest(browser, employer)
            except Exception:
                logger.exception("Harvest failed for %s", employer.name)
                failed.append(employer.name)
                continue

            totals["found"] += len(postings)
            counts = save_postings(
                postings,
                harvester.source,
                db_path=context.db_path,
                now=context.now(),
                employer=employer,
            )
            for key, value in counts.items():
                totals[key] += value

    logger.info("Harvest complete")
    totals["failed"] = failed
    return totals
