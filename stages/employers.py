"""
Employers Stage — seeds the employer registry from ranking lists.
"""

import logging

from connectors.rankings import RankingListConnector
from models.state import PipelineContext
from tools import job_store

logger = logging.getLogger(__name__)


def fetch_employers(context: PipelineContext) -> dict:
    """Scrape the configured ranking lists and upsert every employer found."""
    logger.info("Fetching employers...")
    connector = RankingListConnector(context.sources.rankings, settings=context.settings)

    with context.open_browser(connector.name) as browser:
        found = connector.collect(browser)

    logger.info("Found %d potential employers", len(found))

    saved = 0
    for name, source in found:
        if job_store.upsert_employer(name, source=source, db_path=context.db_path, now=context.now()):
            saved += 1

    logger.info("Employer fetch complete: %d saved", saved)
    return {"found": len(found), "saved": saved}
