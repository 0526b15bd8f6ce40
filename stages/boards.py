"""
Boards Stage — runs the configured board and API connectors one after another.

A connector that raises is logged and skipped; postings already stored by
earlier connectors stay, and later connectors still run.
"""

import logging

from connectors import build_connectors
from models.state import PipelineContext
from stages.dedup import save_postings

logger = logging.getLogger(__name__)


def scrape_boards(context: PipelineContext) -> dict:
    """Scrape each connector for the context query and persist its postings."""
    connectors = context.connectors
    if connectors is None:
        connectors = build_connectors(context.sources.connectors, context)

    results = {}
    failed = []

    for connector in connectors:
        try:
            postings = connector.scrape(context.query)
        except Exception as e:
            logger.exception("Connector %s failed", connector.name)
            failed.append(f"{connector.name}: {e}")
            continue

        results[connector.name] = save_postings(
            postings,
            connector.source,
            db_path=context.db_path,
            now=context.now(),
        )

    return {"connectors": results, "failed": failed}
