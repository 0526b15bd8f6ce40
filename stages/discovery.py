"""
Discovery Stage — resolves careers-page URLs for employers that lack one.

Per employer, the first source that answers wins:
  1. the external lookup hook (PipelineContext.careers_lookup)
  2. the name-substring heuristic table from sources.yaml

Employers that stay unresolved are simply tried again on the next run.
"""

import logging
from typing import Callable, Optional

from models.config import DiscoveryRules
from models.state import PipelineContext, no_lookup
from tools import job_store

logger = logging.getLogger(__name__)


def resolve_careers_url(
    name: str,
    rules: DiscoveryRules,
    lookup: Callable[[str], Optional[str]] = no_lookup,
) -> Optional[str]:
    """Careers URL for an employer name, or None if nothing matches."""
    try:
        url = lookup(name)
    except Exception as e:
        logger.warning("Careers lookup failed for %s: %s", name, e)
        url = None

    return url or rules.lookup(name)


def discover_urls(context: PipelineContext) -> dict:
    """Move every Unknown employer that can be resolved to Resolved."""
    logger.info("Discovering careers URLs...")
    employers = job_store.get_employers_without_careers_url(context.db_path)
    logger.info("Found %d employers without URLs", len(employers))

    resolved = 0
    for employer in employers:
        url = resolve_careers_url(employer.name, context.sources.discovery, context.careers_lookup)
        if not url:
            continue

        logger.info("Found URL for %s: %s", employer.name, url)
        if job_store.upsert_employer(
            employer.name,
            source=employer.source,
            careers_url=url,
            db_path=context.db_path,
            now=context.now(),
        ):
            resolved += 1

    return {"unknown": len(employers), "resolved": resolved}
