"""
Dedup Stage — identity keys and idempotent persistence of raw postings.

Every source uses the same identity strategy: the normalized posting URL
when there is one, otherwise a hash of (employer, title, location).
"""

import hashlib
import logging
import sqlite3
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from models.job import Employer, JobPosting, RawPosting
from tools import job_store

logger = logging.getLogger(__name__)


# Query parameters that vary between sightings of the same posting
TRACKING_PARAMS = {"trk", "trackingid", "refid", "position", "pagenum", "ref", "src"}


def normalize_url(url: str) -> str:
    """
    Canonical form of a posting URL.

    Lower-cases scheme and host, drops the fragment and tracking parameters,
    sorts the remaining parameters and strips a trailing slash.
    """
    url = (url or "").strip()
    if not url:
        return ""

    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key.lower() not in TRACKING_PARAMS and not key.lower().startswith("utm_")
    ]
    path = parts.path.rstrip("/") or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, urlencode(sorted(query)), ""))


def identity_key(posting: RawPosting) -> str:
    """Stable id for a posting: URL-based when possible, content-based otherwise."""
    url = normalize_url(posting.url)
    basis = f"url:{url}" if url else f"hash:{posting.dedup_key()}"
    return hashlib.md5(basis.encode("utf-8")).hexdigest()


def to_job(posting: RawPosting, source: str, employer: Optional[Employer] = None) -> JobPosting:
    """Map a raw posting onto a jobs-table row (timestamps are set by the store)."""
    return JobPosting(
        id=identity_key(posting),
        employer_id=employer.id if employer else None,
        employer_name=employer.name if employer else posting.company,
        title=posting.title,
        location=posting.location,
        job_url=posting.url or None,
        source_careers_url=employer.careers_url if employer else None,
        employment_type=posting.employment_type or None,
        posted_at=posting.posted_at,
        closing_date=posting.closing_date,
        raw_text_snippet=posting.raw_text_snippet or None,
        description=posting.description,
        source=source,
    )


def save_postings(
    postings: list[RawPosting],
    source: str,
    db_path: str = None,
    now: Optional[str] = None,
    employer: Optional[Employer] = None,
) -> dict:
    """
    Upsert a batch of postings one by one.

    A posting that fails to convert or to write is counted as skipped and
    logged; it never aborts the batch.

    Returns:
        dict with 'inserted', 'updated' and 'skipped' counts.
    """
    counts = {"inserted": 0, "updated": 0, "skipped": 0}

    for posting in postings:
        try:
            status = job_store.upsert_job(to_job(posting, source, employer), db_path=db_path, now=now)
        except (sqlite3.Error, ValueError) as e:
            logger.warning("Skipped %r from %s: %s", posting.title, source, e)
            counts["skipped"] += 1
            continue
        counts[status] += 1

    logger.info(
        "Saved %s postings: %d new, %d seen again, %d skipped",
        source, counts["inserted"], counts["updated"], counts["skipped"],
    )
    return counts
