"""
Text Extractor Tool — whitespace cleanup, job-link candidates and listing dates.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional
from urllib.parse import urljoin, urlparse

if TYPE_CHECKING:
    from models.config import HarvestRules
    from tools.dom import Node


def clean_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) into single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def extract_job_links(document: "Node", rules: "HarvestRules") -> list[dict]:
    """
    Find anchors on a career page that look like early-career postings.

    An anchor is kept when its visible text passes the harvest rules (length
    window plus keyword match) and its href resolves to an http(s) URL.
    Anchors are returned in document order; repeated URLs are collapsed.

    Args:
        document: Parsed career page.
        rules: Keyword set and text-length bounds.

    Returns:
        List of dicts with 'text' and 'url' keys.
    """
    job_links = []
    seen_urls = set()

    for link in document.select("a[href]"):
        text = link.text()
        if not rules.accepts(text):
            continue

        full_url = urljoin(document.base_url, link.attr("href"))
        if urlparse(full_url).scheme not in ("http", "https") or full_url in seen_urls:
            continue

        seen_urls.add(full_url)
        job_links.append({"text": text, "url": full_url})

    return job_links


_UNIT_DAYS = {"d": 1, "day": 1, "w": 7, "week": 7}


def parse_relative_date(text: str, now: Optional[datetime] = None) -> Optional[str]:
    """
    Convert a listing age such as "3 days ago", "2d", "1 week ago" or "New"
    into an ISO timestamp. Returns None when the text is empty or unreadable.
    """
    if not text:
        return None

    now = now or datetime.now(timezone.utc)
    lower = text.lower().strip()

    if lower in ("new", "just now", "today") or lower.startswith("just posted"):
        return now.isoformat()
    if lower == "yesterday":
        return (now - timedelta(days=1)).isoformat()

    match = re.match(r"^(\d+)\s*(d|w|days?|weeks?)\b", lower)
    if match:
        count = int(match.group(1))
        unit = match.group(2).rstrip("s")
        return (now - timedelta(days=count * _UNIT_DAYS[unit])).isoformat()

    match = re.match(r"^(\d+)\s*months?\b", lower)
    if match:
        return (now - timedelta(days=30 * int(match.group(1)))).isoformat()

    match = re.match(r"^(\d+)\s*(h|hours?)\b", lower)
    if match:
        return (now - timedelta(hours=int(match.group(1)))).isoformat()

    match = re.match(r"^(\d+)\s*(m|min|mins|minutes?)\b", lower)
    if match:
        return (now - timedelta(minutes=int(match.group(1)))).isoformat()

    return None


def parse_day_month_year(text: str) -> Optional[str]:
    """Parse a dd/mm/yyyy date into ISO format, or None."""
    if not text:
        return None
    try:
        return datetime.strptime(text.strip(), "%d/%m/%Y").date().isoformat()
    except ValueError:
        return None
