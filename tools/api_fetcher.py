"""
API Fetcher Tool — fetches job data from job-search APIs.
Handles JSON API responses that return structured job data directly.
"""

import logging
from typing import Optional

import httpx
from config.settings import settings
from models.job import RawPosting
from tools.text_extractor import clean_whitespace, parse_day_month_year

logger = logging.getLogger(__name__)


REED_SEARCH_URL = "https://www.reed.co.uk/api/1.0/search"


def fetch_json(
    api_url: str,
    params: dict = None,
    auth: Optional[tuple] = None,
    timeout: float = None,
) -> dict:
    """
    Fetch a JSON API endpoint with a single GET request.

    Args:
        api_url: The API endpoint URL.
        params: Query parameters for the API call.
        auth: Optional (username, password) pair for HTTP basic auth.
        timeout: Request timeout in seconds.

    Returns:
        dict with keys:
            - success (bool)
            - data (dict | list): Parsed JSON response
            - status_code (int): HTTP status code (0 on connection error)
            - error (str): Error message if failed
    """
    timeout = timeout or settings.request_timeout

    try:
        with httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={
                "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) Chrome/120.0.0.0",
                "Accept": "application/json",
            },
        ) as client:
            resp = client.get(api_url, params=params or {}, auth=auth)

            if resp.status_code == 200:
                return {
                    "success": True,
                    "data": resp.json(),
                    "status_code": resp.status_code,
                    "error": "",
                }
            return {
                "success": False,
                "data": {},
                "status_code": resp.status_code,
                "error": f"API returned HTTP {resp.status_code}",
            }

    except (httpx.HTTPError, ValueError) as e:
        return {
            "success": False,
            "data": {},
            "status_code": 0,
            "error": str(e),
        }


def parse_reed_jobs_api(api_response: dict) -> list[RawPosting]:
    """
    Parse a Reed search API response into raw postings.

    Args:
        api_response: Raw JSON response from /api/1.0/search.

    Returns:
        List of RawPosting in response order.
    """
    postings = []

    for raw_job in api_response.get("results") or []:
        postings.append(
            RawPosting(
                title=clean_whitespace(raw_job.get("jobTitle") or ""),
                company=clean_whitespace(raw_job.get("employerName") or ""),
                location=clean_whitespace(raw_job.get("locationName") or ""),
                description=clean_whitespace(raw_job.get("jobDescription") or ""),
                url=raw_job.get("jobUrl") or "",
                posted_at=parse_day_month_year(raw_job.get("date") or ""),
                closing_date=parse_day_month_year(raw_job.get("expirationDate") or ""),
            )
        )

    return postings
