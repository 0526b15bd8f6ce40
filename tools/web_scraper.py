"""
Web Scraper Tool — fetches raw HTML from URLs.
Uses httpx with browser-like headers, timeouts, and optional bounded retries.
"""

import logging
import time

import httpx
from config.settings import settings

logger = logging.getLogger(__name__)


# Common browser-like headers to avoid being blocked
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-GB,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}


def _failure(url: str, error: str, status_code: int = 0) -> dict:
    return {
        "success": False,
        "html": "",
        "status_code": status_code,
        "error": error,
        "url": url,
    }


def fetch_page(url: str, timeout: float = None, max_retries: int = None) -> dict:
    """
    Fetch a web page and return its HTML content.

    Args:
        url: The URL to fetch.
        timeout: Request timeout in seconds (defaults to settings.request_timeout).
        max_retries: Total attempts (defaults to settings.max_retries; 1 means no retry).

    Returns:
        dict with keys:
            - success (bool): Whether the fetch was successful.
            - html (str): The raw HTML content (empty string on failure).
            - status_code (int): HTTP status code (0 on connection error).
            - error (str): Error message if failed (empty string on success).
            - url (str): The final URL after redirects.
    """
    timeout = timeout or settings.request_timeout
    max_retries = max(1, max_retries or settings.max_retries)
    result = _failure(url, f"No attempt made for {url}")

    for attempt in range(max_retries):
        if attempt:
            time.sleep(2 ** (attempt - 1))  # Exponential backoff
            logger.debug("Retrying %s (attempt %d/%d)", url, attempt + 1, max_retries)

        try:
            with httpx.Client(
                headers=DEFAULT_HEADERS,
                timeout=timeout,
                follow_redirects=True,
            ) as client:
                response = client.get(url)
        except httpx.TimeoutException:
            result = _failure(url, f"Timeout after {timeout}s for {url}")
            continue
        except httpx.HTTPError as e:
            result = _failure(url, f"HTTP error for {url}: {e}")
            continue

        if response.status_code == 200:
            return {
                "success": True,
                "html": response.text,
                "status_code": response.status_code,
                "error": "",
                "url": str(response.url),
            }

        result = _failure(url, f"HTTP {response.status_code} for {url}", response.status_code)
        # Client errors other than rate limiting will not improve on retry
        if response.status_code < 500 and response.status_code != 429:
            break

    return result
