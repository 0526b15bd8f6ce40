"""
Browser Tool — the narrow page-automation interface used by every connector.

Connectors only ever navigate, wait for a selector, scroll, pause and take a
static snapshot of the current page (tools.dom.Document). Two engines
implement it:

  - PlaywrightBrowser renders pages in headless Chromium (JS-heavy boards).
  - HttpBrowser fetches pages with httpx (plain career pages, no JS).

Pacing is part of the navigation primitive: `navigate` waits until the
policy's minimum interval since the previous navigation has elapsed.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from config.settings import Settings, settings as default_settings
from models.config import PacingPolicy
from tools.dom import Document
from tools.web_scraper import DEFAULT_HEADERS, fetch_page

logger = logging.getLogger(__name__)


class BrowserError(Exception):
    """Base class for browser failures."""


class NavigationError(BrowserError):
    """A page could not be loaded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Navigation to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class Pacer:
    """Fixed minimum interval between successive navigations."""

    def __init__(
        self,
        policy: PacingPolicy,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy
        self._sleep = sleep
        self._clock = clock
        self._last: Optional[float] = None

    def before_navigation(self) -> None:
        if self._last is not None:
            remaining = self.policy.detail_delay - (self._clock() - self._last)
            if remaining > 0:
                self._sleep(remaining)
        self._last = self._clock()

    def pause(self, seconds: float) -> None:
        if seconds > 0:
            self._sleep(seconds)


class Browser(ABC):
    """One page session. Use as a context manager."""

    def __init__(
        self,
        pacing: Optional[PacingPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        settings: Optional[Settings] = None,
    ):
        self.pacing = pacing or PacingPolicy()
        self.pacer = Pacer(self.pacing, sleep=sleep)
        self.settings = settings or default_settings

    def navigate(self, url: str, timeout: Optional[float] = None) -> None:
        """Load `url`, honouring the pacing policy. Raises NavigationError."""
        if timeout is None:
            timeout = self.settings.navigation_timeout
        self.pacer.before_navigation()
        self._navigate(url, timeout)

    @abstractmethod
    def _navigate(self, url: str, timeout: float) -> None:
        ...

    @abstractmethod
    def wait_for(self, selector: str, timeout: Optional[float] = None) -> bool:
        """Wait for `selector` to appear; False when the wait times out."""

    @abstractmethod
    def scroll(self, pixels: int) -> None:
        ...

    @abstractmethod
    def document(self) -> Document:
        """Static snapshot of the current page."""

    def pause(self, seconds: float) -> None:
        self.pacer.pause(seconds)

    def load_more(self) -> None:
        """Scroll-and-wait cycles to pull lazy-loaded cards into the page."""
        for _ in range(self.pacing.scroll_cycles):
            self.scroll(self.pacing.scroll_pixels)
            self.pause(self.pacing.scroll_pause)

    def close(self) -> None:
        pass

    def __enter__(self) -> "Browser":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PlaywrightBrowser(Browser):
    """Headless Chromium via Playwright's sync API."""

    LAUNCH_ARGS = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ]

    def __init__(self, pacing: Optional[PacingPolicy] = None, headless: Optional[bool] = None, **kwargs):
        super().__init__(pacing, **kwargs)
        self.headless = self.settings.headless if headless is None else headless
        self._playwright = None
        self._browser = None
        self._page = None

    def __enter__(self) -> "PlaywrightBrowser":
        from playwright.sync_api import sync_playwright

        self._playwright = sync_playwright().start()
        # __exit__ does not run when __enter__ raises
        try:
            self._browser = self._playwright.chromium.launch(headless=self.headless, args=self.LAUNCH_ARGS)
            context = self._browser.new_context(
                user_agent=DEFAULT_HEADERS["User-Agent"],
                viewport={"width": 1920, "height": 1080},
            )
            self._page = context.new_page()
        except BaseException:
            self.close()
            raise
        return self

    def _navigate(self, url: str, timeout: float) -> None:
        from playwright.sync_api import Error as PlaywrightError

        try:
            self._page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
        except PlaywrightError as e:
            raise NavigationError(url, str(e)) from e

    def wait_for(self, selector: str, timeout: Optional[float] = None) -> bool:
        from playwright.sync_api import Error as PlaywrightError

        if timeout is None:
            timeout = self.settings.wait_timeout
        try:
            self._page.wait_for_selector(selector, timeout=timeout * 1000)
            return True
        except PlaywrightError:
            logger.debug("Selector %s not found within %ss", selector, timeout)
            return False

    def scroll(self, pixels: int) -> None:
        self._page.evaluate("(dy) => window.scrollBy(0, dy)", pixels)

    def document(self) -> Document:
        return Document.from_html(self._page.content(), self._page.url)

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None


class HttpBrowser(Browser):
    """Plain HTTP fetch; no script execution, so scrolling does nothing."""

    def __init__(self, pacing: Optional[PacingPolicy] = None, **kwargs):
        super().__init__(pacing, **kwargs)
        self._document = Document.from_html("")

    def _navigate(self, url: str, timeout: float) -> None:
        result = fetch_page(url, timeout=timeout)
        if not result["success"]:
            raise NavigationError(url, result["error"])
        self._document = Document.from_html(result["html"], result["url"])

    def wait_for(self, selector: str, timeout: Optional[float] = None) -> bool:
        return self._document.select_one(selector) is not None

    def scroll(self, pixels: int) -> None:
        pass

    def load_more(self) -> None:
        pass

    def document(self) -> Document:
        return self._document


ENGINES = {
    "playwright": PlaywrightBrowser,
    "http": HttpBrowser,
}

# Called as factory(pacing, settings=...)
BrowserFactory = Callable[..., Browser]


def browser_factory(engine: Optional[str] = None) -> BrowserFactory:
    """Factory building a fresh browser session of the configured engine."""
    engine = engine or default_settings.browser_engine
    try:
        return ENGINES[engine]
    except KeyError:
        raise ValueError(f"Unknown browser engine '{engine}'. Choose from: {', '.join(ENGINES)}")
