"""
Static DOM — a small read-only node API over BeautifulSoup.

Connectors never touch the browser's live element handles. A rendered page is
snapshotted to HTML and wrapped in a Node, so every extraction rule can be
tested against plain fixture documents.
"""

from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from tools.text_extractor import clean_whitespace


class Node:
    """One element of a parsed document."""

    def __init__(self, tag: Tag, base_url: str = ""):
        self._tag = tag
        self.base_url = base_url

    def select(self, selector: str) -> list["Node"]:
        """All descendants matching a CSS selector; an invalid selector matches nothing."""
        try:
            found = self._tag.select(selector)
        except (SelectorSyntaxError, ValueError):
            return []
        return [Node(tag, self.base_url) for tag in found]

    def select_one(self, selector: str) -> Optional["Node"]:
        matches = self.select(selector)
        return matches[0] if matches else None

    @property
    def name(self) -> str:
        return self._tag.name or ""

    def text(self) -> str:
        """Visible text with whitespace collapsed."""
        return clean_whitespace(self._tag.get_text(" "))

    def attr(self, name: str) -> str:
        value = self._tag.get(name, "")
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip()

    def url_attr(self, name: str) -> str:
        """An attribute holding a URL, resolved against the document URL."""
        value = self.attr(name)
        if not value:
            return ""
        return urljoin(self.base_url, value) if self.base_url else value


class Document(Node):
    """Root node of a parsed HTML page."""

    @classmethod
    def from_html(cls, html: str, url: str = "") -> "Document":
        soup = BeautifulSoup(html or "", "html.parser")
        return cls(soup, url)
