"""
Field extractors — ordered fallback lists of lookup strategies.

Each field of a posting is described by a FieldExtractor: a tuple of
strategies tried in order. The first strategy that yields a non-empty value
wins; when none does, the field is the empty string. Sites rename classes
often, but rarely all of a field's candidates at once.
"""

from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urljoin

from tools.dom import Node
from tools.text_extractor import clean_whitespace


def _identity(value: str) -> str:
    return value


@dataclass(frozen=True)
class Strategy:
    """
    Read one value from the first element matching `selector`.

    Reads the element's text, or the attribute `attr` when given. URL-valued
    attributes are resolved against the document URL when `resolve` is set.
    Values shorter than `min_length` count as a miss.
    """

    selector: str
    attr: Optional[str] = None
    resolve: bool = False
    min_length: int = 1
    transform: Callable[[str], str] = _identity

    def apply(self, node: Node) -> str:
        element = node.select_one(self.selector)
        if element is None:
            return ""

        value = element.text() if self.attr is None else element.attr(self.attr)
        value = self.transform(value).strip()
        if self.resolve and value and element.base_url:
            value = urljoin(element.base_url, value)

        return value if len(value) >= self.min_length else ""


@dataclass(frozen=True)
class LongestText:
    """Longest text block among `selector` matches within a length window."""

    selector: str = "div, section, article"
    min_length: int = 201
    max_length: int = 9999

    def apply(self, node: Node) -> str:
        longest = ""
        for element in node.select(self.selector):
            text = element.text()
            if len(text) > len(longest) and self.min_length <= len(text) <= self.max_length:
                longest = text
        return longest


@dataclass(frozen=True)
class FieldExtractor:
    """An ordered list of strategies plus a normalization step."""

    strategies: tuple = ()
    normalize: Callable[[str], str] = clean_whitespace

    def extract(self, node: Node) -> str:
        for strategy in self.strategies:
            value = self.normalize(strategy.apply(node))
            if value:
                return value
        return ""


def text_of(*selectors: str, min_length: int = 1) -> FieldExtractor:
    """Extractor reading element text from each selector in order."""
    return FieldExtractor(tuple(Strategy(s, min_length=min_length) for s in selectors))


def url_of(*selectors: str, attr: str = "href") -> FieldExtractor:
    """Extractor reading an absolute URL attribute from each selector in order."""
    return FieldExtractor(tuple(Strategy(s, attr=attr, resolve=True) for s in selectors))


def first_srcset_entry(srcset: str) -> str:
    """URL part of the first candidate in a srcset attribute."""
    first = srcset.split(",")[0].strip()
    return first.split(" ")[0] if first else ""


@dataclass(frozen=True)
class ContainerList:
    """Ordered selectors for repeating posting containers (cards)."""

    selectors: tuple = ()

    def find(self, node: Node) -> list[Node]:
        """Elements matched by the first selector that matches anything."""
        for selector in self.selectors:
            found = node.select(selector)
            if found:
                return found
        return []
