"""
Frontend Extraction Fallback

Recovers readable text from the rendered page when the server reports that
the stored item holds none (typical for page-builder layouts).

Strategies run in order and the first non-empty result wins:

1. the explicitly configured selector
2. a cascade of known content containers, most theme-specific first
3. the whole body with boilerplate lines removed
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, Union

from bs4 import BeautifulSoup, Comment, Doctype, Tag
from soupsieve import SelectorSyntaxError

from ..content.normalize import NON_SPOKEN_TAGS, collapse_whitespace

logger = logging.getLogger("readtools.playback")


MIN_ELEMENT_LENGTH = 20
MIN_CONTENT_LENGTH = 100

CONTENT_SELECTORS: List[str] = [
    # Avada, numbered text blocks first
    ".fusion-text-5",
    ".fusion-text-4",
    ".fusion-text-3",
    ".fusion-text-2",
    ".fusion-text-1",
    ".fusion-content-tb .fusion-text",
    ".fusion-builder-row .fusion-text",
    ".fusion-layout-column .fusion-text",
    ".fusion-column-wrapper .fusion-text",
    ".fusion-builder-column .fusion-text",
    ".fusion-text",
    ".fusion-builder-column",
    ".fusion-content-container",
    ".fusion-column-wrapper",
    "#main .post-content",
    ".fusion-body .post-content",
    # Elementor
    ".elementor-widget-text-editor",
    ".elementor-text-editor",
    ".elementor-element",
    # Divi and WPBakery
    ".et_pb_text_inner",
    ".et_pb_post_content",
    ".wpb_text_column",
    # Generic themes
    ".entry-content",
    ".post-content",
    ".page-content",
    "#content .content",
    "article .content",
    ".single-post .content",
    "main article",
    # Last resort containers
    "#main",
    "#content",
    "main",
]

BOILERPLATE_PATTERNS = [
    re.compile(r"skip to (?:main )?content", re.IGNORECASE),
    re.compile(r"^.*copyright.*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^.*©.*$", re.MULTILINE),
    re.compile(r"^.*all rights reserved.*$", re.IGNORECASE | re.MULTILINE),
    # Lines made only of navigation labels
    re.compile(
        r"^\s*(?:(?:home|about|contact|menu|search|login|log in|register|sign up)\s*)+$",
        re.IGNORECASE | re.MULTILINE,
    ),
]


Document = Union[str, BeautifulSoup]
ExtractionStrategy = Callable[[BeautifulSoup], str]


def visible_text(element: Tag, separator: str = " ") -> str:
    """Text of `element` without script/style bodies."""
    texts = []
    for node in element.find_all(string=True):
        if isinstance(node, (Comment, Doctype)) or node.find_parent(NON_SPOKEN_TAGS):
            continue
        texts.append(str(node))
    return separator.join(texts)


class FrontendExtractor:
    """
    Ordered selector cascade over a parsed page.
    """

    def __init__(
        self,
        content_selector: Optional[str] = None,
        selectors: Sequence[str] = CONTENT_SELECTORS,
        min_content_length: int = MIN_CONTENT_LENGTH,
        min_element_length: int = MIN_ELEMENT_LENGTH,
    ) -> None:
        self.content_selector = content_selector
        self.selectors = list(selectors)
        self.min_content_length = min_content_length
        self.min_element_length = min_element_length
        self.strategies: List[ExtractionStrategy] = [
            self._configured_selector,
            self._selector_cascade,
            self._body_text,
        ]

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _configured_selector(self, soup: BeautifulSoup) -> str:
        if not self.content_selector:
            return ""
        try:
            element = soup.select_one(self.content_selector)
        except SelectorSyntaxError:
            logger.warning("Ignoring invalid content selector %r", self.content_selector)
            return ""
        if element is None:
            return ""
        return visible_text(element).strip()

    def _selector_cascade(self, soup: BeautifulSoup) -> str:
        for selector in self.selectors:
            parts = []
            for element in soup.select(selector):
                text = collapse_whitespace(visible_text(element))
                if len(text) > self.min_element_length:
                    parts.append(text)

            joined = " ".join(parts)
            if len(joined) > self.min_content_length:
                logger.debug("Extracted page content with selector %r", selector)
                return joined
        return ""

    def _body_text(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        text = visible_text(body, separator="\n")
        for pattern in BOILERPLATE_PATTERNS:
            text = pattern.sub("", text)
        text = collapse_whitespace(text)
        return text if len(text) > self.min_content_length else ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, document: Document) -> str:
        """
        Return whitespace-normalized page text, or "" if nothing usable.

        Parameters
        ----------
        document : str | BeautifulSoup
            Rendered page HTML or an already parsed document.
        """
        soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, "html.parser")

        for strategy in self.strategies:
            text = collapse_whitespace(strategy(soup))
            if text:
                return text

        logger.info("No readable content found on the page")
        return ""
