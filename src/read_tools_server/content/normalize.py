"""
Transcript Normalization

Turns stored markup into speech-friendly plain text: embedded commands
(shortcodes) and HTML are stripped, entities decoded and whitespace
collapsed.
"""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup


# [name attr="x"], [/name], [name /]. Enclosed text is kept.
SHORTCODE_RE = re.compile(r"\[\[?/?[a-zA-Z][\w-]*(?:\s[^\[\]]*?)?/?\]\]?")
WHITESPACE_RE = re.compile(r"\s+")

NON_SPOKEN_TAGS = ["script", "style", "noscript", "template"]


def strip_shortcodes(text: str) -> str:
    return SHORTCODE_RE.sub(" ", text)


def strip_tags(text: str) -> str:
    """
    Remove HTML markup, dropping the bodies of non-spoken elements.
    """
    if "<" not in text:
        return text

    soup = BeautifulSoup(text, "html.parser")
    for tag in soup(NON_SPOKEN_TAGS):
        tag.decompose()
    return soup.get_text(" ")


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: str | None) -> str:
    """
    Normalize raw stored content into a transcript.

    Rules:
    1. None → empty string
    2. Strip shortcode syntax, keeping enclosed text
    3. Strip markup
    4. Decode remaining entities (double-encoded values survive step 3)
    5. Collapse whitespace runs to single spaces and trim
    """
    if not text:
        return ""

    text = strip_shortcodes(text)
    text = strip_tags(text)
    text = html.unescape(text)
    return collapse_whitespace(text)
