"""
Transcript Extraction Strategies

Each strategy reads one source of an item and returns the text fragments it
found. Strategies are plain functions kept in an ordered list, so a new
source is added by appending a function rather than editing existing ones.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterator, List

from .models import ItemSnapshot
from .normalize import normalize_text

logger = logging.getLogger("readtools.content")


# ---------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------

MIN_BODY_LENGTH = 50
MIN_FIELD_LENGTH = 20
MIN_PROSE_LENGTH = 20

# Fraction of characters that must be letters or spaces for prose.
PROSE_LETTER_RATIO = 0.75


# ---------------------------------------------------------------------
# Field Key Patterns
# ---------------------------------------------------------------------

CONTENT_KEY_HINTS = (
    "content",
    "text",
    "description",
    "body",
    "excerpt",
    "summary",
)

BUILDER_KEY_HINTS = (
    "fusion",       # Avada
    "avada",
    "elementor",
    "_builder",
    "et_pb",        # Divi
    "divi",
    "vc_",          # WPBakery
    "wpb",
    "fl_builder",   # Beaver Builder
    "brizy",
    "oxygen",
    "ct_builder",
)

# Markup, code and config punctuation never appears in prose.
NON_PROSE_RE = re.compile(r"[<>{}\[\]=#|\\@^~`]|://|\.(?:css|js|png|jpe?g|svg)\b", re.IGNORECASE)


Strategy = Callable[[ItemSnapshot], List[str]]


# ---------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------

def is_content_key(key: str) -> bool:
    """Return True if a field name suggests it holds readable content."""
    lowered = key.lower()
    return any(hint in lowered for hint in CONTENT_KEY_HINTS + BUILDER_KEY_HINTS)


def looks_like_prose(text: str) -> bool:
    """
    Heuristic separating human prose from identifiers and configuration.

    Prose is at least MIN_PROSE_LENGTH characters, contains spaces, is mostly
    letters and spaces, and carries no markup/config punctuation or URLs.
    """
    if len(text) < MIN_PROSE_LENGTH or " " not in text:
        return False

    if NON_PROSE_RE.search(text):
        return False

    letters_or_spaces = sum(1 for c in text if c.isalpha() or c.isspace())
    return letters_or_spaces / len(text) >= PROSE_LETTER_RATIO


def decode_structure(raw: str) -> Any:
    """
    Decode a JSON-serialized field value.

    Returns the raw string unchanged when it is not a serialized structure.
    """
    stripped = raw.strip()
    if not stripped or stripped[0] not in "[{\"":
        return raw

    try:
        return json.loads(stripped)
    except ValueError:
        return raw


def harvest_prose(value: Any) -> Iterator[str]:
    """
    Walk a decoded structure depth-first and yield prose-like strings.

    Strings may themselves hold markup (builder "editor" widgets), so each is
    normalized before the prose test.
    """
    if isinstance(value, str):
        text = normalize_text(value)
        if looks_like_prose(text):
            yield text
    elif isinstance(value, dict):
        for child in value.values():
            yield from harvest_prose(child)
    elif isinstance(value, (list, tuple)):
        for child in value:
            yield from harvest_prose(child)


# ---------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------

def primary_body_strategy(item: ItemSnapshot) -> List[str]:
    """The item's own body, when it is more than a stub."""
    text = normalize_text(item.body)
    if len(text) > MIN_BODY_LENGTH:
        return [text]
    return []


def auxiliary_fields_strategy(item: ItemSnapshot) -> List[str]:
    """
    Prose found in content-ish auxiliary fields.

    Serialized values are decoded and scanned recursively; plain values are
    normalized and must pass the prose test as well.
    """
    fragments: List[str] = []

    for key, raw in item.fields:
        if not raw or len(raw) <= MIN_FIELD_LENGTH or not is_content_key(key):
            continue

        decoded = decode_structure(raw)
        found = list(harvest_prose(decoded))
        if found:
            logger.debug(
                "Field %r of item %d contributed %d fragment(s)",
                key,
                item.item_id,
                len(found),
            )
        fragments.extend(found)

    return fragments


DEFAULT_STRATEGIES: List[Strategy] = [
    primary_body_strategy,
    auxiliary_fields_strategy,
]
