"""
Reading Time

Word counting, reading-time estimation, locale-aware number formatting and
the markup of the reading-time block with its optional read-aloud trigger.
"""

from __future__ import annotations

import html
import math
import re
from typing import NamedTuple

from .content.normalize import strip_shortcodes, strip_tags

DEFAULT_WPM = 180

# Letters plus in-word apostrophes and hyphens.
WORD_RE = re.compile(r"[^\W\d_]+(?:['’-][^\W\d_]+)*")

# (decimal separator, thousands separator) by language prefix.
NUMBER_SEPARATORS = {
    "es": (".", ","),   # Latin American Spanish convention
    "de": (",", "."),
    "fr": (",", " "),
    "it": (",", "."),
    "pt": (",", "."),
    "nl": (",", "."),
}


class ReadingTime(NamedTuple):
    words: int
    exact_minutes: float
    display_minutes: float


def count_words(content: str) -> int:
    """Count words in stored content after removing markup."""
    text = strip_tags(strip_shortcodes(content or ""))
    return len(WORD_RE.findall(text))


def estimate_reading_time(content: str, wpm: int = DEFAULT_WPM) -> ReadingTime:
    """
    Estimate reading time for `content`.

    The exact value is rounded to two decimals; the display value is rounded
    up to the nearest half minute.
    """
    if wpm < 1:
        wpm = DEFAULT_WPM

    words = count_words(content)
    exact = round(words / wpm, 2) if words > 0 else 0.0
    display = math.ceil(exact * 2) / 2
    return ReadingTime(words=words, exact_minutes=exact, display_minutes=display)


def format_number(value: float, decimals: int = 0, locale: str = "en_US") -> str:
    """
    Format a number with the separators of `locale`.

    Locales are matched on their language prefix (``es_MX`` → ``es``).
    """
    language = locale.replace("-", "_").split("_", 1)[0].lower()
    decimal_sep, thousands_sep = NUMBER_SEPARATORS.get(language, (".", ","))

    formatted = f"{value:,.{decimals}f}"
    return (
        formatted.replace(",", "\x00")
        .replace(".", decimal_sep)
        .replace("\x00", thousands_sep)
    )


def render_readtime(
    item_id: int,
    content: str,
    *,
    read_aloud: bool = False,
    css_class: str = "readtime",
    wpm: int = DEFAULT_WPM,
    link_text: str = "Listen",
    icon_class: str = "fas fa-headphones",
    locale: str = "en_US",
) -> str:
    """
    Render the reading-time block for an item.

    The read-aloud trigger carries the item id in ``data-post-id``; its text
    node is the label the playback controller restores on reset.
    """
    estimate = estimate_reading_time(content, wpm)

    tooltip = "Estimated reading time: {} minutes".format(
        format_number(estimate.exact_minutes, 2, locale)
    )
    label = "{} min read".format(format_number(estimate.display_minutes, 1, locale))
    icon_class = " ".join(icon_class.split())

    parts = [
        f'<div class="{html.escape(css_class)}">',
        f'<span class="read-time-line" title="{html.escape(tooltip)}">',
        '<i class="fas fa-stopwatch" aria-hidden="true"></i> ',
        html.escape(label),
        "</span>",
    ]

    if read_aloud:
        parts.extend([
            '<span class="read-aloud-line read-aloud-link" title="Listen to this article">',
            f'<a href="#" class="read-aloud-trigger" data-post-id="{int(item_id)}">',
            f'<i class="{html.escape(icon_class)}" aria-hidden="true"></i> ',
            html.escape(link_text),
            "</a>",
            "</span>",
        ])

    parts.append("</div>")
    return "".join(parts)
