"""
Content Resolver

Produces the best-effort plain-text transcript of an item by running an
ordered list of extraction strategies and joining what they find.

Extension Point
---------------
Transcript filters registered with `add_filter` receive the normalized text
and the item id and return a replacement text (e.g. with boilerplate
removed). They run in registration order.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .models import ItemSnapshot
from .normalize import collapse_whitespace
from .strategies import DEFAULT_STRATEGIES, Strategy

logger = logging.getLogger("readtools.content")


# Prefix telling the client to recover the text from the rendered page.
FRONTEND_EXTRACTION_SENTINEL = "<!-- READ_TOOLS_FRONTEND_EXTRACTION_NEEDED -->"


TranscriptFilter = Callable[[str, int], str]


class ContentResolver:
    """
    Strategy-driven transcript builder.

    Strategies are not mutually exclusive: a later strategy supplements the
    text of an earlier one. Fragments already contained in the collected text
    are skipped, since page builders often mirror the body in their fields.
    """

    def __init__(
        self,
        strategies: Optional[Sequence[Strategy]] = None,
        filters: Optional[Sequence[TranscriptFilter]] = None,
    ) -> None:
        self._strategies: List[Strategy] = list(
            strategies if strategies is not None else DEFAULT_STRATEGIES
        )
        self._filters: List[TranscriptFilter] = list(filters or [])

    @property
    def strategies(self) -> List[Strategy]:
        return list(self._strategies)

    def add_strategy(self, strategy: Strategy) -> None:
        self._strategies.append(strategy)

    def add_filter(self, transcript_filter: TranscriptFilter) -> None:
        self._filters.append(transcript_filter)

    def resolve(self, item: ItemSnapshot) -> str:
        """
        Build the transcript for `item`.

        Parameters
        ----------
        item : ItemSnapshot
            Body and auxiliary fields of the item.

        Returns
        -------
        str
            Normalized transcript. Empty when no strategy found usable text.
        """
        collected: List[str] = []

        for strategy in self._strategies:
            for fragment in strategy(item):
                fragment = collapse_whitespace(fragment)
                if not fragment:
                    continue
                if any(fragment in existing for existing in collected):
                    continue
                collected.append(fragment)

        text = collapse_whitespace(" ".join(collected))

        for transcript_filter in self._filters:
            text = collapse_whitespace(transcript_filter(text, item.item_id))

        logger.debug(
            "Resolved item %d: %d fragment(s), %d characters",
            item.item_id,
            len(collected),
            len(text),
        )
        return text
