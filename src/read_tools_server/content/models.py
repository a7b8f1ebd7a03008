"""
Content Data Contracts

Plain value objects passed between the repository, the cache and the
resolver. They carry no database session and can be built by hand in tests.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence, Tuple


PUBLIC_STATUS = "publish"


class ContentIdentity(NamedTuple):
    """
    Item identifier plus its last-modification timestamp.

    Any edit changes `modified`, so a key derived from both fields is
    invalidated implicitly.
    """
    item_id: int
    modified: int
    status: str = PUBLIC_STATUS

    @property
    def is_public(self) -> bool:
        return self.status == PUBLIC_STATUS


class ItemSnapshot(NamedTuple):
    """
    Everything the resolver may read about one item.
    """
    item_id: int
    body: str
    fields: Sequence[Tuple[str, Optional[str]]] = ()
