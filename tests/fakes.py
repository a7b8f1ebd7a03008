"""
Shared test doubles for the content pipeline.
"""

from typing import Dict, List, Optional, Tuple

from read_tools_server.content.models import ContentIdentity, ItemSnapshot
from read_tools_server.content.resolver import ContentResolver


T1 = 1_700_000_000


class FakeItems:
    """In-memory stand-in for ItemRepository."""

    def __init__(self):
        self.items: Dict[int, Tuple[ContentIdentity, ItemSnapshot]] = {}
        self.fail_snapshot = False

    def add(
        self,
        item_id: int,
        body: str,
        fields: Optional[List[Tuple[str, str]]] = None,
        modified: int = T1,
        status: str = "publish",
    ) -> None:
        self.items[item_id] = (
            ContentIdentity(item_id, modified, status),
            ItemSnapshot(item_id, body, list(fields or [])),
        )

    def touch(self, item_id: int, modified: int) -> None:
        identity, snapshot = self.items[item_id]
        self.items[item_id] = (identity._replace(modified=modified), snapshot)

    async def get_identity(self, item_id: int) -> Optional[ContentIdentity]:
        entry = self.items.get(item_id)
        return entry[0] if entry else None

    async def get_snapshot(self, item_id: int) -> Optional[ItemSnapshot]:
        if self.fail_snapshot:
            raise RuntimeError("storage went away")
        entry = self.items.get(item_id)
        return entry[1] if entry else None


class CountingResolver(ContentResolver):
    """ContentResolver that records how often it did real work."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def resolve(self, item: ItemSnapshot) -> str:
        self.calls += 1
        return super().resolve(item)
