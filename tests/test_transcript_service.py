import pytest

from read_tools_server.content.cache import TranscriptCache, cache_key
from read_tools_server.content.models import ContentIdentity
from read_tools_server.content.resolver import FRONTEND_EXTRACTION_SENTINEL
from read_tools_server.content.service import TranscriptService, parse_item_id
from read_tools_server.core.errors import (
    ContentRetrievalError,
    EmptyContent,
    InvalidItemId,
    ItemNotAccessible,
)
from read_tools_server.storage import InMemoryStore

from fakes import T1, CountingResolver, FakeItems

PROSE_60 = "The quick brown fox jumps over the lazy dog near the riverbank"


@pytest.fixture
def items():
    repo = FakeItems()
    repo.add(42, "Hello world", [("_builder_text", PROSE_60)])
    repo.add(7, "", [])
    repo.add(9, PROSE_60 + " " + PROSE_60, status="draft")
    return repo


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def resolver():
    return CountingResolver()


@pytest.fixture
def service(items, store, resolver):
    return TranscriptService(items, TranscriptCache(store, ttl_seconds=3600), resolver)


# ---------------------------------------------------------------------
# parse_item_id
# ---------------------------------------------------------------------

@pytest.mark.parametrize("raw, expected", [(42, 42), ("42", 42), (" 17 ", 17)])
def test_parse_item_id_accepts_positive_integers(raw, expected):
    assert parse_item_id(raw) == expected


@pytest.mark.parametrize("raw", [None, ""])
def test_parse_item_id_missing(raw):
    with pytest.raises(InvalidItemId) as excinfo:
        parse_item_id(raw)
    assert excinfo.value.message == "Error: Post ID not provided."


@pytest.mark.parametrize("raw", [0, -3, "-3", "abc", "4.2", 4.2, True, [1], "\u00b2", "+-3", "\u0663"])
def test_parse_item_id_rejects_invalid(raw):
    with pytest.raises(InvalidItemId):
        parse_item_id(raw)


# ---------------------------------------------------------------------
# TranscriptService
# ---------------------------------------------------------------------

@pytest.mark.asyncio
async def test_builder_field_resolves_and_caches(service, resolver):
    first = await service.get_transcript(42)
    second = await service.get_transcript(42)

    assert first == PROSE_60
    assert second == first
    assert resolver.calls == 1


@pytest.mark.asyncio
async def test_cache_entry_uses_identity_key(service, store):
    await service.get_transcript(42)
    key = cache_key(ContentIdentity(42, T1))

    assert key == f"read_tools:content_42_{T1}"
    assert await store.get(key) == PROSE_60


@pytest.mark.asyncio
async def test_edit_bypasses_stale_entry(service, items, resolver):
    await service.get_transcript(42)
    items.touch(42, T1 + 60)

    await service.get_transcript(42)
    assert resolver.calls == 2


@pytest.mark.asyncio
async def test_explicit_invalidation(service, store, resolver):
    await service.get_transcript(42)
    assert await TranscriptCache(store).invalidate(ContentIdentity(42, T1)) is True

    await service.get_transcript(42)
    assert resolver.calls == 2


@pytest.mark.asyncio
async def test_empty_item_requests_frontend_extraction(service, resolver):
    assert await service.get_transcript(7) == FRONTEND_EXTRACTION_SENTINEL
    assert await service.get_transcript(7) == FRONTEND_EXTRACTION_SENTINEL
    assert resolver.calls == 1


@pytest.mark.asyncio
async def test_empty_item_without_frontend_extraction(items, store, resolver):
    service = TranscriptService(
        items,
        TranscriptCache(store),
        resolver,
        frontend_extraction_enabled=False,
    )
    with pytest.raises(EmptyContent):
        await service.get_transcript(7)


@pytest.mark.asyncio
async def test_missing_item_not_accessible(service):
    with pytest.raises(ItemNotAccessible):
        await service.get_transcript(999)


@pytest.mark.asyncio
async def test_unpublished_item_not_accessible(service, resolver):
    with pytest.raises(ItemNotAccessible):
        await service.get_transcript(9)
    assert resolver.calls == 0


@pytest.mark.asyncio
async def test_storage_fault_is_retrieval_error(service, items):
    items.fail_snapshot = True
    with pytest.raises(ContentRetrievalError):
        await service.get_transcript(42)
