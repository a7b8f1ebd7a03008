"""
Database Integration Tests

Runs the models and the item repository against in-memory SQLite:
- Model defaults
- Identity lookup (id, modification time, status)
- Snapshot loading with auxiliary fields
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from read_tools_server.db.models import Base, ContentItem, ItemField, unix_timestamp
from read_tools_server.db.repository import ItemRepository

T1 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
async def session():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add(ContentItem(
            id=42,
            title="Builder page",
            status="publish",
            body="Hello world",
            modified_at=T1,
            fields=[
                ItemField(key="_builder_text", value="Prose kept by the page builder."),
                ItemField(key="_edit_lock", value="1714564800:1"),
            ],
        ))
        session.add(ContentItem(id=9, title="Draft", body="Unfinished", modified_at=T1))
        await session.commit()
        yield session

    await engine.dispose()


class TestContentModels:
    """Model construction and helpers."""

    def test_unix_timestamp_treats_naive_as_utc(self):
        naive = T1.replace(tzinfo=None)
        assert unix_timestamp(naive) == unix_timestamp(T1) == int(T1.timestamp())

    def test_item_field_creation(self):
        field = ItemField(item_id=1, key="_builder_text", value="text")
        assert field.key == "_builder_text"
        assert field.value == "text"


class TestItemRepository:
    """Repository reads against a real schema."""

    @pytest.mark.asyncio
    async def test_identity(self, session):
        identity = await ItemRepository(session).get_identity(42)

        assert identity.item_id == 42
        assert identity.modified == int(T1.timestamp())
        assert identity.is_public

    @pytest.mark.asyncio
    async def test_draft_is_not_public(self, session):
        identity = await ItemRepository(session).get_identity(9)
        assert identity.status == "draft"
        assert not identity.is_public

    @pytest.mark.asyncio
    async def test_missing_item(self, session):
        repo = ItemRepository(session)
        assert await repo.get_identity(1234) is None
        assert await repo.get_snapshot(1234) is None

    @pytest.mark.asyncio
    async def test_snapshot_includes_fields_in_order(self, session):
        snapshot = await ItemRepository(session).get_snapshot(42)

        assert snapshot.body == "Hello world"
        assert snapshot.fields == [
            ("_builder_text", "Prose kept by the page builder."),
            ("_edit_lock", "1714564800:1"),
        ]
