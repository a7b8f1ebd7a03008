"""
SQLAlchemy Models

Defines the database schema for:
- Content items and their auxiliary key-value fields
- Key-value entries backing the transcript cache
- Windowed counters backing the rate limiter
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy import (
    String,
    Integer,
    Float,
    Text,
    DateTime,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def unix_timestamp(moment: datetime) -> int:
    """
    Convert a datetime to integer UNIX seconds.

    Naive values are read as UTC (SQLite drops the timezone on round trip).
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


# ---------------------------------------------------------------------
# Content Models
# ---------------------------------------------------------------------

class ContentItem(Base):
    """
    A publishable content unit (post or page).

    `modified_at` changes on every edit; together with `id` it forms the
    transcript cache key.
    """
    __tablename__ = "content_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    modified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    fields: Mapped[List["ItemField"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="ItemField.id",
    )

    @property
    def modified_timestamp(self) -> int:
        """Last modification time as integer UNIX seconds (UTC)."""
        return unix_timestamp(self.modified_at)

    def __repr__(self) -> str:
        return f"<ContentItem(id={self.id}, status={self.status!r})>"


class ItemField(Base):
    """
    Auxiliary key-value field attached to an item.

    Page builders commonly keep the rendered text of a page here instead of
    in the item body.
    """
    __tablename__ = "item_field"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("content_item.id", ondelete="CASCADE"),
        nullable=False,
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    item: Mapped["ContentItem"] = relationship(back_populates="fields")

    __table_args__ = (
        Index("idx_item_field_item_key", "item_id", "key"),
    )


# ---------------------------------------------------------------------
# Store Models
# ---------------------------------------------------------------------

class KeyValueEntry(Base):
    """
    Expiring key-value entry used by the database-backed store.
    """
    __tablename__ = "kv_entry"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[Optional[float]] = mapped_column(Float, nullable=True)


class RateLimitRecord(Base):
    """
    Windowed request counter for one client identity.
    """
    __tablename__ = "rate_limit_record"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    window_start: Mapped[float] = mapped_column(Float, nullable=False)
