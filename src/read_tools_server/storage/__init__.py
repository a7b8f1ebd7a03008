"""
Storage Package

Key-value storage shared by the transcript cache and the rate limiter, with
an in-memory and a database-backed implementation.
"""

from .base import KeyValueStore, WindowCount
from .memory import InMemoryStore
from .sql import SqlStore

__all__ = [
    "KeyValueStore",
    "WindowCount",
    "InMemoryStore",
    "SqlStore",
]
