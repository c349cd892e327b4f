"""Adapters - I/O implementations of ports."""

from .clock import FixedClock, SystemClock
from .memory_store import MemoryStore
from .sqlite_store import SQLiteStore

__all__ = [
    "FixedClock",
    "SystemClock",
    "MemoryStore",
    "SQLiteStore",
]
