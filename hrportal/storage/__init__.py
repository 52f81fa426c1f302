"""Storage module — repository contracts and their two implementations."""

from __future__ import annotations

from hrportal.database import build_engine
from hrportal.storage.base import (
    AttendanceRepository,
    CallDataRepository,
    EmployeeRepository,
    HolidayRepository,
    LeaveRepository,
    Page,
    Store,
    StoreProvider,
)
from hrportal.storage.memory import InMemoryStore, MemoryStoreProvider
from hrportal.storage.sql import SqlStore, SqlStoreProvider


def build_store_provider(backend: str, database_url: str) -> StoreProvider:
    """Pick the store implementation once, at process start."""
    if backend == "memory":
        return MemoryStoreProvider()
    return SqlStoreProvider(build_engine(database_url))


__all__ = [
    "AttendanceRepository",
    "CallDataRepository",
    "EmployeeRepository",
    "HolidayRepository",
    "LeaveRepository",
    "Page",
    "Store",
    "StoreProvider",
    "InMemoryStore",
    "MemoryStoreProvider",
    "SqlStore",
    "SqlStoreProvider",
    "build_store_provider",
]
