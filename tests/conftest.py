"""Shared test fixtures — stores, clock, client, auth helpers, factories.

Service and HTTP tests run against the in-memory store with a frozen clock.
Storage tests use SQLite + aiosqlite for the SQL store without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("STORAGE_BACKEND", "memory")

import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from hrportal.auth.schemas import Actor
from hrportal.common.clock import FixedClock
from hrportal.common.constants import EmploymentStatus, UserRole
from hrportal.config import settings
from hrportal.core_hr.models import Employee
from hrportal.database import Base
from hrportal.main import create_app
from hrportal.storage import InMemoryStore, MemoryStoreProvider, SqlStoreProvider

# Import ALL model modules so every table is on Base.metadata
import hrportal.attendance.models  # noqa: F401
import hrportal.calls.models  # noqa: F401
import hrportal.holidays.models  # noqa: F401
import hrportal.leave.models  # noqa: F401

# ── SQLite compat: compile PG-specific types ────────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture
async def sql_provider() -> AsyncGenerator[SqlStoreProvider, None]:
    """SQL store over a fresh in-memory SQLite schema."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SqlStoreProvider(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ── Clock / store ───────────────────────────────────────────────────

# 2024-01-15 10:00 in Asia/Kolkata
NOW = datetime(2024, 1, 15, 4, 30, tzinfo=timezone.utc)
TODAY = date(2024, 1, 15)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW, tz_name="Asia/Kolkata")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


# ── Model factories ─────────────────────────────────────────────────

def _make_employee(
    *,
    name: str = "Test User",
    email: str | None = None,
    department: str = "Sales",
    role: UserRole = UserRole.employee,
    status: EmploymentStatus = EmploymentStatus.active,
) -> dict:
    code = uuid.uuid4().hex[:6].upper()
    return dict(
        id=uuid.uuid4(),
        employee_code=f"EMP-{code}",
        name=name,
        email=email or f"{code.lower()}@hrportal.in",
        department=department,
        position="Counsellor",
        role=role,
        status=status,
        start_date=date(2023, 6, 1),
        created_at=datetime.now(timezone.utc),
    )


async def _add_employee(store, **kwargs) -> Employee:
    return await store.employees.add(Employee(**_make_employee(**kwargs)))


@pytest.fixture
async def employee(store) -> Employee:
    """An active employee in the in-memory store."""
    return await _add_employee(store, name="Priya Sharma")


@pytest.fixture
async def admin(store) -> Employee:
    return await _add_employee(
        store, name="Admin User", department="Management", role=UserRole.admin,
    )


@pytest.fixture
def employee_actor(employee) -> Actor:
    return Actor(employee_id=employee.id, role=UserRole.employee)


@pytest.fixture
def admin_actor(admin) -> Actor:
    return Actor(employee_id=admin.id, role=UserRole.admin)


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(store, clock):
    """A fresh app wired to the test store and frozen clock."""
    return create_app(store_provider=MemoryStoreProvider(store), clock=clock)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Auth helpers ────────────────────────────────────────────────────

def create_access_token(
    employee_id: uuid.UUID,
    role: UserRole = UserRole.employee,
    expired: bool = False,
) -> str:
    """Generate a JWT access token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
    payload = {
        "sub": str(employee_id),
        "role": role.value,
        "type": "access",
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _auth_headers(employee_id: uuid.UUID, role: UserRole = UserRole.employee) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(employee_id, role=role)}"}


@pytest.fixture
def auth_headers(employee) -> dict[str, str]:
    return _auth_headers(employee.id)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return _auth_headers(admin.id, role=UserRole.admin)
