#!/usr/bin/env python3
"""Seed demo data — an admin, a few employees and the year's holidays.

Usage:
    python scripts/seed_demo_data.py                  # seed into DATABASE_URL
    python scripts/seed_demo_data.py --create-tables  # create tables first (dev only)
    python scripts/seed_demo_data.py --year 2027

Requires .env at project root with DATABASE_URL and JWT_SECRET.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from datetime import date, datetime, timezone
from pathlib import Path

# ── Path setup ────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

if (PROJECT_ROOT / ".env").exists():
    load_dotenv(PROJECT_ROOT / ".env")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("seed_demo_data")

from hrportal.common.constants import (  # noqa: E402
    EmploymentStatus,
    HolidayStatus,
    HolidayType,
    UserRole,
)
from hrportal.common.exceptions import DuplicateRecordError  # noqa: E402
from hrportal.config import settings  # noqa: E402
from hrportal.core_hr.models import Employee  # noqa: E402
from hrportal.database import Base, build_engine  # noqa: E402
from hrportal.holidays.models import Holiday  # noqa: E402
from hrportal.storage import SqlStoreProvider  # noqa: E402

# Imported for table registration on Base.metadata
import hrportal.attendance.models  # noqa: E402,F401
import hrportal.calls.models  # noqa: E402,F401
import hrportal.leave.models  # noqa: E402,F401


DEMO_EMPLOYEES = [
    ("EMP0001", "Admin User", "admin@hrportal.in", "Management", "HR Manager", UserRole.admin),
    ("EMP0002", "Priya Sharma", "priya@hrportal.in", "Sales", "Counsellor", UserRole.employee),
    ("EMP0003", "Rahul Verma", "rahul@hrportal.in", "Sales", "Counsellor", UserRole.employee),
    ("EMP0004", "Anita Desai", "anita@hrportal.in", "Engineering", "Developer", UserRole.employee),
]

DEMO_HOLIDAYS = [
    ((1, 26), "Republic Day", HolidayType.national),
    ((8, 15), "Independence Day", HolidayType.national),
    ((10, 2), "Gandhi Jayanti", HolidayType.national),
    ((12, 25), "Christmas", HolidayType.religious),
    ((12, 31), "Company Foundation Day", HolidayType.company),
]


async def seed(year: int, create_tables: bool) -> None:
    engine = build_engine(settings.DATABASE_URL)
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tables created")

    provider = SqlStoreProvider(engine)
    now = datetime.now(timezone.utc)
    admin_id = None

    for code, name, email, department, position, role in DEMO_EMPLOYEES:
        try:
            async with provider.open() as store:
                employee = await store.employees.add(Employee(
                    id=uuid.uuid4(),
                    employee_code=code,
                    name=name,
                    email=email,
                    department=department,
                    position=position,
                    role=role,
                    status=EmploymentStatus.active,
                    start_date=date(year, 1, 1),
                    created_at=now,
                ))
                logger.info("Employee %s (%s) created", code, role.value)
                if role == UserRole.admin:
                    admin_id = employee.id
        except DuplicateRecordError:
            logger.info("Employee %s already present, skipped", code)

    if admin_id is None:
        async with provider.open() as store:
            admins = [e for e in await store.employees.list() if e.role == UserRole.admin]
        if not admins:
            logger.error("No admin employee available to own holidays")
            await provider.close()
            sys.exit(1)
        admin_id = admins[0].id

    async with provider.open() as store:
        for (month, day), name, holiday_type in DEMO_HOLIDAYS:
            holiday_date = date(year, month, day)
            if await store.holidays.list(
                from_date=holiday_date, to_date=holiday_date, status=HolidayStatus.active,
            ):
                logger.info("Holiday on %s already present, skipped", holiday_date)
                continue
            await store.holidays.add(Holiday(
                id=uuid.uuid4(),
                name=name,
                date=holiday_date,
                type=holiday_type,
                is_recurring=holiday_type == HolidayType.national,
                is_office_closed=True,
                status=HolidayStatus.active,
                added_by=admin_id,
                created_at=now,
                updated_at=now,
            ))
            logger.info("Holiday %s on %s created", name, holiday_date)

    await provider.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed HR Portal demo data")
    parser.add_argument("--year", type=int, default=datetime.now().year)
    parser.add_argument("--create-tables", action="store_true")
    args = parser.parse_args()

    asyncio.run(seed(args.year, args.create_tables))


if __name__ == "__main__":
    main()
