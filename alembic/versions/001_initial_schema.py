"""001 – Initial schema: employees, attendance, leave, call data, holidays.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 10:00:00.000000+05:30
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("user_role", ["employee", "admin"]),
    ("employment_status", ["active", "inactive", "terminated"]),
    ("attendance_status", ["present", "absent", "late", "half_day", "holiday"]),
    ("work_location", ["office", "remote", "field"]),
    ("leave_status", ["pending", "approved", "rejected", "cancelled"]),
    (
        "leave_type",
        [
            "vacation",
            "sick_leave",
            "personal_leave",
            "emergency_leave",
            "maternity_paternity",
            "bereavement",
        ],
    ),
    ("half_day_period", ["morning", "afternoon"]),
    ("holiday_type", ["national", "religious", "company", "regional"]),
    ("holiday_status", ["active", "cancelled"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. employees ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE employees (
            id             UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_code  VARCHAR(20)  NOT NULL UNIQUE,
            name           VARCHAR(200) NOT NULL,
            email          VARCHAR(255) NOT NULL UNIQUE,
            department     VARCHAR(100),
            position       VARCHAR(100),
            role           user_role NOT NULL DEFAULT 'employee',
            status         employment_status NOT NULL DEFAULT 'active',
            start_date     DATE,
            created_at     TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX idx_employees_department ON employees(department)")

    # ── 2. attendance_records ─────────────────────────────────────────────
    op.execute("""
        CREATE TABLE attendance_records (
            id               UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id      UUID NOT NULL REFERENCES employees(id),
            date             DATE NOT NULL,
            clock_in         TIMESTAMPTZ,
            clock_out        TIMESTAMPTZ,
            break_start      TIMESTAMPTZ,
            break_end        TIMESTAMPTZ,
            total_hours      DOUBLE PRECISION NOT NULL DEFAULT 0,
            overtime_hours   DOUBLE PRECISION NOT NULL DEFAULT 0,
            status           attendance_status NOT NULL DEFAULT 'absent',
            location         work_location NOT NULL DEFAULT 'office',
            notes            TEXT,
            is_manual_entry  BOOLEAN DEFAULT FALSE,
            added_by         UUID REFERENCES employees(id),
            updated_by       UUID REFERENCES employees(id),
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_attendance_emp_date UNIQUE (employee_id, date)
        )
    """)
    op.execute("CREATE INDEX idx_attendance_date ON attendance_records(date)")

    # ── 3. leave_requests ─────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE leave_requests (
            id                UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id       UUID NOT NULL REFERENCES employees(id),
            type              leave_type NOT NULL,
            start_date        DATE NOT NULL,
            end_date          DATE NOT NULL,
            total_days        NUMERIC(5,1) NOT NULL,
            reason            VARCHAR(500) NOT NULL,
            is_half_day       BOOLEAN DEFAULT FALSE,
            half_day_period   half_day_period,
            status            leave_status NOT NULL DEFAULT 'pending',
            reviewed_by       UUID REFERENCES employees(id),
            reviewed_at       TIMESTAMPTZ,
            rejection_reason  TEXT,
            handover_notes    TEXT,
            cancelled_at      TIMESTAMPTZ,
            created_at        TIMESTAMPTZ DEFAULT NOW(),
            updated_at        TIMESTAMPTZ DEFAULT NOW(),
            CHECK (end_date >= start_date)
        )
    """)
    op.execute(
        "CREATE INDEX ix_leave_requests_emp_dates "
        "ON leave_requests(employee_id, start_date, end_date)"
    )

    # ── 4. call_data ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE call_data (
            id                   UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id          UUID NOT NULL REFERENCES employees(id),
            date                 DATE NOT NULL,
            total_calls          INTEGER NOT NULL DEFAULT 0,
            total_call_time      DOUBLE PRECISION NOT NULL DEFAULT 0,
            interested_students  INTEGER NOT NULL DEFAULT 0,
            visited_today        INTEGER NOT NULL DEFAULT 0,
            performance_score    DOUBLE PRECISION NOT NULL DEFAULT 0,
            notes                TEXT NOT NULL DEFAULT '',
            updated_by           UUID REFERENCES employees(id),
            created_at           TIMESTAMPTZ DEFAULT NOW(),
            updated_at           TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_call_data_emp_date UNIQUE (employee_id, date)
        )
    """)
    op.execute("CREATE INDEX ix_call_data_date ON call_data(date)")

    # ── 5. holidays ───────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE holidays (
            id                UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name              VARCHAR(150) NOT NULL,
            description       TEXT,
            date              DATE NOT NULL,
            type              holiday_type NOT NULL DEFAULT 'company',
            is_recurring      BOOLEAN DEFAULT FALSE,
            is_office_closed  BOOLEAN DEFAULT TRUE,
            status            holiday_status NOT NULL DEFAULT 'active',
            added_by          UUID NOT NULL REFERENCES employees(id),
            created_at        TIMESTAMPTZ DEFAULT NOW(),
            updated_at        TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_holidays_date ON holidays(date)")
    op.execute("CREATE INDEX ix_holidays_status_date ON holidays(status, date)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    for t in ["holidays", "call_data", "leave_requests", "attendance_records", "employees"]:
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)
