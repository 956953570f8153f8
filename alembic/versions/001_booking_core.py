# alembic/versions/001_booking_core.py
"""Booking core - profiles, services, bookings, availability slots, notifications

Revision ID: 001_booking_core
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the calendar store. On PostgreSQL the bookings table also gets the
per-freelancer no-overlap exclusion constraint over pending and confirmed
bookings, which needs the btree_gist extension.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_booking_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NO_OVERLAP_CONSTRAINT = "bookings_no_overlap_per_freelancer"


def _is_postgres() -> bool:
    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    return dialect_name == "postgresql"


def upgrade() -> None:
    """Create booking core tables."""
    print("Creating booking core tables...")

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="client"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('client', 'freelancer')", name="ck_profiles_role"),
    )

    op.create_table(
        "services",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("freelancer_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["freelancer_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint("price_cents >= 0", name="ck_services_price_non_negative"),
    )
    op.create_index(
        "ix_services_freelancer_active", "services", ["freelancer_id", "is_active"]
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("client_id", sa.String(64), nullable=False),
        sa.Column("freelancer_id", sa.String(64), nullable=False),
        sa.Column("service_id", sa.String(64), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("total_amount_cents", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["client_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["freelancer_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="SET NULL"),
        sa.CheckConstraint("end_time > start_time", name="ck_bookings_time_order"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'canceled')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "total_amount_cents IS NULL OR total_amount_cents >= 0",
            name="ck_bookings_amount_non_negative",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index(
        "ix_bookings_freelancer_status_start",
        "bookings",
        ["freelancer_id", "status", "start_time"],
    )
    op.create_index("ix_bookings_client_start", "bookings", ["client_id", "start_time"])

    if _is_postgres():
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            f"""
            ALTER TABLE bookings
              ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT}
              EXCLUDE USING gist (
                freelancer_id WITH =,
                tstzrange(start_time, end_time, '[)') WITH &&
              )
              WHERE (status IN ('pending', 'confirmed'))
            """
        )

    op.create_table(
        "availability_slots",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("freelancer_id", sa.String(64), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_booked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["freelancer_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint("end_time > start_time", name="ck_availability_slots_time_order"),
    )
    op.create_index(
        "ix_availability_slots_freelancer_start",
        "availability_slots",
        ["freelancer_id", "start_time"],
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_user_type", "notifications", ["user_id", "type"])
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "read"])
    op.create_index(
        "ix_notifications_user_created_at", "notifications", ["user_id", "created_at"]
    )

    print("Booking core tables created")


def downgrade() -> None:
    """Drop booking core tables."""
    print("Dropping booking core tables...")

    op.drop_index("ix_notifications_user_created_at", table_name="notifications")
    op.drop_index("ix_notifications_user_read", table_name="notifications")
    op.drop_index("ix_notifications_user_type", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_availability_slots_freelancer_start", table_name="availability_slots")
    op.drop_table("availability_slots")

    if _is_postgres():
        op.execute(f"ALTER TABLE bookings DROP CONSTRAINT IF EXISTS {NO_OVERLAP_CONSTRAINT}")
    op.drop_index("ix_bookings_client_start", table_name="bookings")
    op.drop_index("ix_bookings_freelancer_status_start", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_services_freelancer_active", table_name="services")
    op.drop_table("services")
    op.drop_table("profiles")
