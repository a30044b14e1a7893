"""Initial schema: users, tickets, bookings, booking_seats, payments.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("photo", sa.String(1024), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'user'")),
        *_timestamps(),
        sa.CheckConstraint("role IN ('user', 'vendor', 'admin', 'fraud')", name="check_user_role"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    # Case-insensitive uniqueness: first sign-in is idempotent per email
    op.create_index("uq_users_email_lower", "users", [sa.text("lower(email)")], unique=True)

    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("vendor_email", sa.String(255), nullable=False),
        sa.Column("vendor_name", sa.String(255), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("transport_type", sa.String(50), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("departure_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("perks", sa.JSON(), nullable=False),
        sa.Column("photo", sa.String(1024), nullable=True),
        sa.Column("verification_status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("is_advertised", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        # Oversell guard: a payment that would push quantity below zero fails here
        sa.CheckConstraint("quantity >= 0", name="check_ticket_quantity_non_negative"),
        sa.CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        sa.CheckConstraint(
            "verification_status IN ('pending', 'approved', 'rejected')",
            name="check_ticket_verification_status",
        ),
    )
    op.create_index("ix_tickets_id", "tickets", ["id"])
    op.create_index("ix_tickets_vendor_email", "tickets", ["vendor_email"])
    op.create_index("ix_tickets_is_advertised", "tickets", ["is_advertised"])
    op.create_index("ix_tickets_departure_date", "tickets", ["departure_date"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ticket_id", sa.Integer(), nullable=False),
        sa.Column("ticket_title", sa.String(255), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("vendor_email", sa.String(255), nullable=False),
        sa.Column("seat_numbers", sa.JSON(), nullable=False),
        sa.Column("booking_qty", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Float(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.CheckConstraint("booking_qty > 0", name="check_booking_qty_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'paid')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_ticket_id", "bookings", ["ticket_id"])
    op.create_index("ix_bookings_customer_email", "bookings", ["customer_email"])
    op.create_index("ix_bookings_vendor_email", "bookings", ["vendor_email"])

    op.create_table(
        "booking_seats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "booking_id",
            sa.Integer(),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("ticket_id", sa.Integer(), nullable=False),
        sa.Column("seat_number", sa.String(32), nullable=False),
        # One claim per seat per ticket: concurrent reservations of the
        # same seat cannot both commit
        sa.UniqueConstraint("ticket_id", "seat_number", name="uq_ticket_seat"),
    )
    op.create_index("ix_booking_seats_booking_id", "booking_seats", ["booking_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("booking_id", name="uq_payment_booking"),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_email", "payments", ["email"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("booking_seats")
    op.drop_table("bookings")
    op.drop_table("tickets")
    op.drop_table("users")
