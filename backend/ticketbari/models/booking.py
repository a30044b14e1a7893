"""
Booking of specific seats on a ticket, plus the seat claims that back it.

Key design decisions:
- `ticket_id` is a plain reference: bookings outlive ticket deletion
- Seat occupancy lives in `booking_seats`; the unique constraint on
  (ticket_id, seat_number) makes a double-booked seat impossible to commit
- Claims exist only for non-rejected bookings: rejecting or cancelling a
  booking deletes its rows
"""

from sqlalchemy import (
    Column, Integer, String, Float, JSON, ForeignKey, UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship

from ticketbari.db.base import Base, TimestampMixin

SEAT_NUMBER_LENGTH = 32


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, nullable=False, index=True)
    ticket_title = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    vendor_email = Column(String(255), nullable=False, index=True)
    seat_numbers = Column(JSON, nullable=False, default=list)
    booking_qty = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="pending")

    seats = relationship(
        "BookingSeat",
        back_populates="booking",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("booking_qty > 0", name="check_booking_qty_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'paid')",
            name="check_booking_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, ticket={self.ticket_id}, status={self.status})>"


class BookingSeat(Base):
    __tablename__ = "booking_seats"

    id = Column(Integer, primary_key=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    ticket_id = Column(Integer, nullable=False)
    seat_number = Column(String(SEAT_NUMBER_LENGTH), nullable=False)

    booking = relationship("Booking", back_populates="seats")

    __table_args__ = (
        UniqueConstraint("ticket_id", "seat_number", name="uq_ticket_seat"),
        Index("ix_booking_seats_booking_id", "booking_id"),
    )
