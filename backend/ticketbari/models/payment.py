"""
Append-only payment fact. One row per paid booking.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint

from ticketbari.db.base import Base, utcnow


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, nullable=False)
    email = Column(String(255), nullable=False, index=True)
    price = Column(Float, nullable=False)
    transaction_id = Column(String(255), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("booking_id", name="uq_payment_booking"),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, booking={self.booking_id}, price={self.price})>"
