"""
Ticket listing owned by a vendor.

Key design decisions:
- `quantity` is only decremented by confirmed payments; the CHECK
  constraint is the last line of defence against overselling
- Index on `is_advertised` keeps the advertisement cap count cheap
- Index on `vendor_email` serves vendor dashboards and the fraud cascade
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, JSON, Index, CheckConstraint

from ticketbari.db.base import Base, TimestampMixin


class Ticket(Base, TimestampMixin):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    vendor_email = Column(String(255), nullable=False)
    vendor_name = Column(String(255), nullable=True)
    title = Column(String(255), nullable=False)
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    transport_type = Column(String(50), nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    departure_date = Column(DateTime(timezone=True), nullable=False)
    perks = Column(JSON, nullable=False, default=list)
    photo = Column(String(1024), nullable=True)
    verification_status = Column(String(20), nullable=False, default="pending")
    is_advertised = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_ticket_quantity_non_negative"),
        CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        CheckConstraint(
            "verification_status IN ('pending', 'approved', 'rejected')",
            name="check_ticket_verification_status",
        ),
        Index("ix_tickets_vendor_email", "vendor_email"),
        Index("ix_tickets_is_advertised", "is_advertised"),
        Index("ix_tickets_departure_date", "departure_date"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, title={self.title}, quantity={self.quantity})>"
