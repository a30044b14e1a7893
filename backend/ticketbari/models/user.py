"""
User account created on first sign-in.

Emails are unique regardless of case; the role column is only changed
by admin actions.
"""

from sqlalchemy import Column, Integer, String, Index, CheckConstraint, func

from ticketbari.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    photo = Column(String(1024), nullable=True)
    role = Column(String(20), nullable=False, default="user")

    __table_args__ = (
        Index("uq_users_email_lower", func.lower(email), unique=True),
        CheckConstraint("role IN ('user', 'vendor', 'admin', 'fraud')", name="check_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
