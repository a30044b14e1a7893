"""
String enumerations stored in status/role columns.
"""

from enum import Enum


class Role(str, Enum):
    USER = "user"
    VENDOR = "vendor"
    ADMIN = "admin"
    FRAUD = "fraud"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"
