"""
Pydantic schemas for payment intents and captured payments.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from ticketbari.schemas.base import CamelModel


class PaymentIntentCreate(CamelModel):
    price: Optional[float] = None
    booking_id: Optional[int] = None


class PaymentIntentResponse(CamelModel):
    client_secret: str


class PaymentCreate(CamelModel):
    booking_id: int
    email: EmailStr
    price: Optional[float] = Field(None, ge=0)
    transaction_id: Optional[str] = Field(None, max_length=255)


class PaymentResponse(CamelModel):
    id: int
    booking_id: int
    email: str
    price: float
    transaction_id: Optional[str]
    date: datetime
