"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import Field, StringConstraints, field_validator

from ticketbari.models.booking import SEAT_NUMBER_LENGTH
from ticketbari.models.enums import BookingStatus
from ticketbari.schemas.base import CamelModel


SeatNumber = Annotated[str, StringConstraints(min_length=1, max_length=SEAT_NUMBER_LENGTH)]


class BookingCreate(CamelModel):
    ticket_id: int
    seat_numbers: list[SeatNumber] = Field(..., min_length=1, max_length=50)
    booking_qty: Optional[int] = Field(None, gt=0, le=50)

    @field_validator("seat_numbers", mode="before")
    @classmethod
    def seats_as_strings(cls, value: Any) -> Any:
        # Clients send seat numbers as either ints or labels like "A3"
        if isinstance(value, list):
            return [str(seat).strip() for seat in value]
        return value


class BookingResponse(CamelModel):
    id: int
    ticket_id: int
    ticket_title: str
    customer_email: str
    vendor_email: str
    seat_numbers: list[str]
    booking_qty: int
    unit_price: float
    total_price: float
    status: BookingStatus
    created_at: datetime


class BookingStatusUpdate(CamelModel):
    status: Literal["approved", "rejected"]


class BookingCancelResponse(CamelModel):
    message: str
    booking_id: int
    deleted_count: int
