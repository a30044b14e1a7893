"""
Pydantic schemas for ticket-related request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ticketbari.models.enums import VerificationStatus
from ticketbari.schemas.base import CamelModel


class TicketCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    origin: str = Field(..., alias="from", min_length=1, max_length=255)
    destination: str = Field(..., alias="to", min_length=1, max_length=255)
    transport_type: str = Field(..., min_length=1, max_length=50)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0, le=100000)
    departure_date: datetime
    perks: list[str] = Field(default_factory=list)
    photo: Optional[str] = Field(None, max_length=1024)
    vendor_name: Optional[str] = Field(None, max_length=255)


class TicketUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    origin: Optional[str] = Field(None, alias="from", min_length=1, max_length=255)
    destination: Optional[str] = Field(None, alias="to", min_length=1, max_length=255)
    transport_type: Optional[str] = Field(None, min_length=1, max_length=50)
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0, le=100000)
    departure_date: Optional[datetime] = None
    perks: Optional[list[str]] = None
    photo: Optional[str] = Field(None, max_length=1024)


class TicketResponse(CamelModel):
    id: int
    vendor_email: str
    vendor_name: Optional[str]
    title: str
    origin: str = Field(..., alias="from")
    destination: str = Field(..., alias="to")
    transport_type: str
    price: float
    quantity: int
    departure_date: datetime
    perks: list[str]
    photo: Optional[str]
    verification_status: VerificationStatus
    is_advertised: bool
    created_at: datetime


class TicketListResponse(CamelModel):
    tickets: list[TicketResponse]
    total: int
    page: int
    page_size: int
    cached: bool = False


class TicketStatusUpdate(CamelModel):
    status: VerificationStatus


class AdvertiseUpdate(CamelModel):
    is_advertised: bool


class AdvertiseResult(CamelModel):
    ticket_id: int
    is_advertised: bool
    advertised_count: int
    advertise_limit: int


class TakenSeatsResponse(CamelModel):
    ticket_id: int
    seats: list[str]


class DeleteResult(CamelModel):
    deleted_count: int
