"""
Booking endpoints: seat reservation, vendor decisions and cancellation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ticketbari.api.dependencies import (
    get_booking_store,
    get_current_identity,
    get_guard,
    get_ledger,
    get_lifecycle,
    require_vendor_or_admin,
)
from ticketbari.core.security import Identity
from ticketbari.models.enums import Role
from ticketbari.repositories.booking_store import BookingStore
from ticketbari.schemas.booking import (
    BookingCancelResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
)
from ticketbari.services.auth_service import AuthorizationGuard
from ticketbari.services.booking_service import BookingLifecycleManager
from ticketbari.services.inventory_ledger import InventoryLedger

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("", response_model=list[BookingResponse])
async def customer_bookings(
    email: Optional[str] = Query(None),
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    bookings: BookingStore = Depends(get_booking_store),
):
    """Bookings made by a customer. No email, no bookings."""
    if not email:
        return []
    await guard.ensure_self(identity, email)
    return await bookings.list_by_customer(email)


@router.get("/vendor", response_model=list[BookingResponse])
async def vendor_bookings(
    email: str = Query(...),
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    bookings: BookingStore = Depends(get_booking_store),
):
    """Booking requests against a vendor's tickets."""
    await guard.ensure_self(identity, email)
    return await bookings.list_by_vendor(email)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    identity: Identity = Depends(get_current_identity),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """
    Reserve specific seats on a ticket. The booking starts pending vendor
    approval; seats already held by another non-rejected booking return 409.
    """
    qty = data.booking_qty if data.booking_qty is not None else len(data.seat_numbers)
    return await ledger.reserve_seats(identity.email, data.ticket_id, data.seat_numbers, qty)


@router.patch("/status/{booking_id}", response_model=BookingResponse)
async def decide_booking(
    booking_id: int,
    data: BookingStatusUpdate,
    identity: Identity = Depends(require_vendor_or_admin),
    guard: AuthorizationGuard = Depends(get_guard),
    lifecycle: BookingLifecycleManager = Depends(get_lifecycle),
):
    """Vendor accepts or rejects a pending booking. Rejection frees its seats."""
    is_admin = await guard.role_of(identity) == Role.ADMIN.value
    return await lifecycle.decide(identity, booking_id, data.status, is_admin=is_admin)


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: int,
    identity: Identity = Depends(get_current_identity),
    lifecycle: BookingLifecycleManager = Depends(get_lifecycle),
):
    """Cancel a booking. Only allowed while it is still pending."""
    deleted = await lifecycle.cancel(identity, booking_id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking_id,
        deleted_count=deleted,
    )
