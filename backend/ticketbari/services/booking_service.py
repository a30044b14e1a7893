"""
Booking lifecycle.

    pending --vendor--> approved --payment--> paid
    pending --vendor--> rejected
    pending --customer cancel--> (deleted)

`paid` and `rejected` are terminal. Every transition is a conditional
write on the current status, so a vendor decision and a customer
cancellation racing on the same booking cannot both take effect.
"""

from ticketbari.core.errors import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ticketbari.core.logging import get_logger
from ticketbari.core.metrics import record_booking_decision
from ticketbari.core.security import Identity
from ticketbari.models.booking import Booking
from ticketbari.models.enums import BookingStatus
from ticketbari.repositories.booking_store import BookingStore

logger = get_logger(__name__)

VENDOR_DECISIONS = frozenset({BookingStatus.APPROVED.value, BookingStatus.REJECTED.value})


class BookingLifecycleManager:
    def __init__(self, bookings: BookingStore):
        self.bookings = bookings

    async def _load(self, booking_id: int) -> Booking:
        booking = await self.bookings.get(booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    async def decide(self, identity: Identity, booking_id: int, status: str, is_admin: bool = False) -> Booking:
        """Vendor approves or rejects a pending booking on one of their tickets."""
        if status not in VENDOR_DECISIONS:
            raise ValidationError(f"Unsupported booking status: {status}")

        booking = await self._load(booking_id)
        if booking.vendor_email != identity.email and not is_admin:
            raise AuthorizationError("Only the ticket's vendor can decide on this booking")

        changed = await self.bookings.transition(booking_id, BookingStatus.PENDING.value, status)
        if not changed:
            current = await self._load(booking_id)
            raise InvalidStateError(f"Booking is already {current.status}")

        if status == BookingStatus.REJECTED.value:
            released = await self.bookings.release_seats(booking_id)
            logger.info("booking_seats_released", booking_id=booking_id, seats=released)

        record_booking_decision(status)
        logger.info("booking_decided", booking_id=booking_id, status=status, vendor=identity.email)
        return await self._load(booking_id)

    async def cancel(self, identity: Identity, booking_id: int) -> int:
        """Customer cancels their own booking; legal only while pending."""
        booking = await self._load(booking_id)
        if booking.customer_email != identity.email:
            raise AuthorizationError("Booking belongs to another customer")

        deleted = await self.bookings.delete_if_status(booking_id, BookingStatus.PENDING.value)
        if not deleted:
            raise InvalidStateError(
                "Cannot cancel: vendor already acted or payment completed"
            )

        record_booking_decision("cancelled")
        logger.info("booking_cancelled", booking_id=booking_id, customer=identity.email)
        return deleted
