"""
Inventory ledger: ticket quantity, seat occupancy and the advertisement cap.

CONCURRENCY STRATEGY: Guarded writes inside one transaction
===========================================================

Seats:
  Every seat of a non-rejected booking owns a row in `booking_seats`, unique
  on (ticket_id, seat_number). The claims are inserted in the same flush as
  the booking, so when two customers race for seat 2 the database lets
  exactly one INSERT commit. The pre-check only exists to name the
  conflicting seats in the error.

Payment confirmation:
  1. UPDATE bookings SET status='paid' WHERE id=:id AND status='approved'
  2. UPDATE tickets SET quantity=quantity-:qty WHERE id=:tid AND quantity>=:qty
  3. INSERT INTO payments (booking_id UNIQUE, ...)

  All three run in one transaction. A duplicate confirmation finds no
  'approved' row in step 1 and touches nothing, so quantity is decremented
  once and one payment row exists. If step 2 matches no row the whole unit is
  rolled back and the booking stays 'approved'.

Advertisement cap:
  UPDATE tickets SET is_advertised=true
   WHERE id=:id AND (is_advertised OR (SELECT count(*) ... WHERE is_advertised) < :limit)

  Count and write are one statement. SQLite evaluates it under the write
  lock, so a second toggle waits and then sees the first one's row.
  PostgreSQL READ COMMITTED would let two statements count the same
  snapshot, so there the statement runs after a transaction-scoped
  advisory lock.
"""

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbari.core.errors import (
    AlreadyAppliedError,
    AuthorizationError,
    InsufficientQuantityError,
    InvalidStateError,
    LimitReachedError,
    NotFoundError,
    SeatConflictError,
    ValidationError,
)
from ticketbari.core.logging import get_logger
from ticketbari.core.metrics import (
    record_advertise_toggle,
    record_booking_attempt,
    record_payment_confirmation,
)
from ticketbari.models.booking import Booking
from ticketbari.models.enums import BookingStatus, VerificationStatus
from ticketbari.models.payment import Payment
from ticketbari.repositories.booking_store import BookingStore
from ticketbari.repositories.payment_store import PaymentStore
from ticketbari.repositories.ticket_store import TicketStore

logger = get_logger(__name__)

ADVERTISE_LOCK_KEY = 0x7B1C_AD5


class InventoryLedger:
    def __init__(
        self,
        session: AsyncSession,
        tickets: TicketStore,
        bookings: BookingStore,
        payments: PaymentStore,
        advertise_limit: int = 6,
    ):
        self.session = session
        self.tickets = tickets
        self.bookings = bookings
        self.payments = payments
        self.advertise_limit = advertise_limit

    async def reserve_seats(
        self,
        customer_email: str,
        ticket_id: int,
        seat_numbers: list[str],
        qty: int,
    ) -> Booking:
        """
        Create a pending booking holding `seat_numbers` on the ticket.
        Quantity is not decremented until payment is confirmed.
        """
        seats = [seat for seat in seat_numbers if seat]
        if not seats or len(set(seats)) != len(seats):
            record_booking_attempt("invalid")
            raise ValidationError("Seat numbers must be non-empty and distinct")
        if qty != len(seats):
            record_booking_attempt("invalid")
            raise ValidationError(
                f"Booking quantity {qty} does not match {len(seats)} selected seats"
            )

        ticket = await self.tickets.get(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket {ticket_id} not found")

        if ticket.verification_status == VerificationStatus.REJECTED.value:
            record_booking_attempt("invalid")
            raise InvalidStateError("Ticket is not available for booking")

        if qty > ticket.quantity:
            record_booking_attempt("insufficient_quantity")
            logger.warning(
                "booking_failed_quantity",
                ticket_id=ticket_id,
                requested=qty,
                available=ticket.quantity,
            )
            raise InsufficientQuantityError(qty, ticket.quantity)

        taken = await self.bookings.held_seats(ticket_id, seats)
        if taken:
            record_booking_attempt("seat_conflict")
            logger.info("seat_conflict", ticket_id=ticket_id, seats=taken)
            raise SeatConflictError(taken)

        booking = Booking(
            ticket_id=ticket.id,
            ticket_title=ticket.title,
            customer_email=customer_email.lower(),
            vendor_email=ticket.vendor_email,
            seat_numbers=seats,
            booking_qty=qty,
            unit_price=ticket.price,
            total_price=round(ticket.price * qty, 2),
            status=BookingStatus.PENDING.value,
        )
        try:
            booking = await self.bookings.insert_with_claims(booking)
        except IntegrityError:
            # Lost the race for at least one seat after the pre-check
            await self.session.rollback()
            taken = await self.bookings.held_seats(ticket_id, seats)
            record_booking_attempt("seat_conflict")
            logger.info("seat_conflict", ticket_id=ticket_id, seats=taken, reason="concurrent_claim")
            raise SeatConflictError(taken or seats)

        record_booking_attempt("reserved")
        logger.info(
            "booking_reserved",
            booking_id=booking.id,
            ticket_id=ticket_id,
            seats=seats,
            qty=qty,
        )
        return booking

    async def confirm_payment(
        self,
        booking_id: int,
        payer_email: str,
        transaction_id: Optional[str] = None,
    ) -> Payment:
        """
        Mark an approved booking paid, decrement the ticket and record the
        payment, as one atomic unit. Safe to call more than once.
        """
        booking = await self.bookings.get(booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if booking.customer_email != payer_email.lower():
            raise AuthorizationError("Booking belongs to another customer")

        flipped = await self.bookings.transition(
            booking_id, BookingStatus.APPROVED.value, BookingStatus.PAID.value
        )
        if not flipped:
            current = await self.bookings.get(booking_id)
            if current is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            if current.status == BookingStatus.PAID.value:
                record_payment_confirmation("already_applied")
                logger.info("payment_already_applied", booking_id=booking_id)
                raise AlreadyAppliedError()
            record_payment_confirmation("invalid_state")
            raise InvalidStateError(
                f"Booking is {current.status}; only approved bookings can be paid"
            )

        ticket_id, qty = booking.ticket_id, booking.booking_qty
        ticket = await self.tickets.get(ticket_id)
        if ticket is None:
            await self.session.rollback()
            raise NotFoundError(f"Ticket {ticket_id} not found")

        available = ticket.quantity
        decremented = await self.tickets.decrement_quantity(ticket_id, qty)
        if not decremented:
            # Rollback expires loaded rows; only plain values are used below
            await self.session.rollback()
            record_payment_confirmation("insufficient_quantity")
            logger.warning(
                "payment_rejected_quantity",
                booking_id=booking_id,
                ticket_id=ticket_id,
                requested=qty,
                available=available,
            )
            raise InsufficientQuantityError(qty, available)

        payment = await self.payments.insert(
            Payment(
                booking_id=booking.id,
                email=booking.customer_email,
                price=booking.total_price,
                transaction_id=transaction_id,
            )
        )

        record_payment_confirmation("applied")
        logger.info(
            "payment_confirmed",
            booking_id=booking_id,
            payment_id=payment.id,
            ticket_id=booking.ticket_id,
            qty=booking.booking_qty,
            amount=booking.total_price,
        )
        return payment

    async def _lock_advertisements(self) -> None:
        if self.session.get_bind().dialect.name == "postgresql":
            await self.session.execute(select(func.pg_advisory_xact_lock(ADVERTISE_LOCK_KEY)))

    async def toggle_advertise(self, ticket_id: int, on: bool) -> int:
        """Set the advertised flag. Returns the advertised count after the write."""
        ticket = await self.tickets.get(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket {ticket_id} not found")

        if on:
            await self._lock_advertisements()
            if not await self.tickets.advertise_within_cap(ticket_id, self.advertise_limit):
                record_advertise_toggle("limit_reached")
                logger.info("advertise_limit_reached", ticket_id=ticket_id, limit=self.advertise_limit)
                raise LimitReachedError()
        else:
            await self.tickets.set_advertised(ticket_id, False)

        count = await self.tickets.count_advertised()
        record_advertise_toggle("on" if on else "off")
        logger.info("advertise_toggled", ticket_id=ticket_id, advertised=on, count=count)
        return count

    async def taken_seats(self, ticket_id: int) -> list[str]:
        ticket = await self.tickets.get(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        return await self.bookings.held_seats(ticket_id)
