from typing import Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbari.models.booking import Booking, BookingSeat


class BookingStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, booking_id: int) -> Optional[Booking]:
        result = await self.session.execute(
            select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_customer(self, email: str) -> list[Booking]:
        result = await self.session.execute(
            select(Booking).where(Booking.customer_email == email.lower()).order_by(Booking.id.desc())
        )
        return list(result.scalars().all())

    async def list_by_vendor(self, email: str) -> list[Booking]:
        result = await self.session.execute(
            select(Booking).where(Booking.vendor_email == email.lower()).order_by(Booking.id.desc())
        )
        return list(result.scalars().all())

    async def held_seats(self, ticket_id: int, seats: Optional[list[str]] = None) -> list[str]:
        """Seats claimed by non-rejected bookings, optionally restricted to `seats`."""
        query = select(BookingSeat.seat_number).where(BookingSeat.ticket_id == ticket_id)
        if seats is not None:
            query = query.where(BookingSeat.seat_number.in_(seats))
        result = await self.session.execute(query.order_by(BookingSeat.seat_number))
        return list(result.scalars().all())

    async def insert_with_claims(self, booking: Booking) -> Booking:
        """
        Insert the booking and one claim row per seat in the same flush.
        Raises IntegrityError if another booking holds any of the seats.
        """
        booking.seats = [
            BookingSeat(ticket_id=booking.ticket_id, seat_number=seat)
            for seat in booking.seat_numbers
        ]
        self.session.add(booking)
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def transition(self, booking_id: int, from_status: str, to_status: str) -> int:
        """Conditional status flip. Returns 0 if the booking was not in `from_status`."""
        result = await self.session.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == from_status)
            .values(status=to_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def release_seats(self, booking_id: int) -> int:
        result = await self.session.execute(
            delete(BookingSeat).where(BookingSeat.booking_id == booking_id)
        )
        return result.rowcount

    async def release_ticket_seats(self, ticket_id: int) -> int:
        result = await self.session.execute(
            delete(BookingSeat).where(BookingSeat.ticket_id == ticket_id)
        )
        return result.rowcount

    async def delete_if_status(self, booking_id: int, status: str) -> int:
        result = await self.session.execute(
            delete(Booking)
            .where(Booking.id == booking_id, Booking.status == status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            await self.release_seats(booking_id)
        return result.rowcount

    async def count_by_status_for_customer(self, email: str) -> dict[str, int]:
        result = await self.session.execute(
            select(Booking.status, func.count())
            .where(Booking.customer_email == email.lower())
            .group_by(Booking.status)
        )
        return {status: count for status, count in result.all()}
