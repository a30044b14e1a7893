"""
Ticket CRUD for vendors and moderation for admins.
"""

from ticketbari.core.errors import AuthorizationError, NotFoundError
from ticketbari.core.logging import get_logger
from ticketbari.core.security import Identity
from ticketbari.models.enums import VerificationStatus
from ticketbari.models.ticket import Ticket
from ticketbari.repositories.booking_store import BookingStore
from ticketbari.repositories.ticket_store import TicketStore
from ticketbari.schemas.ticket import TicketCreate, TicketUpdate

logger = get_logger(__name__)


class TicketService:
    def __init__(self, tickets: TicketStore, bookings: BookingStore):
        self.tickets = tickets
        self.bookings = bookings

    async def get(self, ticket_id: int) -> Ticket:
        ticket = await self.tickets.get(ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    async def search(self, page: int, page_size: int, **filters) -> tuple[list[Ticket], int]:
        return await self.tickets.search(page=page, page_size=page_size, **filters)

    async def advertised(self, limit: int) -> list[Ticket]:
        return await self.tickets.list_advertised(limit)

    async def by_vendor(self, email: str) -> list[Ticket]:
        return await self.tickets.list_by_vendor(email)

    async def create(self, identity: Identity, data: TicketCreate) -> Ticket:
        """New tickets start pending verification and not advertised."""
        ticket = Ticket(
            vendor_email=identity.email,
            vendor_name=data.vendor_name or identity.claims.get("name"),
            title=data.title,
            origin=data.origin,
            destination=data.destination,
            transport_type=data.transport_type,
            price=data.price,
            quantity=data.quantity,
            departure_date=data.departure_date,
            perks=data.perks,
            photo=data.photo,
            verification_status=VerificationStatus.PENDING.value,
            is_advertised=False,
        )
        ticket = await self.tickets.insert(ticket)
        logger.info("ticket_created", ticket_id=ticket.id, vendor=identity.email, quantity=ticket.quantity)
        return ticket

    async def _owned(self, identity: Identity, ticket_id: int, is_admin: bool = False) -> Ticket:
        ticket = await self.get(ticket_id)
        if ticket.vendor_email != identity.email and not is_admin:
            raise AuthorizationError("Ticket belongs to another vendor")
        return ticket

    async def update(self, identity: Identity, ticket_id: int, data: TicketUpdate) -> Ticket:
        ticket = await self._owned(identity, ticket_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "photo"
        }
        ticket = await self.tickets.apply_changes(ticket, changes)
        logger.info("ticket_updated", ticket_id=ticket_id, fields=sorted(changes))
        return ticket

    async def delete(self, identity: Identity, ticket_id: int, is_admin: bool = False) -> int:
        await self._owned(identity, ticket_id, is_admin=is_admin)
        released = await self.bookings.release_ticket_seats(ticket_id)
        deleted = await self.tickets.delete(ticket_id)
        logger.info("ticket_deleted", ticket_id=ticket_id, seats_released=released)
        return deleted

    async def set_status(self, ticket_id: int, status: VerificationStatus) -> Ticket:
        await self.get(ticket_id)
        await self.tickets.set_verification_status(ticket_id, status.value)
        logger.info("ticket_status_changed", ticket_id=ticket_id, status=status.value)
        return await self.get(ticket_id)
