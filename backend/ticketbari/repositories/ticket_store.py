from typing import Optional

from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from ticketbari.models.ticket import Ticket

SORT_ORDERS = {
    "price_asc": Ticket.price.asc(),
    "price_desc": Ticket.price.desc(),
    "departure": Ticket.departure_date.asc(),
    "newest": Ticket.id.desc(),
}


class TicketStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, ticket_id: int) -> Optional[Ticket]:
        result = await self.session.execute(
            select(Ticket).where(Ticket.id == ticket_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        page: int = 1,
        page_size: int = 20,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        transport_type: Optional[str] = None,
        status: Optional[str] = None,
        sort: str = "newest",
    ) -> tuple[list[Ticket], int]:
        query = select(Ticket)
        if origin:
            query = query.where(func.lower(Ticket.origin) == origin.lower())
        if destination:
            query = query.where(func.lower(Ticket.destination) == destination.lower())
        if transport_type:
            query = query.where(func.lower(Ticket.transport_type) == transport_type.lower())
        if status:
            query = query.where(Ticket.verification_status == status)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        result = await self.session.execute(
            query
            .order_by(SORT_ORDERS.get(sort, SORT_ORDERS["newest"]), Ticket.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total

    async def list_advertised(self, limit: int) -> list[Ticket]:
        result = await self.session.execute(
            select(Ticket).where(Ticket.is_advertised.is_(True)).order_by(Ticket.id.asc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_by_vendor(self, vendor_email: str) -> list[Ticket]:
        result = await self.session.execute(
            select(Ticket).where(Ticket.vendor_email == vendor_email.lower()).order_by(Ticket.id.asc())
        )
        return list(result.scalars().all())

    async def insert(self, ticket: Ticket) -> Ticket:
        self.session.add(ticket)
        await self.session.flush()
        await self.session.refresh(ticket)
        return ticket

    async def apply_changes(self, ticket: Ticket, changes: dict) -> Ticket:
        for field, value in changes.items():
            setattr(ticket, field, value)
        await self.session.flush()
        await self.session.refresh(ticket)
        return ticket

    async def delete(self, ticket_id: int) -> int:
        result = await self.session.execute(delete(Ticket).where(Ticket.id == ticket_id))
        return result.rowcount

    async def set_verification_status(self, ticket_id: int, status: str) -> int:
        values = {"verification_status": status}
        if status == "rejected":
            values["is_advertised"] = False
        result = await self.session.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def set_advertised(self, ticket_id: int, advertised: bool) -> int:
        result = await self.session.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id)
            .values(is_advertised=advertised)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def advertise_within_cap(self, ticket_id: int, limit: int) -> int:
        """
        Set the advertised flag only while fewer than `limit` tickets carry it.
        Count and write are one statement, so the write lock covers both.
        Returns 0 when the cap is reached.
        """
        others = aliased(Ticket)
        advertised = (
            select(func.count())
            .select_from(others)
            .where(others.is_advertised.is_(True))
            .scalar_subquery()
        )
        result = await self.session.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id, or_(Ticket.is_advertised.is_(True), advertised < limit))
            .values(is_advertised=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def count_advertised(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Ticket).where(Ticket.is_advertised.is_(True))
        )
        return result.scalar_one()

    async def reject_vendor_tickets(self, vendor_email: str) -> int:
        """Reject and un-advertise every ticket of a vendor. Returns rows matched."""
        result = await self.session.execute(
            update(Ticket)
            .where(Ticket.vendor_email == vendor_email.lower())
            .values(verification_status="rejected", is_advertised=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def decrement_quantity(self, ticket_id: int, qty: int) -> int:
        """Guarded decrement: touches the row only if enough quantity is left."""
        result = await self.session.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id, Ticket.quantity >= qty)
            .values(quantity=Ticket.quantity - qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def count(self) -> int:
        return (await self.session.execute(select(func.count()).select_from(Ticket))).scalar_one()

    async def count_by_status(self) -> dict[str, int]:
        result = await self.session.execute(
            select(Ticket.verification_status, func.count()).group_by(Ticket.verification_status)
        )
        return {status: count for status, count in result.all()}
