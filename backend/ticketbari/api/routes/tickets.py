"""
Ticket endpoints. Public listings are cached in Redis; seat maps and
single-ticket reads always hit the database.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from ticketbari.api.dependencies import (
    get_current_identity,
    get_guard,
    get_ledger,
    get_ticket_service,
    require_admin,
    require_vendor,
    require_vendor_or_admin,
)
from ticketbari.core.config import get_settings
from ticketbari.core.logging import get_logger
from ticketbari.core.security import Identity
from ticketbari.models.enums import Role, VerificationStatus
from ticketbari.schemas.ticket import (
    AdvertiseResult,
    AdvertiseUpdate,
    DeleteResult,
    TakenSeatsResponse,
    TicketCreate,
    TicketListResponse,
    TicketResponse,
    TicketStatusUpdate,
    TicketUpdate,
)
from ticketbari.services.auth_service import AuthorizationGuard
from ticketbari.services.cache_service import (
    get_cached_tickets,
    invalidate_ticket_cache,
    make_ticket_list_key,
    set_cached_tickets,
)
from ticketbari.services.inventory_ledger import InventoryLedger
from ticketbari.services.ticket_service import TicketService

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.get("", response_model=TicketListResponse)
async def list_tickets(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    origin: Optional[str] = Query(None, alias="from"),
    destination: Optional[str] = Query(None, alias="to"),
    transport_type: Optional[str] = Query(None, alias="transportType"),
    verification: Optional[VerificationStatus] = Query(None, alias="status"),
    sort: Literal["newest", "price_asc", "price_desc", "departure"] = Query("newest"),
    tickets: TicketService = Depends(get_ticket_service),
):
    """
    List tickets with filtering, sorting and pagination.
    Results are cached until the next ticket or inventory change.
    """
    key = make_ticket_list_key(
        page=page,
        size=page_size,
        origin=origin,
        destination=destination,
        transport=transport_type,
        status=verification.value if verification else None,
        sort=sort,
    )
    cached = await get_cached_tickets(key)
    if cached:
        logger.info("tickets_list_cache_hit", page=page)
        cached["cached"] = True
        return TicketListResponse.model_validate(cached)

    items, total = await tickets.search(
        page,
        page_size,
        origin=origin,
        destination=destination,
        transport_type=transport_type,
        status=verification.value if verification else None,
        sort=sort,
    )
    response = TicketListResponse(
        tickets=[TicketResponse.model_validate(t) for t in items],
        total=total,
        page=page,
        page_size=page_size,
        cached=False,
    )
    await set_cached_tickets(key, response.model_dump(mode="json", by_alias=True))
    return response


@router.get("/advertised", response_model=list[TicketResponse])
async def advertised_tickets(tickets: TicketService = Depends(get_ticket_service)):
    """Homepage promotions, at most the advertisement limit."""
    return await tickets.advertised(get_settings().ADVERTISE_LIMIT)


@router.get("/vendor/{email}", response_model=list[TicketResponse])
async def vendor_tickets(
    email: str,
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    tickets: TicketService = Depends(get_ticket_service),
):
    await guard.ensure_self(identity, email)
    return await tickets.by_vendor(email)


@router.get("/taken-seats/{ticket_id}", response_model=TakenSeatsResponse)
async def taken_seats(ticket_id: int, ledger: InventoryLedger = Depends(get_ledger)):
    """Seats held by pending, approved or paid bookings."""
    return TakenSeatsResponse(ticket_id=ticket_id, seats=await ledger.taken_seats(ticket_id))


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: int, tickets: TicketService = Depends(get_ticket_service)):
    return await tickets.get(ticket_id)


@router.post("", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    data: TicketCreate,
    identity: Identity = Depends(require_vendor),
    tickets: TicketService = Depends(get_ticket_service),
):
    """Vendors add tickets; they start pending admin verification."""
    ticket = await tickets.create(identity, data)
    await invalidate_ticket_cache()
    return ticket


@router.patch("/status/{ticket_id}", response_model=TicketResponse)
async def set_ticket_status(
    ticket_id: int,
    data: TicketStatusUpdate,
    _: Identity = Depends(require_admin),
    tickets: TicketService = Depends(get_ticket_service),
):
    ticket = await tickets.set_status(ticket_id, data.status)
    await invalidate_ticket_cache()
    return ticket


@router.patch("/advertise/{ticket_id}", response_model=AdvertiseResult)
async def toggle_advertise(
    ticket_id: int,
    data: AdvertiseUpdate,
    _: Identity = Depends(require_admin),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """Toggle homepage promotion. Fails with `limit_reached` once the cap is hit."""
    count = await ledger.toggle_advertise(ticket_id, data.is_advertised)
    await invalidate_ticket_cache()
    return AdvertiseResult(
        ticket_id=ticket_id,
        is_advertised=data.is_advertised,
        advertised_count=count,
        advertise_limit=ledger.advertise_limit,
    )


@router.patch("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(
    ticket_id: int,
    data: TicketUpdate,
    identity: Identity = Depends(require_vendor),
    tickets: TicketService = Depends(get_ticket_service),
):
    ticket = await tickets.update(identity, ticket_id, data)
    await invalidate_ticket_cache()
    return ticket


@router.delete("/{ticket_id}", response_model=DeleteResult)
async def delete_ticket(
    ticket_id: int,
    identity: Identity = Depends(require_vendor_or_admin),
    guard: AuthorizationGuard = Depends(get_guard),
    tickets: TicketService = Depends(get_ticket_service),
):
    is_admin = await guard.role_of(identity) == Role.ADMIN.value
    deleted = await tickets.delete(identity, ticket_id, is_admin=is_admin)
    await invalidate_ticket_cache()
    return DeleteResult(deleted_count=deleted)
