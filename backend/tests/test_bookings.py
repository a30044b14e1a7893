"""
Tests for seat reservation, vendor decisions and cancellation,
including the concurrent seat-claim path.
"""

import pytest
from httpx import AsyncClient

from ticketbari.core.errors import SeatConflictError
from ticketbari.models.booking import Booking
from ticketbari.models.ticket import Ticket
from ticketbari.repositories import BookingStore, PaymentStore, TicketStore
from ticketbari.services.inventory_ledger import InventoryLedger
from tests.conftest import (
    ADMIN_EMAIL,
    CUSTOMER_EMAIL,
    OTHER_CUSTOMER_EMAIL,
    OTHER_VENDOR_EMAIL,
    VENDOR_EMAIL,
    fetch,
    headers_for,
    make_ticket,
)


async def reserve(client: AsyncClient, ticket_id: int, seats: list, email: str = CUSTOMER_EMAIL, **extra):
    return await client.post(
        "/bookings",
        json={"ticketId": ticket_id, "seatNumbers": seats, **extra},
        headers=headers_for(email),
    )


@pytest.mark.asyncio
async def test_reserve_seats(client: AsyncClient, ticket, customer, session_factory):
    """A reservation is pending and priced from the ticket; quantity is untouched."""
    response = await reserve(client, ticket.id, ["1", "2"])
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["seatNumbers"] == ["1", "2"]
    assert data["bookingQty"] == 2
    assert data["unitPrice"] == 50.0
    assert data["totalPrice"] == 100.0
    assert data["ticketTitle"] == ticket.title
    assert data["vendorEmail"] == VENDOR_EMAIL
    assert data["customerEmail"] == CUSTOMER_EMAIL

    assert (await fetch(session_factory, Ticket, ticket.id)).quantity == 10

    response = await client.get(f"/tickets/taken-seats/{ticket.id}")
    assert response.json() == {"ticketId": ticket.id, "seats": ["1", "2"]}


@pytest.mark.asyncio
async def test_numeric_seats_are_accepted(client: AsyncClient, ticket, customer):
    response = await reserve(client, ticket.id, [3, 4])
    assert response.status_code == 201
    assert response.json()["seatNumbers"] == ["3", "4"]


@pytest.mark.asyncio
async def test_reserve_unauthenticated(client: AsyncClient, ticket):
    response = await client.post("/bookings", json={"ticketId": ticket.id, "seatNumbers": ["1"]})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_seat_conflict(client: AsyncClient, ticket, customer, other_customer):
    """Seat 2 can be held by one booking only."""
    response = await reserve(client, ticket.id, ["1", "2"])
    assert response.status_code == 201

    response = await reserve(client, ticket.id, ["2", "3"], email=OTHER_CUSTOMER_EMAIL)
    assert response.status_code == 409
    assert response.json()["detail"] == "Seats already taken: 2"

    response = await reserve(client, ticket.id, ["3"], email=OTHER_CUSTOMER_EMAIL)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_quantity_must_match_seats(client: AsyncClient, ticket, customer):
    response = await reserve(client, ticket.id, ["1", "2"], bookingQty=3)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_seats_rejected(client: AsyncClient, ticket, customer):
    response = await reserve(client, ticket.id, ["4", "4"])
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_empty_seats_rejected(client: AsyncClient, ticket, customer):
    response = await reserve(client, ticket.id, [])
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_seat_label_length(client: AsyncClient, ticket, customer):
    """Seat labels longer than the claim column are refused before reaching the database."""
    response = await reserve(client, ticket.id, ["A" * 33])
    assert response.status_code == 422

    response = await reserve(client, ticket.id, ["   "])
    assert response.status_code == 422

    response = await reserve(client, ticket.id, ["A" * 32])
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_more_seats_than_quantity(client: AsyncClient, db_session, vendor, customer):
    small = await make_ticket(db_session, quantity=2)
    response = await reserve(client, small.id, ["1", "2", "3"])
    assert response.status_code == 409
    assert response.json()["detail"] == "Not enough tickets. Requested: 3, Available: 2"


@pytest.mark.asyncio
async def test_reserve_missing_ticket(client: AsyncClient, customer):
    response = await reserve(client, 9999, ["1"])
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reserve_rejected_ticket(client: AsyncClient, db_session, vendor, customer):
    rejected = await make_ticket(db_session, status="rejected")
    response = await reserve(client, rejected.id, ["1"])
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_lost_race_for_seat(session_factory, ticket, monkeypatch):
    """
    When another booking claims the seat between the pre-check and the
    insert, the unique claim makes the second insert fail as a conflict.
    """
    async with session_factory() as session:
        ledger = InventoryLedger(session, TicketStore(session), BookingStore(session), PaymentStore(session))
        await ledger.reserve_seats(OTHER_CUSTOMER_EMAIL, ticket.id, ["5"], 1)
        await session.commit()

    async with session_factory() as session:
        bookings = BookingStore(session)
        ledger = InventoryLedger(session, TicketStore(session), bookings, PaymentStore(session))

        original = bookings.held_seats
        calls = []

        async def stale_held_seats(ticket_id, seats=None):
            calls.append(seats)
            if len(calls) == 1:
                return []
            return await original(ticket_id, seats)

        monkeypatch.setattr(bookings, "held_seats", stale_held_seats)

        with pytest.raises(SeatConflictError) as exc_info:
            await ledger.reserve_seats(CUSTOMER_EMAIL, ticket.id, ["5", "6"], 2)
        assert exc_info.value.seats == ["5"]
        assert exc_info.value.status_code == 409

    async with session_factory() as session:
        bookings = await BookingStore(session).list_by_customer(CUSTOMER_EMAIL)
        assert bookings == []


@pytest.mark.asyncio
async def test_customer_bookings(client: AsyncClient, ticket, customer, other_customer, admin):
    await reserve(client, ticket.id, ["1"])
    await reserve(client, ticket.id, ["2"], email=OTHER_CUSTOMER_EMAIL)

    response = await client.get("/bookings", params={"email": CUSTOMER_EMAIL}, headers=headers_for(CUSTOMER_EMAIL))
    assert response.status_code == 200
    assert [b["seatNumbers"] for b in response.json()] == [["1"]]

    response = await client.get("/bookings", headers=headers_for(CUSTOMER_EMAIL))
    assert response.json() == []

    response = await client.get("/bookings", params={"email": CUSTOMER_EMAIL}, headers=headers_for(OTHER_CUSTOMER_EMAIL))
    assert response.status_code == 403

    response = await client.get("/bookings", params={"email": CUSTOMER_EMAIL}, headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_vendor_bookings(client: AsyncClient, ticket, customer, other_vendor):
    await reserve(client, ticket.id, ["1"])

    response = await client.get("/bookings/vendor", params={"email": VENDOR_EMAIL}, headers=headers_for(VENDOR_EMAIL))
    assert response.status_code == 200
    assert len(response.json()) == 1

    response = await client.get("/bookings/vendor", params={"email": VENDOR_EMAIL}, headers=headers_for(OTHER_VENDOR_EMAIL))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_vendor_approves(client: AsyncClient, ticket, customer):
    booking = (await reserve(client, ticket.id, ["1"])).json()

    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "approved"}, headers=headers_for(VENDOR_EMAIL)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    # Decisions are final
    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "rejected"}, headers=headers_for(VENDOR_EMAIL)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_rejection_releases_seats(client: AsyncClient, ticket, customer, other_customer, session_factory):
    booking = (await reserve(client, ticket.id, ["1", "2"])).json()

    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "rejected"}, headers=headers_for(VENDOR_EMAIL)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"

    response = await client.get(f"/tickets/taken-seats/{ticket.id}")
    assert response.json()["seats"] == []

    response = await reserve(client, ticket.id, ["2"], email=OTHER_CUSTOMER_EMAIL)
    assert response.status_code == 201
    assert (await fetch(session_factory, Ticket, ticket.id)).quantity == 10


@pytest.mark.asyncio
async def test_only_owning_vendor_decides(client: AsyncClient, ticket, customer, other_vendor, admin):
    booking = (await reserve(client, ticket.id, ["1"])).json()

    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "approved"}, headers=headers_for(OTHER_VENDOR_EMAIL)
    )
    assert response.status_code == 403

    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "approved"}, headers=headers_for(CUSTOMER_EMAIL)
    )
    assert response.status_code == 403

    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "approved"}, headers=headers_for(ADMIN_EMAIL)
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_decision_must_be_approve_or_reject(client: AsyncClient, ticket, customer):
    booking = (await reserve(client, ticket.id, ["1"])).json()
    response = await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "paid"}, headers=headers_for(VENDOR_EMAIL)
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_cancel_pending(client: AsyncClient, ticket, customer, session_factory):
    booking = (await reserve(client, ticket.id, ["7"])).json()

    response = await client.delete(f"/bookings/{booking['id']}", headers=headers_for(CUSTOMER_EMAIL))
    assert response.status_code == 200
    assert response.json() == {
        "message": "Booking cancelled successfully",
        "bookingId": booking["id"],
        "deletedCount": 1,
    }

    assert await fetch(session_factory, Booking, booking["id"]) is None
    response = await client.get(f"/tickets/taken-seats/{ticket.id}")
    assert response.json()["seats"] == []


@pytest.mark.asyncio
async def test_cancel_after_vendor_acted(client: AsyncClient, ticket, customer):
    booking = (await reserve(client, ticket.id, ["7"])).json()
    await client.patch(
        f"/bookings/status/{booking['id']}", json={"status": "approved"}, headers=headers_for(VENDOR_EMAIL)
    )

    response = await client.delete(f"/bookings/{booking['id']}", headers=headers_for(CUSTOMER_EMAIL))
    assert response.status_code == 403
    assert response.json()["detail"] == "Cannot cancel: vendor already acted or payment completed"


@pytest.mark.asyncio
async def test_cancel_someone_elses_booking(client: AsyncClient, ticket, customer, other_customer):
    booking = (await reserve(client, ticket.id, ["7"])).json()
    response = await client.delete(f"/bookings/{booking['id']}", headers=headers_for(OTHER_CUSTOMER_EMAIL))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cancel_missing_booking(client: AsyncClient, customer):
    response = await client.delete("/bookings/9999", headers=headers_for(CUSTOMER_EMAIL))
    assert response.status_code == 404
