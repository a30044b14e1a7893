"""
Tests for first sign-in, role management and the fraud cascade.
"""

import pytest
from httpx import AsyncClient

from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User
from tests.conftest import ADMIN_EMAIL, VENDOR_EMAIL, fetch, headers_for, make_ticket


@pytest.mark.asyncio
async def test_save_user_is_idempotent(client: AsyncClient):
    """Second sign-in with the same email (any case) inserts nothing."""
    payload = {"email": "Carol@TicketBari.com", "name": "Carol", "photo": "https://img/c.png"}
    response = await client.post("/users", json=payload)
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "user created"
    assert isinstance(data["insertedId"], int)

    response = await client.post("/users", json={**payload, "email": "carol@ticketbari.com"})
    assert response.status_code == 200
    assert response.json() == {"message": "user already exists", "insertedId": None}


@pytest.mark.asyncio
async def test_save_user_rejects_bad_email(client: AsyncClient):
    response = await client.post("/users", json={"email": "not-an-email"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_users(client: AsyncClient, admin, vendor, customer):
    response = await client.get("/users", headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200
    emails = [u["email"] for u in response.json()]
    assert emails == [ADMIN_EMAIL, VENDOR_EMAIL, customer.email]


@pytest.mark.asyncio
async def test_make_admin_by_default(client: AsyncClient, admin, customer):
    """PATCH without a body promotes the user to admin."""
    response = await client.patch(f"/users/admin/{customer.id}", headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_set_vendor_role(client: AsyncClient, admin, customer):
    response = await client.patch(
        f"/users/admin/{customer.id}", json={"role": "vendor"}, headers=headers_for(ADMIN_EMAIL)
    )
    assert response.status_code == 200
    assert response.json()["role"] == "vendor"


@pytest.mark.asyncio
async def test_set_role_unknown_user(client: AsyncClient, admin):
    response = await client.patch(
        "/users/admin/9999", json={"role": "vendor"}, headers=headers_for(ADMIN_EMAIL)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_role_change_requires_admin(client: AsyncClient, vendor, customer):
    response = await client.patch(
        f"/users/admin/{customer.id}", json={"role": "admin"}, headers=headers_for(VENDOR_EMAIL)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_fraud_cascade(client: AsyncClient, db_session, session_factory, admin, vendor):
    """Marking a vendor fraud rejects and un-advertises every one of their tickets."""
    first = await make_ticket(db_session, title="Bus A", advertised=True)
    second = await make_ticket(db_session, title="Bus B", status="pending")
    third = await make_ticket(db_session, title="Train C")

    response = await client.patch(f"/users/fraud/{vendor.id}", headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200
    assert response.json() == {"userModified": 1, "ticketsModified": 3}

    assert (await fetch(session_factory, User, vendor.id)).role == "fraud"
    for ticket_id in (first.id, second.id, third.id):
        ticket = await fetch(session_factory, Ticket, ticket_id)
        assert ticket.verification_status == "rejected"
        assert ticket.is_advertised is False

    # Already fraud: the user row does not change again
    response = await client.patch(f"/users/fraud/{vendor.id}", headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200
    assert response.json()["userModified"] == 0


@pytest.mark.asyncio
async def test_fraud_through_role_endpoint(client: AsyncClient, db_session, session_factory, admin, vendor):
    ticket = await make_ticket(db_session)

    response = await client.patch(
        f"/users/admin/{vendor.id}", json={"role": "fraud"}, headers=headers_for(ADMIN_EMAIL)
    )
    assert response.status_code == 200
    assert response.json()["role"] == "fraud"
    assert (await fetch(session_factory, Ticket, ticket.id)).verification_status == "rejected"


@pytest.mark.asyncio
async def test_fraud_vendor_loses_vendor_powers(client: AsyncClient, admin, vendor):
    await client.patch(f"/users/fraud/{vendor.id}", headers=headers_for(ADMIN_EMAIL))

    response = await client.post(
        "/tickets",
        json={
            "title": "Night coach",
            "from": "Dhaka",
            "to": "Sylhet",
            "transportType": "bus",
            "price": 20,
            "quantity": 30,
            "departureDate": "2030-01-01T22:00:00Z",
        },
        headers=headers_for(VENDOR_EMAIL),
    )
    assert response.status_code == 403
