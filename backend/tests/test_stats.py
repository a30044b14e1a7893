"""
Tests for the vendor, admin and customer dashboards.
"""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from ticketbari.models.booking import Booking
from ticketbari.models.payment import Payment
from tests.conftest import (
    ADMIN_EMAIL,
    CUSTOMER_EMAIL,
    OTHER_CUSTOMER_EMAIL,
    OTHER_VENDOR_EMAIL,
    VENDOR_EMAIL,
    headers_for,
    make_ticket,
)


def booking_for(ticket, status: str, qty: int = 1, email: str = CUSTOMER_EMAIL) -> Booking:
    return Booking(
        ticket_id=ticket.id,
        ticket_title=ticket.title,
        customer_email=email,
        vendor_email=ticket.vendor_email,
        seat_numbers=[str(n) for n in range(1, qty + 1)],
        booking_qty=qty,
        unit_price=ticket.price,
        total_price=ticket.price * qty,
        status=status,
    )


@pytest.mark.asyncio
async def test_vendor_stats(client: AsyncClient, db_session, vendor):
    """Revenue is charted per ticket title; same-titled tickets share a bar."""
    express = await make_ticket(db_session, title="Express", price=50.0)
    express_again = await make_ticket(db_session, title="Express", price=25.0)
    local = await make_ticket(db_session, title="Local", price=30.0)

    db_session.add_all([
        booking_for(express, "paid", qty=2),
        booking_for(express_again, "paid"),
        booking_for(local, "paid"),
        booking_for(local, "pending"),
    ])
    await db_session.commit()

    response = await client.get(f"/vendor-stats/{VENDOR_EMAIL}", headers=headers_for(VENDOR_EMAIL))
    assert response.status_code == 200
    assert response.json() == {
        "totalTickets": 3,
        "totalBookings": 4,
        "totalRevenue": 155.0,
        "chartData": [
            {"name": "Express", "value": 125.0},
            {"name": "Local", "value": 30.0},
        ],
    }


@pytest.mark.asyncio
async def test_vendor_stats_empty(client: AsyncClient, vendor):
    response = await client.get(f"/vendor-stats/{VENDOR_EMAIL}", headers=headers_for(VENDOR_EMAIL))
    assert response.json() == {"totalTickets": 0, "totalBookings": 0, "totalRevenue": 0.0, "chartData": []}


@pytest.mark.asyncio
async def test_vendor_stats_forbidden_for_others(client: AsyncClient, vendor, other_vendor):
    response = await client.get(f"/vendor-stats/{VENDOR_EMAIL}", headers=headers_for(OTHER_VENDOR_EMAIL))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_stats(client: AsyncClient, db_session, admin, vendor, customer):
    await make_ticket(db_session, title="A", advertised=True)
    await make_ticket(db_session, title="B", status="pending")
    await make_ticket(db_session, title="C", status="rejected")

    response = await client.get("/admin-stats", headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200
    assert response.json() == {
        "totalUsers": 3,
        "totalTickets": 3,
        "ticketsByStatus": {"pending": 1, "approved": 1, "rejected": 1},
        "usersByRole": {"user": 1, "vendor": 1, "admin": 1, "fraud": 0},
        "advertisedCount": 1,
        "advertiseLimit": 6,
    }


@pytest.mark.asyncio
async def test_user_stats(client: AsyncClient, db_session, vendor, customer):
    """Monthly spending is bucketed by calendar month in chronological order."""
    ticket = await make_ticket(db_session, price=10.0)
    paid_a = booking_for(ticket, "paid", qty=2)
    paid_b = booking_for(ticket, "paid", qty=3)
    paid_c = booking_for(ticket, "paid", qty=1)
    db_session.add_all([paid_a, paid_b, paid_c, booking_for(ticket, "pending")])
    await db_session.flush()

    db_session.add_all([
        Payment(booking_id=paid_a.id, email=CUSTOMER_EMAIL, price=20.0,
                date=datetime(2026, 1, 10, tzinfo=timezone.utc)),
        Payment(booking_id=paid_b.id, email=CUSTOMER_EMAIL, price=30.0,
                date=datetime(2025, 11, 3, tzinfo=timezone.utc)),
        Payment(booking_id=paid_c.id, email=CUSTOMER_EMAIL, price=10.0,
                date=datetime(2025, 11, 20, tzinfo=timezone.utc)),
    ])
    await db_session.commit()

    response = await client.get(f"/user-stats/{CUSTOMER_EMAIL}", headers=headers_for(CUSTOMER_EMAIL))
    assert response.status_code == 200
    assert response.json() == {
        "totalBookings": 4,
        "totalSpent": 60.0,
        "bookingsByStatus": {"pending": 1, "approved": 0, "rejected": 0, "paid": 3},
        "monthlySpending": [
            {"year": 2025, "month": 11, "label": "Nov", "amount": 40.0},
            {"year": 2026, "month": 1, "label": "Jan", "amount": 20.0},
        ],
    }


@pytest.mark.asyncio
async def test_user_stats_forbidden_for_others(client: AsyncClient, customer, other_customer, admin):
    response = await client.get(f"/user-stats/{CUSTOMER_EMAIL}", headers=headers_for(OTHER_CUSTOMER_EMAIL))
    assert response.status_code == 403

    response = await client.get(f"/user-stats/{CUSTOMER_EMAIL}", headers=headers_for(ADMIN_EMAIL))
    assert response.status_code == 200
