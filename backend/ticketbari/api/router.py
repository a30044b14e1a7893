"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from ticketbari.api.routes import users, tickets, bookings, payments, stats

api_router = APIRouter()
api_router.include_router(users.router)
api_router.include_router(tickets.router)
api_router.include_router(bookings.router)
api_router.include_router(payments.router)
api_router.include_router(stats.router)
