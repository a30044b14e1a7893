"""
FastAPI dependency wiring: sessions -> stores -> services, and the
identity/role checks applied in front of protected routes.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbari.core.config import get_settings
from ticketbari.core.security import Identity
from ticketbari.db.session import get_db
from ticketbari.models.enums import Role
from ticketbari.repositories import BookingStore, PaymentStore, TicketStore, UserStore
from ticketbari.services.auth_service import AuthorizationGuard
from ticketbari.services.booking_service import BookingLifecycleManager
from ticketbari.services.interfaces.identity import IdentityVerifier
from ticketbari.services.inventory_ledger import InventoryLedger
from ticketbari.services.stats_service import StatsService
from ticketbari.services.strategy_factory import get_identity_verifier
from ticketbari.services.ticket_service import TicketService
from ticketbari.services.user_service import UserService


def get_guard(
    db: AsyncSession = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AuthorizationGuard:
    return AuthorizationGuard(UserStore(db), verifier, get_settings())


def get_ledger(db: AsyncSession = Depends(get_db)) -> InventoryLedger:
    return InventoryLedger(
        db,
        TicketStore(db),
        BookingStore(db),
        PaymentStore(db),
        advertise_limit=get_settings().ADVERTISE_LIMIT,
    )


def get_lifecycle(db: AsyncSession = Depends(get_db)) -> BookingLifecycleManager:
    return BookingLifecycleManager(BookingStore(db))


def get_ticket_service(db: AsyncSession = Depends(get_db)) -> TicketService:
    return TicketService(TicketStore(db), BookingStore(db))


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db, UserStore(db), TicketStore(db))


def get_stats_service(db: AsyncSession = Depends(get_db)) -> StatsService:
    return StatsService(
        UserStore(db),
        TicketStore(db),
        BookingStore(db),
        PaymentStore(db),
        advertise_limit=get_settings().ADVERTISE_LIMIT,
    )


def get_booking_store(db: AsyncSession = Depends(get_db)) -> BookingStore:
    return BookingStore(db)


def get_payment_store(db: AsyncSession = Depends(get_db)) -> PaymentStore:
    return PaymentStore(db)


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    guard: AuthorizationGuard = Depends(get_guard),
) -> Identity:
    """Authenticated caller; mutating verbs are refused for the demo admin."""
    identity = guard.identify(authorization)
    structlog.contextvars.bind_contextvars(caller=identity.email)
    guard.ensure_writable(identity, request.method)
    return identity


class RoleChecker:
    """Dependency that admits only callers holding one of `roles`."""

    def __init__(self, *roles: Role):
        self.roles = roles

    async def __call__(
        self,
        request: Request,
        authorization: Optional[str] = Header(None),
        guard: AuthorizationGuard = Depends(get_guard),
    ) -> Identity:
        identity = guard.identify(authorization)
        structlog.contextvars.bind_contextvars(caller=identity.email)
        await guard.authorize(identity, *self.roles)
        guard.ensure_writable(identity, request.method)
        return identity


require_admin = RoleChecker(Role.ADMIN)
require_vendor = RoleChecker(Role.VENDOR)
require_vendor_or_admin = RoleChecker(Role.VENDOR, Role.ADMIN)
