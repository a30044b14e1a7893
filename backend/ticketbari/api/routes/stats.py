"""
Dashboard statistics for vendors, admins and customers.
"""

from fastapi import APIRouter, Depends

from ticketbari.api.dependencies import get_current_identity, get_guard, get_stats_service, require_admin
from ticketbari.core.security import Identity
from ticketbari.schemas.stats import AdminStats, UserStats, VendorStats
from ticketbari.services.auth_service import AuthorizationGuard
from ticketbari.services.stats_service import StatsService

router = APIRouter(tags=["Stats"])


@router.get("/vendor-stats/{email}", response_model=VendorStats)
async def vendor_stats(
    email: str,
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    stats: StatsService = Depends(get_stats_service),
):
    await guard.ensure_self(identity, email)
    return await stats.vendor_stats(email)


@router.get("/admin-stats", response_model=AdminStats)
async def admin_stats(
    _: Identity = Depends(require_admin),
    stats: StatsService = Depends(get_stats_service),
):
    return await stats.admin_stats()


@router.get("/user-stats/{email}", response_model=UserStats)
async def user_stats(
    email: str,
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    stats: StatsService = Depends(get_stats_service),
):
    await guard.ensure_self(identity, email)
    return await stats.user_stats(email)
