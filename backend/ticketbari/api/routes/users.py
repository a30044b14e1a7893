"""
User endpoints: first sign-in, role lookup and admin role management.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ticketbari.api.dependencies import (
    get_current_identity,
    get_guard,
    get_user_service,
    require_admin,
)
from ticketbari.core.security import Identity
from ticketbari.services.auth_service import AuthorizationGuard
from ticketbari.services.cache_service import invalidate_ticket_cache
from ticketbari.services.user_service import UserService
from ticketbari.schemas.user import (
    FraudResult,
    RoleResponse,
    RoleUpdate,
    UserCreate,
    UserCreateResult,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserCreateResult)
async def save_user(
    data: UserCreate,
    response: Response,
    users: UserService = Depends(get_user_service),
):
    """Save a user on first sign-in. Repeated calls for the same email are no-ops."""
    user, created = await users.register(data)
    if not created:
        return UserCreateResult(message="user already exists", inserted_id=None)
    response.status_code = status.HTTP_201_CREATED
    return UserCreateResult(message="user created", inserted_id=user.id)


@router.get("", response_model=list[UserResponse])
async def list_users(
    _: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return await users.list_users()


@router.get("/role/{email}", response_model=RoleResponse)
async def get_role(
    email: str,
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    users: UserService = Depends(get_user_service),
):
    """Role of the signed-in user. Only the user themself may ask."""
    await guard.ensure_self(identity, email, allow_admin=False)
    return RoleResponse(role=await users.role_for_email(email))


@router.patch("/admin/{user_id}", response_model=UserResponse)
async def change_role(
    user_id: int,
    data: Optional[RoleUpdate] = None,
    _: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """Change a user's role (defaults to admin). Setting `fraud` runs the fraud cascade."""
    user = await users.set_role(user_id, (data or RoleUpdate()).role)
    await invalidate_ticket_cache()
    return user


@router.patch("/fraud/{user_id}", response_model=FraudResult)
async def mark_fraud(
    user_id: int,
    _: Identity = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    """Mark a vendor as fraud and reject all of their tickets."""
    user_modified, tickets_modified = await users.mark_fraud(user_id)
    await invalidate_ticket_cache()
    return FraudResult(user_modified=user_modified, tickets_modified=tickets_modified)
