"""
Authorization guard.

Resolves the caller's identity from the bearer credential, derives the
caller's role from the users collection and gates privileged operations.
The demo admin rail runs after normal authorization: that identity may
read anything but every mutating verb is refused.
"""

from typing import Optional

from ticketbari.core.config import Settings
from ticketbari.core.errors import AuthenticationError, AuthorizationError
from ticketbari.core.logging import get_logger
from ticketbari.core.security import Identity, parse_bearer
from ticketbari.models.enums import Role
from ticketbari.repositories.user_store import UserStore
from ticketbari.services.interfaces.identity import IdentityVerifier

logger = get_logger(__name__)

READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class AuthorizationGuard:
    def __init__(self, users: UserStore, verifier: IdentityVerifier, settings: Settings):
        self.users = users
        self.verifier = verifier
        self.settings = settings

    def identify(self, authorization: Optional[str]) -> Identity:
        token = parse_bearer(authorization)
        if token is None:
            raise AuthenticationError()
        return self.verifier.verify(token)

    async def role_of(self, identity: Identity) -> str:
        user = await self.users.find_by_email(identity.email)
        return user.role if user else Role.USER.value

    async def authorize(self, identity: Identity, *roles: Role) -> str:
        """Return the caller's role, or raise 403 if it is not one of `roles`."""
        role = await self.role_of(identity)
        if role not in {r.value for r in roles}:
            logger.warning(
                "authorization_denied",
                email=identity.email,
                role=role,
                required=[r.value for r in roles],
            )
            raise AuthorizationError()
        return role

    async def ensure_self(self, identity: Identity, email: Optional[str], allow_admin: bool = True) -> None:
        """Self-service check: `email` must be the caller's own (admins may read anyone's)."""
        if email and email.strip().lower() == identity.email:
            return
        if allow_admin and await self.role_of(identity) == Role.ADMIN.value:
            return
        logger.warning("ownership_denied", email=identity.email, requested=email)
        raise AuthorizationError()

    def is_demo_admin(self, identity: Identity) -> bool:
        return identity.email == self.settings.DEMO_ADMIN_EMAIL.strip().lower()

    def ensure_writable(self, identity: Identity, method: str) -> None:
        if method.upper() not in READ_METHODS and self.is_demo_admin(identity):
            logger.warning("demo_admin_write_blocked", method=method)
            raise AuthorizationError("Demo admin is read-only")
