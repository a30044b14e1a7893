"""
Account and role management, including the fraud cascade.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ticketbari.core.errors import NotFoundError
from ticketbari.core.logging import get_logger
from ticketbari.models.enums import Role
from ticketbari.models.user import User
from ticketbari.repositories.ticket_store import TicketStore
from ticketbari.repositories.user_store import UserStore
from ticketbari.schemas.user import UserCreate

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: AsyncSession, users: UserStore, tickets: TicketStore):
        self.session = session
        self.users = users
        self.tickets = tickets

    async def register(self, data: UserCreate) -> tuple[User, bool]:
        """Idempotent first-sign-in insert keyed by email."""
        user, created = await self.users.insert_if_absent(str(data.email), data.name, data.photo)
        if created:
            logger.info("user_registered", user_id=user.id, email=user.email)
        return user, created

    async def role_for_email(self, email: str) -> str:
        user = await self.users.find_by_email(email)
        return user.role if user else Role.USER.value

    async def list_users(self) -> list[User]:
        return await self.users.list_all()

    async def _load(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def set_role(self, user_id: int, role: Role) -> User:
        if role == Role.FRAUD:
            await self.mark_fraud(user_id)
            return await self._load(user_id)

        await self._load(user_id)
        modified = await self.users.set_role(user_id, role.value)
        logger.info("user_role_changed", user_id=user_id, role=role.value, modified=modified)
        return await self._load(user_id)

    async def mark_fraud(self, user_id: int) -> tuple[int, int]:
        """
        Flag an account as fraud and pull every ticket it sells.
        Returns (users modified, tickets modified). Existing bookings are
        left as they are.
        """
        user = await self._load(user_id)
        user_modified = await self.users.set_role(user_id, Role.FRAUD.value)
        tickets_modified = await self.tickets.reject_vendor_tickets(user.email)
        logger.warning(
            "vendor_marked_fraud",
            user_id=user_id,
            email=user.email,
            tickets_rejected=tickets_modified,
        )
        return user_modified, tickets_modified
