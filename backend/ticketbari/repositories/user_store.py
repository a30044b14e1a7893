from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbari.models.user import User


class UserStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.id.asc()))
        return list(result.scalars().all())

    async def insert_if_absent(
        self, email: str, name: Optional[str] = None, photo: Optional[str] = None
    ) -> tuple[User, bool]:
        """
        Insert a user keyed by email. Returns (user, created).
        A concurrent insert of the same email loses on the unique index
        and gets the winner's row back.
        """
        existing = await self.find_by_email(email)
        if existing:
            return existing, False

        user = User(email=email, name=name, photo=photo, role="user")
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.find_by_email(email)
            if existing is None:
                raise
            return existing, False

        await self.session.refresh(user)
        return user, True

    async def set_role(self, user_id: int, role: str) -> int:
        """Returns the number of rows whose role actually changed."""
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id, User.role != role)
            .values(role=role)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def count(self) -> int:
        return (await self.session.execute(select(func.count()).select_from(User))).scalar_one()

    async def count_by_role(self) -> dict[str, int]:
        result = await self.session.execute(
            select(User.role, func.count()).group_by(User.role)
        )
        return {role: count for role, count in result.all()}
