from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticketbari.models.payment import Payment


class PaymentStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def list_by_email(self, email: str) -> list[Payment]:
        result = await self.session.execute(
            select(Payment).where(Payment.email == email.lower()).order_by(Payment.date.asc())
        )
        return list(result.scalars().all())
