"""
Read-only dashboards for vendors, admins and customers.

Vendor chart data is grouped by ticket title, not ticket id: two tickets
that share a title show up as one bar. Month labels are fixed English
abbreviations so the output does not depend on the server locale.
"""

from collections import OrderedDict

from ticketbari.models.enums import BookingStatus, Role, VerificationStatus
from ticketbari.repositories.booking_store import BookingStore
from ticketbari.repositories.payment_store import PaymentStore
from ticketbari.repositories.ticket_store import TicketStore
from ticketbari.repositories.user_store import UserStore
from ticketbari.schemas.stats import AdminStats, ChartPoint, MonthlySpending, UserStats, VendorStats

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class StatsService:
    def __init__(
        self,
        users: UserStore,
        tickets: TicketStore,
        bookings: BookingStore,
        payments: PaymentStore,
        advertise_limit: int = 6,
    ):
        self.users = users
        self.tickets = tickets
        self.bookings = bookings
        self.payments = payments
        self.advertise_limit = advertise_limit

    async def vendor_stats(self, email: str) -> VendorStats:
        tickets = await self.tickets.list_by_vendor(email)
        bookings = await self.bookings.list_by_vendor(email)

        paid = [b for b in reversed(bookings) if b.status == BookingStatus.PAID.value]
        revenue_by_title: OrderedDict[str, float] = OrderedDict()
        for booking in paid:
            revenue_by_title[booking.ticket_title] = (
                revenue_by_title.get(booking.ticket_title, 0.0) + booking.total_price
            )

        return VendorStats(
            total_tickets=len(tickets),
            total_bookings=len(bookings),
            total_revenue=round(sum(b.total_price for b in paid), 2),
            chart_data=[
                ChartPoint(name=title, value=round(value, 2))
                for title, value in revenue_by_title.items()
            ],
        )

    async def admin_stats(self) -> AdminStats:
        by_status = await self.tickets.count_by_status()
        by_role = await self.users.count_by_role()
        return AdminStats(
            total_users=await self.users.count(),
            total_tickets=await self.tickets.count(),
            tickets_by_status={s.value: by_status.get(s.value, 0) for s in VerificationStatus},
            users_by_role={r.value: by_role.get(r.value, 0) for r in Role},
            advertised_count=await self.tickets.count_advertised(),
            advertise_limit=self.advertise_limit,
        )

    async def user_stats(self, email: str) -> UserStats:
        by_status = await self.bookings.count_by_status_for_customer(email)
        payments = await self.payments.list_by_email(email)

        monthly: dict[tuple[int, int], float] = {}
        for payment in payments:
            key = (payment.date.year, payment.date.month)
            monthly[key] = monthly.get(key, 0.0) + payment.price

        return UserStats(
            total_bookings=sum(by_status.values()),
            total_spent=round(sum(p.price for p in payments), 2),
            bookings_by_status={s.value: by_status.get(s.value, 0) for s in BookingStatus},
            monthly_spending=[
                MonthlySpending(
                    year=year,
                    month=month,
                    label=MONTH_LABELS[month - 1],
                    amount=round(amount, 2),
                )
                for (year, month), amount in sorted(monthly.items())
            ],
        )
