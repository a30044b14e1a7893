"""
Response schemas for the reporting endpoints.
"""

from ticketbari.schemas.base import CamelModel


class ChartPoint(CamelModel):
    name: str
    value: float


class VendorStats(CamelModel):
    total_tickets: int
    total_bookings: int
    total_revenue: float
    chart_data: list[ChartPoint]


class AdminStats(CamelModel):
    total_users: int
    total_tickets: int
    tickets_by_status: dict[str, int]
    users_by_role: dict[str, int]
    advertised_count: int
    advertise_limit: int


class MonthlySpending(CamelModel):
    year: int
    month: int
    label: str
    amount: float


class UserStats(CamelModel):
    total_bookings: int
    total_spent: float
    bookings_by_status: dict[str, int]
    monthly_spending: list[MonthlySpending]
