from ticketbari.schemas.user import UserCreate, UserResponse, RoleResponse, RoleUpdate, FraudResult
from ticketbari.schemas.ticket import TicketCreate, TicketUpdate, TicketResponse, TicketListResponse
from ticketbari.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from ticketbari.schemas.payment import PaymentIntentCreate, PaymentCreate, PaymentResponse
from ticketbari.schemas.stats import VendorStats, AdminStats, UserStats

__all__ = [
    "UserCreate", "UserResponse", "RoleResponse", "RoleUpdate", "FraudResult",
    "TicketCreate", "TicketUpdate", "TicketResponse", "TicketListResponse",
    "BookingCreate", "BookingResponse", "BookingStatusUpdate",
    "PaymentIntentCreate", "PaymentCreate", "PaymentResponse",
    "VendorStats", "AdminStats", "UserStats",
]
