from ticketbari.models.user import User
from ticketbari.models.ticket import Ticket
from ticketbari.models.booking import Booking, BookingSeat
from ticketbari.models.payment import Payment

__all__ = ["User", "Ticket", "Booking", "BookingSeat", "Payment"]
