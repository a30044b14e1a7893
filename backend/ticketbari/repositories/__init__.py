"""
Data-access layer. Each store wraps one collection and is constructed
with the request's session; callers own the transaction.
"""

from ticketbari.repositories.user_store import UserStore
from ticketbari.repositories.ticket_store import TicketStore
from ticketbari.repositories.booking_store import BookingStore
from ticketbari.repositories.payment_store import PaymentStore

__all__ = ["UserStore", "TicketStore", "BookingStore", "PaymentStore"]
