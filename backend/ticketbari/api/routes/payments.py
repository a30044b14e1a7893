"""
Payment endpoints: gateway intents and payment confirmation.
"""

from fastapi import APIRouter, Depends, status

from ticketbari.api.dependencies import (
    get_booking_store,
    get_current_identity,
    get_guard,
    get_ledger,
    get_payment_store,
)
from ticketbari.core.config import get_settings
from ticketbari.core.errors import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ticketbari.core.logging import get_logger
from ticketbari.core.metrics import payment_intent_latency
from ticketbari.core.security import Identity
from ticketbari.models.enums import BookingStatus
from ticketbari.repositories.booking_store import BookingStore
from ticketbari.repositories.payment_store import PaymentStore
from ticketbari.schemas.payment import (
    PaymentCreate,
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentResponse,
)
from ticketbari.services.auth_service import AuthorizationGuard
from ticketbari.services.cache_service import invalidate_ticket_cache
from ticketbari.services.interfaces.payment_gateway import PaymentGateway
from ticketbari.services.inventory_ledger import InventoryLedger
from ticketbari.services.strategy_factory import get_payment_gateway

logger = get_logger(__name__)
router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    data: PaymentIntentCreate,
    identity: Identity = Depends(get_current_identity),
    bookings: BookingStore = Depends(get_booking_store),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Create a card payment intent and return its client secret.
    When a booking id is given the amount is taken from the booking.
    """
    price = data.price
    if data.booking_id is not None:
        booking = await bookings.get(data.booking_id)
        if not booking:
            raise NotFoundError(f"Booking {data.booking_id} not found")
        if booking.customer_email != identity.email:
            raise AuthorizationError("Booking belongs to another customer")
        if booking.status != BookingStatus.APPROVED.value:
            raise InvalidStateError(f"Booking is {booking.status}; only approved bookings can be paid")
        price = booking.total_price

    if price is None or price <= 0:
        raise ValidationError("Price must be greater than zero")

    amount = int(round(price * 100))  # minor units
    with payment_intent_latency.time():
        intent = await gateway.create_intent(amount, get_settings().PAYMENT_CURRENCY)

    logger.info("payment_intent_created", intent_id=intent.id, amount=amount)
    return PaymentIntentResponse(client_secret=intent.client_secret)


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def save_payment(
    data: PaymentCreate,
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    ledger: InventoryLedger = Depends(get_ledger),
):
    """
    Record a completed payment: the booking becomes paid and the ticket
    quantity drops by the booked seats, exactly once per booking.
    """
    await guard.ensure_self(identity, str(data.email), allow_admin=False)
    payment = await ledger.confirm_payment(data.booking_id, identity.email, data.transaction_id)
    if data.price is not None and abs(data.price - payment.price) > 0.005:
        logger.warning(
            "payment_price_mismatch",
            booking_id=data.booking_id,
            submitted=data.price,
            recorded=payment.price,
        )
    await invalidate_ticket_cache()
    return payment


@router.get("/payments/{email}", response_model=list[PaymentResponse])
async def payment_history(
    email: str,
    identity: Identity = Depends(get_current_identity),
    guard: AuthorizationGuard = Depends(get_guard),
    payments: PaymentStore = Depends(get_payment_store),
):
    await guard.ensure_self(identity, email)
    return await payments.list_by_email(email)
