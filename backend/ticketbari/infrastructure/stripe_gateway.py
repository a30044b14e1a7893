"""
Stripe payment gateway adapter.

The SDK is synchronous, so calls run in a worker thread. Failures are
surfaced to the caller as UpstreamError; retries are left to the SDK's
own network policy.
"""

import asyncio

import stripe

from ticketbari.core.errors import UpstreamError
from ticketbari.core.logging import get_logger
from ticketbari.services.interfaces.payment_gateway import PaymentGateway, PaymentIntent

logger = get_logger(__name__)


class StripePaymentGateway(PaymentGateway):
    def __init__(self, api_key: str):
        self.api_key = api_key

    async def create_intent(self, amount: int, currency: str) -> PaymentIntent:
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=currency,
                payment_method_types=["card"],
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("payment_intent_failed", amount=amount, currency=currency, error=str(e))
            raise UpstreamError(f"Payment gateway error: {e.user_message or 'request failed'}")

        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=amount,
            currency=currency,
        )
