"""
Offline payment gateway - no network.
"""

import uuid

from ticketbari.services.interfaces.payment_gateway import PaymentGateway, PaymentIntent


class OfflinePaymentGateway(PaymentGateway):
    """
    Issues local intents with Stripe-shaped ids and secrets.

    Use when:
    - Developing without gateway credentials
    - Running the load test
    """

    async def create_intent(self, amount: int, currency: str) -> PaymentIntent:
        intent_id = f"pi_offline_{uuid.uuid4().hex[:24]}"
        return PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:16]}",
            amount=amount,
            currency=currency,
        )
