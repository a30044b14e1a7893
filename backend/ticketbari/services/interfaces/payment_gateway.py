"""
Payment gateway interface.
Allows swapping the card processor without touching the payment routes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str
    amount: int
    currency: str


class PaymentGateway(ABC):
    """
    Implementations:
    - StripePaymentGateway: real card processing
    - OfflinePaymentGateway: local intents for development
    """

    @abstractmethod
    async def create_intent(self, amount: int, currency: str) -> PaymentIntent:
        """
        Create a payment intent for `amount` in the currency's minor unit.

        Raises:
            UpstreamError: the gateway rejected or failed the request
        """
        pass
