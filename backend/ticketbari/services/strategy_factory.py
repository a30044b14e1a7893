"""
Factories for the external collaborators.
Configures which identity verifier and payment gateway to use.
"""

from typing import Optional

from ticketbari.core.config import get_settings
from ticketbari.infrastructure.jwt_identity import JwtIdentityVerifier
from ticketbari.infrastructure.stripe_gateway import StripePaymentGateway
from ticketbari.services.interfaces.identity import IdentityVerifier
from ticketbari.services.interfaces.offline_gateway import OfflinePaymentGateway
from ticketbari.services.interfaces.payment_gateway import PaymentGateway

_verifier: Optional[IdentityVerifier] = None
_gateway: Optional[PaymentGateway] = None


def get_identity_verifier() -> IdentityVerifier:
    """Get identity verifier singleton."""
    global _verifier
    if _verifier is None:
        settings = get_settings()
        _verifier = JwtIdentityVerifier(settings.SECRET_KEY, settings.ALGORITHM)
    return _verifier


def get_payment_gateway() -> PaymentGateway:
    """
    Get configured payment gateway singleton.

    Selection via PAYMENT_GATEWAY:
    - stripe (default): StripePaymentGateway
    - offline: OfflinePaymentGateway
    """
    global _gateway
    if _gateway is None:
        settings = get_settings()
        if settings.PAYMENT_GATEWAY == "offline":
            _gateway = OfflinePaymentGateway()
        else:
            _gateway = StripePaymentGateway(settings.STRIPE_SECRET_KEY)
    return _gateway
