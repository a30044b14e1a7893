"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .identity import IdentityVerifier
from .payment_gateway import PaymentGateway, PaymentIntent
from .offline_gateway import OfflinePaymentGateway

__all__ = ['IdentityVerifier', 'PaymentGateway', 'PaymentIntent', 'OfflinePaymentGateway']
