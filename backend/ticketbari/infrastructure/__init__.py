"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .jwt_identity import JwtIdentityVerifier
from .stripe_gateway import StripePaymentGateway

__all__ = ['JwtIdentityVerifier', 'StripePaymentGateway']
