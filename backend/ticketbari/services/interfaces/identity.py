"""
Identity verifier interface.
"""

from abc import ABC, abstractmethod

from ticketbari.core.security import Identity


class IdentityVerifier(ABC):
    """
    Validates a bearer credential issued by the identity provider.

    Implementations:
    - JwtIdentityVerifier: shared-secret signed tokens
    """

    @abstractmethod
    def verify(self, token: str) -> Identity:
        """
        Return the caller identity.

        Raises:
            AuthenticationError: token invalid, expired or missing an email claim
        """
        pass
