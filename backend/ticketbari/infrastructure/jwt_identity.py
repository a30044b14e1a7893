"""
JWT identity verifier backed by PyJWT.
"""

import jwt

from ticketbari.core.errors import AuthenticationError
from ticketbari.core.logging import get_logger
from ticketbari.core.security import Identity
from ticketbari.services.interfaces.identity import IdentityVerifier

logger = get_logger(__name__)


class JwtIdentityVerifier(IdentityVerifier):
    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("token_rejected", reason="expired")
            raise AuthenticationError()
        except jwt.PyJWTError as e:
            logger.info("token_rejected", reason="invalid", error=str(e))
            raise AuthenticationError()

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            logger.info("token_rejected", reason="missing_email")
            raise AuthenticationError()

        return Identity(email=email.strip().lower(), claims=claims)
