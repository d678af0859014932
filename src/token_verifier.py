"""
Admin authentication.

TokenVerifier turns a bearer token into a verified principal (the actor
recorded as staged_by/published_by) or rejects it.
"""
import hmac
from abc import ABC, abstractmethod
from typing import Optional

from src.errors import Unauthorized


class TokenVerifier(ABC):
    """Abstract base class for admin token verification."""

    @abstractmethod
    def verify(self, token: Optional[str]) -> str:
        """
        Verify a bearer token.

        Args:
            token: Raw token from the Authorization header (may be None)

        Returns:
            The verified principal name

        Raises:
            Unauthorized: If the token is missing or invalid
        """


class SharedSecretTokenVerifier(TokenVerifier):
    """Accepts a single shared admin token, compared in constant time."""

    def __init__(self, secret: str, principal: str = "admin"):
        """
        Args:
            secret: The expected token (ADMIN_API_TOKEN); empty rejects everything
            principal: Name returned for a valid token
        """
        self.secret = secret
        self.principal = principal

    def verify(self, token: Optional[str]) -> str:
        if not self.secret or not token:
            raise Unauthorized("Missing admin token")
        if not hmac.compare_digest(token.encode("utf-8"), self.secret.encode("utf-8")):
            raise Unauthorized("Invalid admin token")
        return self.principal


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
