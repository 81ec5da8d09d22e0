"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from workbench.schemas.auth import TokenClaims


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or is no longer valid."""


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> TokenClaims:
        """Verify token and return the identity it asserts."""


__all__ = ["AuthVerificationError", "TokenVerifier"]
