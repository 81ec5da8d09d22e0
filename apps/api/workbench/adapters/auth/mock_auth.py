"""Mock auth verifier for local development and tests."""

from __future__ import annotations

import time
from collections.abc import Callable

from workbench.adapters.auth.base import AuthVerificationError, TokenVerifier
from workbench.schemas.auth import TokenClaims


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<expires_at>`` where ``expires_at`` is a unix timestamp
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def verify_token(self, token: str) -> TokenClaims:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")

        if len(parts) == 3:
            try:
                expires_at = int(parts[2])
            except ValueError as exc:
                raise AuthVerificationError("Invalid bearer token expiry") from exc
            if expires_at <= self._clock():
                raise AuthVerificationError("Bearer token expired")

        return TokenClaims(user_id=user_id)


__all__ = ["MockTokenVerifier"]
