"""Firebase Auth token verifier adapter."""

from __future__ import annotations

from workbench.adapters.auth.base import AuthVerificationError, TokenVerifier
from workbench.schemas.auth import TokenClaims


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase ID tokens and extracts the asserted user id.

    Role and account state come from the account store, not from the token.
    """

    def __init__(self, project_id: str | None, audience: str | None) -> None:
        self._project_id = project_id
        self._audience = audience

    def verify_token(self, token: str) -> TokenClaims:
        try:
            import firebase_admin
            from firebase_admin import auth as firebase_auth
        except ImportError as exc:  # pragma: no cover - depends on optional package
            raise AuthVerificationError("Firebase auth verifier is unavailable") from exc

        if not firebase_admin._apps:
            firebase_admin.initialize_app()

        expired_error = getattr(firebase_auth, "ExpiredIdTokenError", None)
        try:
            decoded = firebase_auth.verify_id_token(token, check_revoked=True)
        except Exception as exc:
            if expired_error is not None and isinstance(exc, expired_error):
                raise AuthVerificationError("Bearer token expired") from exc
            raise AuthVerificationError("Invalid bearer token") from exc

        if self._audience and decoded.get("aud") != self._audience:
            raise AuthVerificationError("Invalid bearer token audience")

        if self._project_id:
            issuer = str(decoded.get("iss", ""))
            audience = str(decoded.get("aud", ""))
            if self._project_id not in issuer and audience != self._project_id:
                raise AuthVerificationError("Invalid bearer token issuer")

        user_id = str(decoded.get("uid") or decoded.get("sub") or "").strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")

        return TokenClaims(user_id=user_id)


__all__ = ["FirebaseTokenVerifier"]
