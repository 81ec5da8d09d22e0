"""Session resolution and account state checks."""

from __future__ import annotations

import logging

from workbench.adapters.auth import AuthVerificationError, TokenVerifier
from workbench.core.logging import safe_log_identifier
from workbench.errors import ErrorKind, PipelineFailure
from workbench.repositories.base import AccountStore
from workbench.schemas.auth import AnonymousPrincipal, AuthenticatedPrincipal, Principal

logger = logging.getLogger(__name__)

_BEARER_SCHEME = "bearer"


def _authentication_failure(message: str) -> PipelineFailure:
    return PipelineFailure(kind=ErrorKind.AUTHENTICATION, message=message)


class SessionResolver:
    """Turns the raw ``Authorization`` header into a principal snapshot."""

    def __init__(self, verifier: TokenVerifier, accounts: AccountStore) -> None:
        self._verifier = verifier
        self._accounts = accounts

    def resolve(self, credentials: str | None) -> Principal | PipelineFailure:
        if credentials is None:
            return AnonymousPrincipal()

        scheme, _, token = credentials.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != _BEARER_SCHEME or not token:
            return _authentication_failure("Invalid or missing bearer token")

        try:
            claims = self._verifier.verify_token(token)
        except AuthVerificationError as exc:
            return _authentication_failure(str(exc) or "Invalid bearer token")

        account = self._accounts.get_account(claims.user_id)
        if account is None:
            logger.warning(
                "session.unknown_account principal_id=%s",
                safe_log_identifier(claims.user_id, prefix="pid"),
            )
            return _authentication_failure("Bearer token does not match a known account")

        return AuthenticatedPrincipal(user_id=account.uid, role=account.role, active=account.active)


def check_account_state(principal: Principal) -> Principal | PipelineFailure:
    """Reject inactive accounts before any role is considered."""
    if isinstance(principal, AuthenticatedPrincipal) and not principal.active:
        return PipelineFailure(kind=ErrorKind.INACTIVE_ACCOUNT, message="User account is inactive")
    return principal


__all__ = ["SessionResolver", "check_account_state"]
