"""Role-based authorization rules for resource operations."""

from __future__ import annotations

from workbench.errors import ErrorKind, PipelineFailure
from workbench.schemas.auth import AnonymousPrincipal, AuthenticatedPrincipal, Principal, Role
from workbench.schemas.operation import Action, OperationDescriptor, ResourceKind

_ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})
_ANY_ROLE: frozenset[Role] = frozenset(Role)

_ALLOWED_ROLES: dict[ResourceKind, dict[Action, frozenset[Role]]] = {
    ResourceKind.WORKSPACE_TYPE: {
        Action.CREATE: _ADMIN_ONLY,
        Action.READ: _ANY_ROLE,
        Action.UPDATE: _ADMIN_ONLY,
        Action.DELETE: _ADMIN_ONLY,
    },
    ResourceKind.USER: {
        Action.CREATE: _ADMIN_ONLY,
        Action.READ: _ADMIN_ONLY,
        Action.UPDATE: _ADMIN_ONLY,
        Action.DELETE: _ADMIN_ONLY,
    },
}


def _ensure_policy_is_total() -> None:
    missing = [
        f"{kind.value}:{action.value}"
        for kind in ResourceKind
        for action in Action
        if action not in _ALLOWED_ROLES.get(kind, {})
    ]
    if missing:
        raise RuntimeError(f"Authorization policy has no entry for: {', '.join(missing)}")


_ensure_policy_is_total()


def allowed_roles(operation: OperationDescriptor) -> frozenset[Role]:
    """Return the roles permitted to perform ``operation``; empty means nobody."""
    return _ALLOWED_ROLES.get(operation.kind, {}).get(operation.action, frozenset())


def is_allowed(role: Role, operation: OperationDescriptor) -> bool:
    return role in allowed_roles(operation)


def authorize(principal: Principal, operation: OperationDescriptor) -> AuthenticatedPrincipal | PipelineFailure:
    """Decide whether ``principal`` may perform ``operation``.

    Anonymous callers never reach a protected operation through a correctly
    wired route, so they are reported as an implementation fault instead of
    an ordinary permission failure.
    """
    if isinstance(principal, AnonymousPrincipal):
        return PipelineFailure(
            kind=ErrorKind.ANONYMOUS_ACCESS,
            message=f"Anonymous access to {operation} is not supported",
        )
    if isinstance(principal, AuthenticatedPrincipal):
        if is_allowed(principal.role, operation):
            return principal
        return PipelineFailure(
            kind=ErrorKind.AUTHORIZATION,
            message=f"Role '{principal.role.value}' is not permitted to {operation.action.value} {operation.kind.value}",
        )
    raise TypeError(f"Unsupported principal type: {type(principal).__name__}")
