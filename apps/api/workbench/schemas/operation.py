"""Operation descriptors used by the authorization policy."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ResourceKind(str, Enum):
    WORKSPACE_TYPE = "workspace-type"
    USER = "user"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


_MUTATING_ACTIONS = frozenset({Action.CREATE, Action.UPDATE, Action.DELETE})


class OperationDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    action: Action

    @property
    def is_mutating(self) -> bool:
        return self.action in _MUTATING_ACTIONS

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.action.value}"
