"""Route modules."""

from .users import router as users_router
from .workspace_types import router as workspace_types_router

__all__ = ["users_router", "workspace_types_router"]
