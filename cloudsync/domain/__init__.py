"""Domain package exports for value objects, ports and projections."""

from .cloud_models import (
    AuthTokens,
    CloudDeviceInfo,
    CloudQuota,
    CloudSyncStatus,
    SyncTier,
    Workspace,
)
from .errors import (
    CollaboratorError,
    PreconditionError,
    TokenDecodeError,
    ValidationError,
)
from .jwt_claims import extract_user_id
from .ports import UseCaseError
from .visibility import DashboardFlags, Panel, VisibilityFlags

__all__ = [
    "AuthTokens",
    "CloudDeviceInfo",
    "CloudQuota",
    "CloudSyncStatus",
    "CollaboratorError",
    "DashboardFlags",
    "Panel",
    "PreconditionError",
    "SyncTier",
    "TokenDecodeError",
    "UseCaseError",
    "ValidationError",
    "VisibilityFlags",
    "Workspace",
    "extract_user_id",
]
