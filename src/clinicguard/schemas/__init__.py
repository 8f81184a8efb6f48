"""Schema exports for API request/response models."""

from .access import (
    AccessCheckRequest,
    AccessDecisionResponse,
    CallNextResponse,
    NavRouteResponse,
    RolePermissionsResponse,
    SessionResponse,
)

__all__ = [
    "AccessCheckRequest",
    "AccessDecisionResponse",
    "CallNextResponse",
    "NavRouteResponse",
    "RolePermissionsResponse",
    "SessionResponse",
]
