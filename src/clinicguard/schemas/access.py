from typing import Any, Dict, List, Optional

from pydantic import BaseModel, model_validator


class NavRouteResponse(BaseModel):
    path: str
    label: str


class SessionResponse(BaseModel):
    """Response model for the caller's effective access."""

    user_id: Optional[str] = None
    role: Optional[str] = None
    clinic_id: Optional[str] = None
    is_authenticated: bool
    permissions: List[str]
    facades: Dict[str, Dict[str, bool]]
    default_route: str
    available_routes: List[NavRouteResponse]


class AccessCheckRequest(BaseModel):
    """Ad hoc predicate, same shape the guards accept.

    Exactly one of ``permission``, ``permissions`` or ``resource``/``action``
    should be supplied; an empty body is rejected.
    """

    permission: Optional[str] = None
    permissions: Optional[List[str]] = None
    require_all: bool = False
    resource: Optional[str] = None
    action: Optional[str] = None

    @model_validator(mode="after")
    def _has_predicate(self) -> "AccessCheckRequest":
        if self.permission is None and self.permissions is None and self.resource is None:
            raise ValueError("one of permission, permissions or resource/action is required")
        return self


class AccessDecisionResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    check: Dict[str, Any]


class RolePermissionsResponse(BaseModel):
    """Response model for a role's static grants."""

    role: str
    permissions: List[str]
    categorized_permissions: Dict[str, List[str]]


class CallNextResponse(BaseModel):
    status: str
    called_by: Optional[str] = None
