"""Session state as reported by the auth collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .permission import Role, coerce_role


@dataclass(slots=True)
class SessionState:
    """Snapshot of the auth collaborator's view of the current user.

    ``role`` is trusted as given; it may be a :class:`Role`, a raw string or
    ``None`` while the session is still hydrating.
    """

    user_id: Optional[str] = None
    role: Any = None
    is_authenticated: bool = False
    is_loading: bool = False
    clinic_id: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "SessionState":
        return cls()

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(is_loading=True)

    @property
    def resolved_role(self) -> Optional[Role]:
        return coerce_role(self.role)

    def identity_key(self) -> tuple:
        """Values whose change must invalidate any derived permission set."""
        role = self.role.value if isinstance(self.role, Role) else self.role
        return (self.user_id, bool(self.is_authenticated), role)

    def logout(self) -> None:
        self.user_id = None
        self.role = None
        self.is_authenticated = False
        self.clinic_id = None


__all__ = ["SessionState"]
