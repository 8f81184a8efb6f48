from typing import Any, Protocol

from ..domain.session import SessionState


class SessionProvider(Protocol):
    """Resolves the auth collaborator's view of the caller for one request."""

    async def resolve(self, request: Any) -> SessionState: ...
