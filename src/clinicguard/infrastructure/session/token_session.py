import datetime
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ...domain.session import SessionState
from ...logging_config import get_logger

logger = get_logger(__name__)


class TokenSessionProvider:
    """Build a :class:`SessionState` from a signed session token.

    Tokens are issued by the auth collaborator; this adapter only verifies
    them. The token is read from an ``Authorization: Bearer`` header first and
    from the session cookie otherwise. Missing or invalid tokens produce an
    anonymous session rather than an error so the route guard can redirect.
    """

    def __init__(self, jwt_secret: str, algorithm: str = "HS256", cookie_name: str = "session_token"):
        self.jwt_secret = jwt_secret
        self.algorithm = algorithm
        self.cookie_name = cookie_name

    def extract_token(self, request: Any) -> Optional[str]:
        auth_hdr = request.headers.get("authorization") or request.headers.get("Authorization")
        if auth_hdr and auth_hdr.lower().startswith("bearer "):
            token = auth_hdr.split(" ", 1)[1].strip()
            if token:
                return token
        cookie = request.cookies.get(self.cookie_name)
        return cookie or None

    def decode(self, token: str) -> SessionState:
        payload = jwt.decode(token, self.jwt_secret, algorithms=[self.algorithm])
        subject = payload.get("sub")
        if not subject:
            raise JWTError("token has no subject")
        clinic_id = payload.get("clinic_id")
        return SessionState(
            user_id=str(subject),
            role=payload.get("role"),
            is_authenticated=True,
            clinic_id=str(clinic_id) if clinic_id is not None else None,
        )

    async def resolve(self, request: Any) -> SessionState:
        token = self.extract_token(request)
        if token is None:
            return SessionState.anonymous()
        try:
            session = self.decode(token)
        except JWTError as e:
            logger.warning(
                "session_token_invalid", extra={"error": str(e), "path": request.url.path}
            )
            return SessionState.anonymous()
        logger.debug("session_resolved", extra={"user_id": session.user_id, "role": session.role})
        return session

    def issue(
        self,
        user_id: str,
        role: str,
        clinic_id: Optional[str] = None,
        expires_delta: Optional[datetime.timedelta] = None,
    ) -> str:
        """Sign a session token; used by local tooling and tests."""
        now = datetime.datetime.now(datetime.timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "role": str(role),
            "iat": int(now.timestamp()),
            "exp": now + (expires_delta or datetime.timedelta(minutes=15)),
        }
        if clinic_id is not None:
            payload["clinic_id"] = str(clinic_id)
        encoded: str = jwt.encode(payload, self.jwt_secret, algorithm=self.algorithm)
        return encoded
