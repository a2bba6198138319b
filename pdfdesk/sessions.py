"""
Cookie sessions.

A session is an itsdangerous timed token holding ``{"email", "name"}``.
``attach_user`` annotates every request that carries a valid token;
``require_user`` guards the tool routes and sends anonymous callers to the
login page.
"""
import time
from typing import Callable, Optional

from fastapi import Request
from itsdangerous import BadData, TimestampSigner, URLSafeTimedSerializer

from .config import COOKIE_NAME, SECRET_KEY, SESSION_MAX_AGE_SECONDS
from .errors import AuthenticationRequired

SESSION_SALT = "pdfdesk-session"


def _signer_with_clock(clock: Callable[[], float]):
    class _ClockedSigner(TimestampSigner):
        def get_timestamp(self) -> int:
            return int(clock())

    return _ClockedSigner


class SessionGate:
    def __init__(
        self,
        secret_key: str,
        max_age: int = SESSION_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(
            secret_key,
            salt=SESSION_SALT,
            signer=_signer_with_clock(clock),
        )

    def issue_token(self, email: str, name: str) -> str:
        return self._serializer.dumps({"email": email, "name": name})

    def verify_token(self, token: Optional[str]) -> Optional[dict]:
        """Return the payload of a valid, unexpired token, else ``None``."""
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except BadData:
            return None
        if not isinstance(data, dict) or not data.get("email") or "name" not in data:
            return None
        return {"email": data["email"], "name": data["name"]}


session_gate = SessionGate(SECRET_KEY)


async def attach_user(request: Request, call_next):
    payload = session_gate.verify_token(request.cookies.get(COOKIE_NAME))
    if payload:
        request.state.user = payload
    return await call_next(request)


def current_user(request: Request) -> Optional[dict]:
    return getattr(request.state, "user", None)


def require_user(request: Request) -> dict:
    user = current_user(request)
    if not user:
        raise AuthenticationRequired()
    return user
