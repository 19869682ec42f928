"""Session verification for the authenticated-user boundary.

Tokens are issued by the auth collaborator; this module only verifies them and
resolves the user they name. ``create_session_token`` exists for the CLI and
tests.
"""

from typing import Optional

from fastapi import Header, Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from quota_gate.common.exceptions import UnauthorizedError
from quota_gate.users.models import UserModel

_SALT = "user-session"


def _get_serializer() -> URLSafeTimedSerializer:
    from quota_gate.common.config import get_settings
    return URLSafeTimedSerializer(get_settings().secret_key, salt=_SALT)


def create_session_token(user_id: str) -> str:
    """Sign a session payload naming ``user_id``."""
    return _get_serializer().dumps({"uid": user_id})


def verify_session_token(token: str) -> str | None:
    """Verify a session token. Returns the user ID or None."""
    from quota_gate.common.config import get_settings

    try:
        payload = _get_serializer().loads(
            token.strip(), max_age=get_settings().session_max_age
        )
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict):
        return None
    uid = payload.get("uid")
    return uid if isinstance(uid, str) and uid else None


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


async def require_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> UserModel:
    """FastAPI dependency resolving the authenticated user.

    The session cookie wins over an ``Authorization: Bearer`` header.
    """
    from quota_gate.common.config import get_settings

    cookie_name = get_settings().session_cookie_name
    token = request.cookies.get(cookie_name) or _bearer(authorization)
    if not token:
        raise UnauthorizedError()

    user_id = verify_session_token(token)
    if user_id is None:
        raise UnauthorizedError("Invalid session. Please log in again.")

    from quota_gate.deps import get_db, get_user_service
    async with get_db().get_session() as session:
        user = await get_user_service().get_user(session, user_id)
    if user is None:
        raise UnauthorizedError("Invalid session. Please log in again.")
    return user
