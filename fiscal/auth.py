"""Session tokens, password hashing, and the authenticated-user dependency."""

import bcrypt
from fastapi import Cookie, Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from itsdangerous import BadSignature, TimestampSigner
from sqlalchemy.orm import Session

from fiscal.config import settings
from fiscal.database import get_db
from fiscal.errors import UnauthorizedError
from fiscal.models import User
from fiscal.schemas import BCRYPT_MAX_BYTES

SESSION_COOKIE = "fiscal_session"

_signer = TimestampSigner(settings.secret_key)
_bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def issue_session_token(user_id: str) -> str:
    return _signer.sign(user_id.encode()).decode()


def resolve_session_token(token: str) -> str | None:
    """Return the user id a token was issued for, or None if it is forged or expired."""
    try:
        return _signer.unsign(token, max_age=settings.session_max_age).decode()
    except BadSignature:
        return None


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    session_cookie: str | None = Cookie(None, alias=SESSION_COOKIE),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials if credentials else session_cookie
    if not token:
        raise UnauthorizedError()
    user_id = resolve_session_token(token)
    if user_id is None:
        raise UnauthorizedError("Invalid or expired session")
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthorizedError("Invalid or expired session")
    return user


CurrentUser = Depends(require_user)
