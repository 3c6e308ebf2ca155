"""
Password hashing and the signed viewer-session cookie.

The cookie only names a server-side viewer session and, once an artist has
signed in, the account to restore if that session is gone (e.g. after a
restart). It never carries dashboard state itself.
"""
import os
from typing import Optional

from fastapi import Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

# pbkdf2_sha256 needs no compiled backend on any database
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-arttrack-dev-secret-key-32-chars")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "480"))
SESSION_COOKIE = "arttrack_session"

_signer = URLSafeTimedSerializer(SECRET_KEY, salt="arttrack-viewer-session")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a malformed stored hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_session_token(session_id: str, user_id: Optional[str] = None) -> str:
    return _signer.dumps({"sid": session_id, "user_id": user_id})


def decode_session_token(token: str) -> Optional[dict]:
    """Payload of a valid token; None when tampered with or older than the expiry."""
    try:
        return _signer.loads(token, max_age=SESSION_EXPIRE_MINUTES * 60)
    except (BadSignature, SignatureExpired):
        return None


def read_session_cookie(request: Request) -> Optional[dict]:
    token = request.cookies.get(SESSION_COOKIE)
    return decode_session_token(token) if token else None


def set_session_cookie(response, session_id: str, user_id: Optional[str] = None):
    """Re-sign the cookie so its expiry slides with activity."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(session_id, user_id),
        httponly=True,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response
