import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional

from config import get_settings

ALGORITHM = "HS256"


def create_jwt(username: str, expires_in: Optional[timedelta] = None) -> str:
    """
    Issue a signed token for an authenticated user

    Args:
        username: Username to embed in the token
        expires_in: Lifetime of the token, defaults to JWT_EXPIRE_HOURS

    Returns:
        Encoded JWT string
    """
    settings = get_settings()
    if expires_in is None:
        expires_in = timedelta(hours=settings.jwt_expire_hours)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "username": username,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify JWT token and return payload

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    settings = get_settings()
    try:
        # PyJWT rejects expired tokens itself
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError:
        return None


def get_username_from_token(token: str) -> Optional[str]:
    """
    Extract username from JWT token

    Args:
        token: JWT token string

    Returns:
        Username if valid token, None otherwise
    """
    payload = verify_jwt(token)
    if payload:
        return payload.get("username") or payload.get("sub")
    return None
