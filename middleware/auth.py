from fastapi import Depends, Request, HTTPException, status
from config import Settings, get_settings
from utils.jwt import get_username_from_token
from utils.logger import get_logger

logger = get_logger(__name__)


def verify_jwt_middleware(request: Request, username: str, settings: Settings = Depends(get_settings)):
    """
    Verify JWT token in Authorization header when REQUIRE_AUTH is enabled

    Args:
        request: FastAPI request object
        username: Username from the URL path
        settings: Application settings

    Raises:
        HTTPException: If token is missing, invalid, expired, or issued to another user
    """
    if not settings.require_auth:
        return

    auth_header = request.headers.get("Authorization")

    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header"
        )

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>"
        )

    token = parts[1]
    token_username = get_username_from_token(token)

    if not token_username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )

    if token_username != username:
        logger.warning("Token for %s used on todos of %s", token_username, username)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot access other users' todos"
        )

    # Attach user info to request state
    request.state.username = token_username
