from fastapi import APIRouter, Depends, HTTPException, status, Request
from pydantic import ValidationError
from database import UserStore, get_user_store
from models import User
from schemas import AuthRequest, MessageResponse, TokenResponse
from utils.captcha import CaptchaVerifier, get_captcha_verifier
from utils.jwt import create_jwt
from utils.logger import get_logger
from utils.security import hash_password, verify_password

router = APIRouter()
logger = get_logger(__name__)


async def parse_auth_request(request: Request) -> AuthRequest:
    """
    Read credentials from a JSON body or an HTML form post

    Args:
        request: FastAPI request

    Returns:
        Validated AuthRequest

    Raises:
        HTTPException: 400 if the body is unreadable or a field is missing
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            data = await request.json()
        else:
            data = dict(await request.form())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Malformed request body"
        )

    if not isinstance(data, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing fields"
        )

    try:
        return AuthRequest.model_validate(data)
    except ValidationError as exc:
        detail = "Missing fields"
        for error in exc.errors():
            # Messages raised by AuthRequest validators are safe to show
            if error["type"] == "value_error":
                detail = str(error["ctx"]["error"])
                break
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/register", response_model=MessageResponse)
def register(
    request: Request,
    auth: AuthRequest = Depends(parse_auth_request),
    users: UserStore = Depends(get_user_store),
    verify_captcha: CaptchaVerifier = Depends(get_captcha_verifier)
) -> MessageResponse:
    """
    Register a new user

    Args:
        request: FastAPI request (client IP is forwarded to Turnstile)
        auth: Username, password and CAPTCHA token
        users: User store
        verify_captcha: CAPTCHA verifier

    Returns:
        MessageResponse on success
    """
    if not verify_captcha(auth.captcha, _client_ip(request)):
        logger.info("Registration CAPTCHA failed for user: %s", auth.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid CAPTCHA"
        )

    all_users = users.load()
    if any(user.username == auth.username for user in all_users):
        logger.info("Registration rejected, user exists: %s", auth.username)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists"
        )

    all_users.append(User(username=auth.username, password=hash_password(auth.password)))
    users.save(all_users)

    logger.info("User registered: %s", auth.username)
    return MessageResponse(message="Registration successful")


@router.post("/login", response_model=TokenResponse)
def login(
    request: Request,
    auth: AuthRequest = Depends(parse_auth_request),
    users: UserStore = Depends(get_user_store),
    verify_captcha: CaptchaVerifier = Depends(get_captcha_verifier)
) -> TokenResponse:
    """
    Log a user in and issue a bearer token

    Args:
        request: FastAPI request (client IP is forwarded to Turnstile)
        auth: Username, password and CAPTCHA token
        users: User store
        verify_captcha: CAPTCHA verifier

    Returns:
        TokenResponse with a signed JWT
    """
    if not verify_captcha(auth.captcha, _client_ip(request)):
        logger.info("Login CAPTCHA failed for user: %s", auth.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid CAPTCHA"
        )

    user = users.find(auth.username)
    if user is None or not verify_password(auth.password, user.password):
        logger.info("Login failed for user: %s", auth.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    logger.info("User logged in: %s", auth.username)
    return TokenResponse(token=create_jwt(user.username))
