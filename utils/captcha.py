"""Cloudflare Turnstile verification."""

from __future__ import annotations

from typing import Callable, Optional

import httpx

from config import get_settings
from utils.logger import get_logger

logger = get_logger(__name__)

# (token, remote_ip) -> passed
CaptchaVerifier = Callable[[str, Optional[str]], bool]


def verify_turnstile(token: str, remote_ip: Optional[str] = None) -> bool:
    """Check a client's Turnstile token with the siteverify endpoint.

    Fails closed: network errors, error statuses and undecodable bodies all
    count as a failed verification.
    """

    if not token:
        return False

    settings = get_settings()
    data = {"secret": settings.turnstile_secret, "response": token}
    if remote_ip:
        data["remoteip"] = remote_ip

    try:
        response = httpx.post(
            settings.turnstile_verify_url,
            data=data,
            timeout=settings.turnstile_timeout,
        )
        response.raise_for_status()
        result = response.json()
    except httpx.HTTPError as exc:
        logger.warning("Turnstile verify request error: %s", exc)
        return False
    except ValueError as exc:
        logger.warning("Turnstile decode error: %s", exc)
        return False

    if not isinstance(result, dict):
        logger.warning("Turnstile returned an unexpected body")
        return False

    success = result.get("success") is True
    if not success:
        logger.info("Turnstile failed: %s", result.get("error-codes", []))
    return success


def get_captcha_verifier() -> CaptchaVerifier:
    """Get the CAPTCHA verifier - used as FastAPI dependency"""
    return verify_turnstile
