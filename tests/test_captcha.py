from __future__ import annotations

import httpx
import pytest

from config import TURNSTILE_VERIFY_URL, get_settings
from utils.captcha import verify_turnstile


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    request = httpx.Request("POST", TURNSTILE_VERIFY_URL)
    return httpx.Response(status_code, request=request, **kwargs)


def test_successful_verification_sends_secret_token_and_ip(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = {}

    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        sent.update(url=url, data=data, timeout=timeout)
        return _response(json={"success": True})

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("client-token", "203.0.113.7") is True
    assert sent["url"] == get_settings().turnstile_verify_url
    assert sent["data"] == {
        "secret": get_settings().turnstile_secret,
        "response": "client-token",
        "remoteip": "203.0.113.7",
    }
    assert sent["timeout"] == get_settings().turnstile_timeout


def test_remote_ip_is_optional(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = {}

    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        sent.update(data=data)
        return _response(json={"success": True})

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("client-token") is True
    assert "remoteip" not in sent["data"]


def test_rejected_token(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        return _response(json={"success": False, "error-codes": ["invalid-input-response"]})

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("bad-token") is False


def test_empty_token_skips_network(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("") is False


def test_network_error_fails_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("client-token") is False


def test_http_error_status_fails_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        return _response(status_code=500, json={"success": True})

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("client-token") is False


def test_undecodable_body_fails_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        return _response(text="<html>oops</html>")

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("client-token") is False


def test_non_boolean_success_fails_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, data: dict | None = None, timeout: float | None = None):
        return _response(json={"success": "yes"})

    monkeypatch.setattr("utils.captcha.httpx.post", fake_post)

    assert verify_turnstile("client-token") is False
