"""Tests for queue callback authentication."""

import base64
import hashlib
import hmac
import json

import pytest

from momentarium.services.callback_auth import (
    CallbackAuthenticator,
    CallbackAuthError,
    verify_queue_signature,
)

SIGNING_KEY = "sig_current"
NOW = 1_700_000_000


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _sign(body: bytes, key: str = SIGNING_KEY, **overrides: object) -> str:
    header = _b64(json.dumps({"alg": "HS256", "typ": "JWT"}).encode())
    claims = {
        "iss": "Upstash",
        "sub": "https://momentarium.test/jobs/process",
        "exp": NOW + 300,
        "nbf": NOW - 10,
        "body": _b64(hashlib.sha256(body).digest()),
    }
    claims.update(overrides)
    payload = _b64(json.dumps(claims).encode())
    signature = hmac.new(
        key.encode(), f"{header}.{payload}".encode(), hashlib.sha256
    ).digest()
    return f"{header}.{payload}.{_b64(signature)}"


def test_valid_secret_is_accepted() -> None:
    CallbackAuthenticator(api_secret="s3cret").authenticate("s3cret", None, b"{}")


@pytest.mark.parametrize("secret", [None, "", "wrong", "s3crét"])
def test_bad_secret_is_rejected(secret: str | None) -> None:
    with pytest.raises(CallbackAuthError):
        CallbackAuthenticator(api_secret="s3cret").authenticate(secret, None, b"{}")


def test_signature_verifies_body() -> None:
    body = b'{"jobId": "x"}'

    assert verify_queue_signature(_sign(body), body, SIGNING_KEY, now=NOW)
    assert not verify_queue_signature(_sign(body), b"{}", SIGNING_KEY, now=NOW)
    assert not verify_queue_signature(_sign(body), body, "other-key", now=NOW)


def test_signature_rejects_expired_or_foreign_tokens() -> None:
    body = b"{}"

    assert not verify_queue_signature(_sign(body), body, SIGNING_KEY, now=NOW + 600)
    assert not verify_queue_signature(
        _sign(body, nbf=NOW + 60), body, SIGNING_KEY, now=NOW
    )
    assert not verify_queue_signature(
        _sign(body, iss="Someone"), body, SIGNING_KEY, now=NOW
    )
    assert not verify_queue_signature("not.a.jwt", body, SIGNING_KEY, now=NOW)
    assert not verify_queue_signature("garbage", body, SIGNING_KEY, now=NOW)


def test_required_signature_accepts_next_key() -> None:
    body = b'{"jobId": "x"}'
    authenticator = CallbackAuthenticator(
        api_secret="s3cret",
        signing_keys=["old-key", "sig_next"],
        require_signature=True,
    )
    token = _sign(body, key="sig_next", exp=None, nbf=None)

    authenticator.authenticate("s3cret", token, body)


def test_required_signature_must_be_present() -> None:
    authenticator = CallbackAuthenticator(
        api_secret="s3cret", signing_keys=[SIGNING_KEY], require_signature=True
    )

    with pytest.raises(CallbackAuthError, match="Missing"):
        authenticator.authenticate("s3cret", None, b"{}")
    with pytest.raises(CallbackAuthError, match="Invalid queue signature"):
        authenticator.authenticate("s3cret", _sign(b"other"), b"{}")
