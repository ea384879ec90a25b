"""Authentication of queue callback deliveries."""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass, field

QUEUE_ISSUER = "Upstash"


class CallbackAuthError(PermissionError):
    """Raised when a callback delivery is not authenticated."""


@dataclass
class CallbackAuthenticator:
    """Checks the shared secret header and, optionally, the queue signature."""

    api_secret: str
    signing_keys: list[str] = field(default_factory=list)
    require_signature: bool = False

    def authenticate(
        self, secret: str | None, signature: str | None, body: bytes
    ) -> None:
        """Raise CallbackAuthError unless the delivery is authentic."""
        if not secret or not hmac.compare_digest(
            secret.encode("utf-8"), self.api_secret.encode("utf-8")
        ):
            raise CallbackAuthError("Invalid API secret")
        if not self.require_signature:
            return
        if not signature:
            raise CallbackAuthError("Missing queue signature")
        if not any(
            verify_queue_signature(signature, body, key) for key in self.signing_keys
        ):
            raise CallbackAuthError("Invalid queue signature")


def verify_queue_signature(
    token: str, body: bytes, signing_key: str, now: float | None = None
) -> bool:
    """Verify an HS256 queue signature JWT over the raw request body."""
    parts = token.split(".")
    if len(parts) != 3:  # noqa: PLR2004
        return False
    header_b64, claims_b64, signature_b64 = parts
    expected = _b64url_encode(
        hmac.new(
            signing_key.encode("utf-8"),
            f"{header_b64}.{claims_b64}".encode("utf-8"),
            hashlib.sha256,
        ).digest()
    )
    if not hmac.compare_digest(
        expected.encode("ascii"), signature_b64.rstrip("=").encode("utf-8")
    ):
        return False
    try:
        claims = json.loads(_b64url_decode(claims_b64))
    except ValueError:
        return False
    if not isinstance(claims, dict) or claims.get("iss") != QUEUE_ISSUER:
        return False
    current = time.time() if now is None else now
    expires_at = claims.get("exp")
    if isinstance(expires_at, int | float) and current > expires_at:
        return False
    not_before = claims.get("nbf")
    if isinstance(not_before, int | float) and current < not_before:
        return False
    body_hash = _b64url_encode(hashlib.sha256(body).digest())
    claimed_hash = str(claims.get("body", "")).rstrip("=")
    return hmac.compare_digest(body_hash.encode("ascii"), claimed_hash.encode("utf-8"))


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
