"""HMAC-SHA256 webhook signatures."""

import hashlib
import hmac
import secrets

from webhooks.security.platforms import SIGNATURE_PREFIXES, parse_platform

SECRET_BYTES = 32


def _as_bytes(value) -> bytes:
    return value if isinstance(value, bytes) else str(value).encode("utf-8")


def compute_signature(payload, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw payload bytes."""
    return hmac.new(_as_bytes(secret), _as_bytes(payload), hashlib.sha256).hexdigest()


def strip_signature_prefix(platform, signature: str) -> str:
    prefix = SIGNATURE_PREFIXES[parse_platform(platform)]
    if prefix and signature.startswith(prefix):
        return signature[len(prefix) :]
    return signature


def signature_matches(platform, payload, signature: str, secret: str) -> bool:
    """Constant-time comparison of ``signature`` against the expected digest."""
    expected = compute_signature(payload, secret)
    provided = strip_signature_prefix(platform, signature.strip())
    return hmac.compare_digest(_as_bytes(provided), _as_bytes(expected))


def generate_webhook_secret() -> str:
    """A fresh shared secret: 32 random bytes, hex encoded."""
    return secrets.token_hex(SECRET_BYTES)
