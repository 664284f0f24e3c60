"""Webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_HEADER = "x-webhook-signature"


def compute_webhook_signature(payload: str | bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of *payload* keyed by *secret*."""
    body = payload.encode() if isinstance(payload, str) else payload
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_webhook_signature(
    payload: str | bytes, signature: str | None, secret: str | None
) -> bool:
    """Check the ``x-webhook-signature`` header against the raw request body.

    Comparison runs in constant time. An empty signature or secret is never
    valid.

    Example:
        if not verify_webhook_signature(body, headers.get(SIGNATURE_HEADER), secret):
            return JSONResponse({"error": "Invalid signature"}, status_code=401)
    """
    if not signature or not secret:
        return False
    expected = compute_webhook_signature(payload, secret)
    return hmac.compare_digest(signature.encode(), expected.encode())
