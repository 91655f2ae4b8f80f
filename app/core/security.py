"""
Identity verification.

- Clerk session tokens (bearer JWTs) verified with python-jose against the
  instance's JWT verification key.
- Svix-signed webhook deliveries verified with HMAC-SHA256.
"""
import base64
import hashlib
import hmac
import logging
import time
from typing import Optional, Any

from jose import JWTError, jwt

from app.config import settings


logger = logging.getLogger(__name__)


class WebhookVerificationError(Exception):
    """Raised when a webhook delivery cannot be authenticated."""
    pass


def decode_session_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a Clerk session token.

    Args:
        token: The bearer JWT from the Authorization header

    Returns:
        Decoded token payload or None if invalid/expired
    """
    if not settings.CLERK_JWT_KEY:
        logger.error("CLERK_JWT_KEY is not configured; rejecting token")
        return None

    try:
        payload = jwt.decode(
            token,
            settings.CLERK_JWT_KEY,
            algorithms=[settings.CLERK_JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.debug(f"Session token rejected: {e}")
        return None

    # Only tokens minted for our own frontends are accepted
    authorized_parties = settings.CLERK_AUTHORIZED_PARTIES
    if authorized_parties and payload.get("azp") not in authorized_parties:
        logger.warning(f"Session token has unauthorized azp: {payload.get('azp')}")
        return None

    return payload


def verify_session_token(token: str) -> Optional[str]:
    """
    Verify a session token and return the subject (Clerk user id).

    Returns:
        Clerk user id or None if invalid
    """
    payload = decode_session_token(token)
    if payload is None:
        return None
    return payload.get("sub")


def _secret_bytes(secret: str) -> bytes:
    if secret.startswith("whsec_"):
        secret = secret[len("whsec_"):]
    return base64.b64decode(secret)


def sign_webhook_payload(secret: str, msg_id: str, timestamp: str, body: bytes) -> str:
    """
    Compute the Svix v1 signature for a delivery.

    The signed content is `{msg_id}.{timestamp}.{body}`.
    """
    to_sign = f"{msg_id}.{timestamp}.".encode() + body
    digest = hmac.new(_secret_bytes(secret), to_sign, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify_webhook_signature(
    body: bytes,
    msg_id: str,
    timestamp: str,
    signature_header: str,
    secret: Optional[str] = None,
    tolerance_seconds: Optional[int] = None,
) -> None:
    """
    Verify an Svix webhook signature.

    Args:
        body: Raw request body bytes
        msg_id: svix-id header value
        timestamp: svix-timestamp header value (unix seconds)
        signature_header: svix-signature header value, space separated `v1,<sig>` entries
        secret: Signing secret (defaults to CLERK_WEBHOOK_SECRET)
        tolerance_seconds: Allowed clock skew (defaults to WEBHOOK_TOLERANCE_SECONDS)

    Raises:
        WebhookVerificationError: if the timestamp or signature is invalid
    """
    secret = secret if secret is not None else settings.CLERK_WEBHOOK_SECRET
    if tolerance_seconds is None:
        tolerance_seconds = settings.WEBHOOK_TOLERANCE_SECONDS

    if not secret:
        raise WebhookVerificationError("Webhook secret not configured")

    try:
        sent_at = int(timestamp)
    except (TypeError, ValueError):
        raise WebhookVerificationError("Invalid signature timestamp")

    now = int(time.time())
    if abs(now - sent_at) > tolerance_seconds:
        raise WebhookVerificationError("Signature timestamp outside tolerance")

    try:
        expected = sign_webhook_payload(secret, msg_id, timestamp, body)
    except (ValueError, TypeError):
        raise WebhookVerificationError("Webhook secret is not valid base64")

    for entry in signature_header.split(" "):
        version, _, signature = entry.partition(",")
        if version != "v1" or not signature:
            continue
        # Constant-time comparison
        if hmac.compare_digest(expected, signature):
            return

    logger.warning(f"Invalid webhook signature for message {msg_id}")
    raise WebhookVerificationError("No matching signature found")
