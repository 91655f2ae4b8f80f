import time

import pytest

from app.config import settings
from app.core.security import (
    decode_session_token,
    verify_session_token,
    sign_webhook_payload,
    verify_webhook_signature,
    WebhookVerificationError,
)
from tests.conftest import make_token, TEST_CLERK_ID, TEST_WEBHOOK_SECRET


def test_valid_session_token_returns_subject():
    token = make_token()
    assert verify_session_token(token) == TEST_CLERK_ID
    assert decode_session_token(token)["sid"] == "sess_test"


def test_expired_session_token_is_rejected():
    assert decode_session_token(make_token(expires_in=-60)) is None


def test_token_signed_with_other_key_is_rejected():
    from jose import jwt

    token = jwt.encode({"sub": TEST_CLERK_ID, "exp": int(time.time()) + 60}, "another-key", algorithm="HS256")
    assert decode_session_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_session_token("not-a-jwt") is None


def test_unauthorized_party_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "CLERK_AUTHORIZED_PARTIES", ["https://hr.pepl.co.in"])

    assert decode_session_token(make_token(azp="https://evil.example.org")) is None
    assert decode_session_token(make_token(azp="https://hr.pepl.co.in"))["sub"] == TEST_CLERK_ID


def _signed(body: bytes, msg_id: str = "msg_1", timestamp: str = None):
    timestamp = timestamp or str(int(time.time()))
    signature = sign_webhook_payload(TEST_WEBHOOK_SECRET, msg_id, timestamp, body)
    return msg_id, timestamp, f"v1,{signature}"


def test_webhook_signature_accepts_valid_delivery():
    body = b'{"type":"user.created","data":{}}'
    msg_id, ts, header = _signed(body)

    verify_webhook_signature(body, msg_id, ts, header)


def test_webhook_signature_accepts_any_matching_entry():
    body = b'{"type":"user.updated","data":{}}'
    msg_id, ts, header = _signed(body)

    verify_webhook_signature(body, msg_id, ts, f"v1,bm90LXRoaXMtb25l {header}")


def test_webhook_signature_rejects_tampered_body():
    msg_id, ts, header = _signed(b'{"type":"user.created"}')

    with pytest.raises(WebhookVerificationError):
        verify_webhook_signature(b'{"type":"user.deleted"}', msg_id, ts, header)


def test_webhook_signature_rejects_stale_timestamp():
    body = b"{}"
    stale = str(int(time.time()) - 3600)
    msg_id, ts, header = _signed(body, timestamp=stale)

    with pytest.raises(WebhookVerificationError, match="tolerance"):
        verify_webhook_signature(body, msg_id, ts, header)


def test_webhook_signature_rejects_non_numeric_timestamp():
    with pytest.raises(WebhookVerificationError):
        verify_webhook_signature(b"{}", "msg_1", "yesterday", "v1,abc")


def test_webhook_signature_requires_secret():
    with pytest.raises(WebhookVerificationError):
        verify_webhook_signature(b"{}", "msg_1", str(int(time.time())), "v1,abc", secret="")
