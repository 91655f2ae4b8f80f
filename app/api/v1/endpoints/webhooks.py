"""
Identity provider webhooks.

Clerk delivers user events signed with Svix headers. The raw body is
verified before anything is parsed.
"""
import json
import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from app.api.deps import DB
from app.config import settings
from app.core.security import verify_webhook_signature, WebhookVerificationError
from app.schemas.webhook import ClerkWebhookEvent, WebhookAck
from app.services.sync_service import SyncService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/clerk", response_model=WebhookAck)
async def clerk_webhook(request: Request, db: DB):
    """Apply a Clerk `user.*` event to employee records."""
    svix_id = request.headers.get("svix-id")
    svix_timestamp = request.headers.get("svix-timestamp")
    svix_signature = request.headers.get("svix-signature")

    if not svix_id or not svix_timestamp or not svix_signature:
        raise HTTPException(status_code=400, detail="Missing svix headers")

    if not settings.CLERK_WEBHOOK_SECRET:
        logger.error("CLERK_WEBHOOK_SECRET is not configured")
        raise HTTPException(status_code=400, detail="Webhook configuration error")

    body = await request.body()

    try:
        verify_webhook_signature(body, svix_id, svix_timestamp, svix_signature)
    except WebhookVerificationError as e:
        logger.warning(f"Rejected webhook {svix_id}: {e}")
        raise HTTPException(status_code=400, detail="Invalid signature")

    try:
        event = ClerkWebhookEvent.model_validate(json.loads(body))
        logger.info(f"Webhook received: {event.type} ({svix_id})")
        await SyncService(db).handle_event(event.type, event.data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Malformed webhook payload {svix_id}: {e}")
        raise HTTPException(status_code=400, detail="Invalid payload")

    return WebhookAck()
