"""
Webhook Routes
Order status callbacks from eBills
"""

import json

from fastapi import APIRouter, Depends, Request
import structlog

from app.services.ebills_service import classify_webhook_status
from app.utils.config import Settings
from app.utils.dependencies import get_app_settings
from app.utils.errors import SignatureError, ValidationError
from shared.utils.security import verify_signature

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/webhook")
async def handle_ebills_webhook(request: Request, settings: Settings = Depends(get_app_settings)):
    """
    Handle an eBills order status callback.

    The X-Signature header must be the hex HMAC-SHA256 of the raw body keyed
    by the account PIN. The outcome is logged and acknowledged; nothing is
    stored.
    """
    raw_body = await request.body()
    signature = request.headers.get("x-signature")

    if not verify_signature(raw_body, signature, settings.ebills_user_pin):
        logger.warning("Invalid webhook signature")
        raise SignatureError("Invalid signature")

    try:
        payload = json.loads(raw_body) if raw_body else {}
    except ValueError as e:
        raise ValidationError("Webhook body must be valid JSON") from e

    request_id = payload.get("request_id") if isinstance(payload, dict) else None
    if not request_id:
        logger.warning("Webhook missing request_id")
        raise ValidationError("Missing request_id")

    status = payload.get("status")
    outcome = classify_webhook_status(status)
    logger.info("Webhook received", request_id=request_id, status=status, outcome=outcome)

    return {"status": "received", "request_id": request_id, "outcome": outcome}
