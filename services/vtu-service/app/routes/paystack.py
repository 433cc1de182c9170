"""
Paystack Routes
Payment collection: checkout initialization and verification
"""

from typing import Optional

from fastapi import APIRouter, Depends
import structlog

from app.models.schemas import InitializePaymentRequest
from app.services import paystack_service
from app.utils.config import Settings
from app.utils.dependencies import get_app_settings, get_forwarder
from app.utils.errors import ValidationError
from app.utils.forwarder import RouteForwarder

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/initialize")
async def initialize_payment(
    payment: InitializePaymentRequest,
    forwarder: RouteForwarder = Depends(get_forwarder),
    settings: Settings = Depends(get_app_settings)
):
    """Start a Paystack checkout for a wallet top-up"""
    return await paystack_service.initialize_payment(
        forwarder,
        email=payment.email,
        amount=payment.amount,
        user_id=payment.userId,
        callback_url=settings.payment_callback_url
    )


@router.get("/verify")
async def verify_payment(
    reference: Optional[str] = None,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Check the outcome of a checkout by its reference"""
    if not reference:
        raise ValidationError("Missing transaction reference")
    return await paystack_service.verify_payment(forwarder, reference)
