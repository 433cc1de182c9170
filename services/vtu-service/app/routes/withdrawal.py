"""
Withdrawal Routes
Payouts to bank accounts through Paystack transfers
"""

from fastapi import APIRouter, Depends
import structlog

from app.models.schemas import CreateRecipientRequest, InitiateTransferRequest, ResolveAccountRequest
from app.services import paystack_service
from app.utils.dependencies import get_forwarder
from app.utils.forwarder import RouteForwarder

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/banks")
async def list_banks(forwarder: RouteForwarder = Depends(get_forwarder)):
    """Nigerian banks supported for payouts"""
    banks = await paystack_service.list_banks(forwarder)
    return {"banks": banks}


@router.post("/resolve-account")
async def resolve_account(
    account: ResolveAccountRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Look up the account holder name for an account number"""
    return await paystack_service.resolve_account(forwarder, account.accountNumber, account.bankCode)


@router.post("/create-recipient")
async def create_recipient(
    recipient: CreateRecipientRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Register a bank account as a transfer recipient"""
    return await paystack_service.create_recipient(
        forwarder,
        account_name=recipient.accountName,
        account_number=recipient.accountNumber,
        bank_code=recipient.bankCode
    )


@router.post("/initiate-transfer")
async def initiate_transfer(
    transfer: InitiateTransferRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Send money from the Paystack balance to a recipient"""
    logger.info("Initiating transfer", reference=transfer.reference, recipient=transfer.recipientCode)
    return await paystack_service.initiate_transfer(
        forwarder,
        amount=transfer.amount,
        recipient_code=transfer.recipientCode,
        reference=transfer.reference,
        reason=transfer.reason
    )
