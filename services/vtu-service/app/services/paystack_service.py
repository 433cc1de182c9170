"""
Paystack payment and payout operations

Wraps the raw Paystack endpoints and reshapes their payloads into the field
names the mobile client expects.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

import structlog

from app.utils.currency import to_major_units, to_minor_units
from app.utils.errors import ProxyError, ValidationError
from app.utils.forwarder import Credential, ForwardSpec, RouteForwarder, Upstream

logger = structlog.get_logger(__name__)

ACCOUNT_NUMBER_PATTERN = re.compile(r"^\d{10}$")

INITIALIZE = ForwardSpec(Upstream.PAYSTACK, "transaction/initialize", "POST", Credential.SECRET)
VERIFY = ForwardSpec(Upstream.PAYSTACK, "transaction/verify/{reference}", "GET", Credential.SECRET)
BANKS = ForwardSpec(Upstream.PAYSTACK, "bank", "GET", Credential.SECRET, query_params=("country", "currency"))
RESOLVE_ACCOUNT = ForwardSpec(
    Upstream.PAYSTACK, "bank/resolve", "GET", Credential.SECRET,
    query_params=("account_number", "bank_code")
)
CREATE_RECIPIENT = ForwardSpec(Upstream.PAYSTACK, "transferrecipient", "POST", Credential.SECRET)
TRANSFER = ForwardSpec(Upstream.PAYSTACK, "transfer", "POST", Credential.SECRET)


def validate_account_number(account_number: str) -> str:
    if not ACCOUNT_NUMBER_PATTERN.match(account_number or ""):
        raise ValidationError("Account number must be exactly 10 digits")
    return account_number


def dedupe_banks(banks: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop banks whose code was already seen, keeping first-seen order"""
    seen = set()
    unique = []
    for bank in banks:
        code = bank.get("code")
        if code in seen:
            continue
        seen.add(code)
        unique.append(bank)
    return unique


def _require_data(result, what: str) -> Dict[str, Any]:
    data = result.data
    if not isinstance(data, dict):
        logger.error("Paystack payload missing data", operation=what, status_code=result.status_code)
        raise ProxyError(f"Invalid {what} response from Paystack")
    return data


async def initialize_payment(
    forwarder: RouteForwarder,
    email: str,
    amount: float,
    user_id: str,
    callback_url: str
) -> Dict[str, str]:
    payload = {
        "email": email,
        "amount": to_minor_units(amount),
        "callback_url": callback_url,
        "metadata": {"userId": user_id},
    }

    result = await forwarder.forward(INITIALIZE, body=payload)
    result.raise_for_upstream("Payment initialization failed")

    data = _require_data(result, "initialization")
    logger.info("Payment initialized", reference=data.get("reference"), user_id=user_id)
    return {
        "authorization_url": data.get("authorization_url"),
        "access_code": data.get("access_code"),
        "reference": data.get("reference"),
    }


async def verify_payment(forwarder: RouteForwarder, reference: str) -> Dict[str, Any]:
    """
    Verify a transaction by reference.

    A transaction that exists but did not succeed is reported as
    ``success: False`` rather than raised.
    """
    result = await forwarder.forward(VERIFY, path_params={"reference": reference})
    result.raise_for_upstream("Payment verification failed")

    data = _require_data(result, "verification")
    status = data.get("status")
    if status != "success":
        logger.info("Payment not successful", reference=reference, status=status)
        return {
            "success": False,
            "message": "Transaction was not successful",
            "status": status,
        }

    # Paystack sends an empty string when no metadata was attached
    metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
    customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
    amount = data.get("amount")

    return {
        "success": True,
        "message": "Payment verified successfully",
        "userId": metadata.get("userId"),
        "amount": to_major_units(amount) if amount is not None else None,
        "reference": data.get("reference", reference),
        "email": customer.get("email"),
        "channel": data.get("channel"),
        "currency": data.get("currency"),
        "status": status,
    }


async def list_banks(forwarder: RouteForwarder) -> List[Dict[str, Any]]:
    result = await forwarder.forward(BANKS, query={"country": "nigeria", "currency": "NGN"})
    result.raise_for_upstream("Failed to fetch banks")

    banks = result.data
    if not isinstance(banks, list):
        raise ProxyError("Invalid bank list response from Paystack")
    return dedupe_banks(banks)


async def resolve_account(forwarder: RouteForwarder, account_number: str, bank_code: str) -> Dict[str, Any]:
    validate_account_number(account_number)

    result = await forwarder.forward(
        RESOLVE_ACCOUNT,
        query={"account_number": account_number, "bank_code": bank_code}
    )
    result.raise_for_upstream("Could not resolve account")

    data = _require_data(result, "account resolution")
    return {
        "success": True,
        "accountName": data.get("account_name"),
        "accountNumber": data.get("account_number", account_number),
    }


async def create_recipient(
    forwarder: RouteForwarder,
    account_name: str,
    account_number: str,
    bank_code: str
) -> Dict[str, Any]:
    payload = {
        "type": "nuban",
        "name": account_name,
        "account_number": account_number,
        "bank_code": bank_code,
        "currency": "NGN",
    }

    result = await forwarder.forward(CREATE_RECIPIENT, body=payload)
    result.raise_for_upstream("Failed to create transfer recipient")

    data = _require_data(result, "recipient")
    return {"success": True, "recipientCode": data.get("recipient_code")}


async def initiate_transfer(
    forwarder: RouteForwarder,
    amount: float,
    recipient_code: str,
    reference: str,
    reason: Optional[str] = None
) -> Dict[str, Any]:
    payload = {
        "source": "balance",
        "amount": to_minor_units(amount),
        "recipient": recipient_code,
        "reference": reference,
        "reason": reason or "Wallet withdrawal",
    }

    result = await forwarder.forward(TRANSFER, body=payload)
    result.raise_for_upstream("Transfer failed")

    data = _require_data(result, "transfer")
    logger.info("Transfer initiated", reference=reference, status=data.get("status"))
    return {
        "success": True,
        "message": result.body.get("message") or "Transfer initiated",
        "reference": data.get("reference", reference),
        "transferCode": data.get("transfer_code"),
    }
