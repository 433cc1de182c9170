"""
eBills purchase flows

Airtime, data, cable, electricity and betting purchases with the pre-flight
checks the wallet relies on: platform balance, amount limits and customer
verification. Nothing is stored; the caller gets the eBills outcome back.
"""

import time
import uuid
from typing import Any, Dict, Optional

import structlog

from app.services.ebills_service import missing_params, verify_customer
from app.utils.errors import ProxyError, TransportError, ValidationError
from app.utils.forwarder import ForwardSpec, ProxyResult, RouteForwarder, Upstream

logger = structlog.get_logger(__name__)

BALANCE = ForwardSpec(Upstream.EBILLS, "balance")
AIRTIME = ForwardSpec(Upstream.EBILLS, "airtime", "POST")
DATA = ForwardSpec(Upstream.EBILLS, "data", "POST")
TV = ForwardSpec(Upstream.EBILLS, "tv", "POST")
ELECTRICITY = ForwardSpec(Upstream.EBILLS, "electricity", "POST")
BETTING = ForwardSpec(Upstream.EBILLS, "betting", "POST")

VALID_PROVIDERS = [
    "ikeja-electric",
    "eko-electric",
    "kano-electric",
    "portharcourt-electric",
    "jos-electric",
    "ibadan-electric",
    "kaduna-electric",
    "abuja-electric",
    "enugu-electric",
    "benin-electric",
    "aba-electric",
    "yola-electric",
]
VALID_VARIATIONS = ["prepaid", "postpaid"]

VALID_BETTING_PROVIDERS = [
    "1xBet",
    "BangBet",
    "Bet9ja",
    "BetKing",
    "BetLand",
    "BetLion",
    "BetWay",
    "CloudBet",
    "LiveScoreBet",
    "MerryBet",
    "NaijaBet",
    "NairaBet",
    "SupaBet",
]

ELECTRICITY_MIN_AMOUNT = 1000
ELECTRICITY_MAX_AMOUNT = 100000
BETTING_MIN_AMOUNT = 100
BETTING_MAX_AMOUNT = 100000


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def new_request_id(kind: str) -> str:
    """Unique eBills request id, e.g. ``req_1712345678901_airtime_3f2a9c1d``"""
    return f"req_{int(time.time() * 1000)}_{kind}_{uuid.uuid4().hex[:8]}"


async def get_platform_balance(forwarder: RouteForwarder) -> float:
    """
    Current eBills wallet balance in naira.

    An unreadable balance counts as zero so the purchase is refused rather
    than attempted blind.
    """
    try:
        result = await forwarder.forward(BALANCE)
    except TransportError as e:
        logger.error("Balance lookup failed", error=e.message)
        return 0.0

    data = result.data
    if not result.ok or not isinstance(data, dict):
        logger.warning("Unexpected balance payload", status_code=result.status_code)
        return 0.0
    return _as_float(data.get("balance"))


def _require_success(result: ProxyResult, operation: str) -> Dict[str, Any]:
    body = result.body
    if isinstance(body, dict) and body.get("code") == "success":
        return body

    message = "eBills failed"
    if isinstance(body, dict) and body.get("message"):
        message = str(body["message"])
    logger.warning("Purchase rejected by eBills", operation=operation, status_code=result.status_code, message=message)
    raise ValidationError(message, details={"upstream": body})


def _order_status(body: Dict[str, Any]) -> str:
    data = body.get("data")
    if isinstance(data, dict) and data.get("status") == "completed-api":
        return "completed"
    return "processing"


async def purchase_vtu(
    forwarder: RouteForwarder,
    service_type: str,
    amount: float,
    phone: Optional[str] = None,
    network: Optional[str] = None,
    variation_id: Optional[str] = None,
    customer_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Buy airtime, a data bundle or a cable subscription.

    Raises:
        ProxyError: 402 when the platform balance cannot cover the amount
        ValidationError: missing fields for the service type, or eBills
            declined the order
    """
    if service_type == "airtime":
        required = {"phone": phone, "network": network}
    elif service_type == "data":
        required = {"phone": phone, "network": network, "variationId": variation_id}
    elif service_type == "cable":
        required = {"customerId": customer_id, "network": network, "variationId": variation_id}
    else:
        raise ValidationError("Invalid service type")

    missing = missing_params(**required)
    if missing:
        raise ValidationError(f"Missing {', '.join(missing)} for {service_type}")

    balance = await get_platform_balance(forwarder)
    if balance < amount:
        logger.warning("Platform balance too low", service_type=service_type, amount=amount, balance=balance)
        raise ProxyError("Insufficient eBills balance", status_code=402)

    request_id = new_request_id(service_type)
    service_id = network.lower()

    if service_type == "airtime":
        spec = AIRTIME
        payload = {"phone": phone, "service_id": service_id, "amount": amount, "request_id": request_id}
    elif service_type == "data":
        spec = DATA
        payload = {"phone": phone, "service_id": service_id, "variation_id": variation_id, "request_id": request_id}
    else:
        spec = TV
        payload = {
            "customer_id": customer_id,
            "service_id": service_id,
            "variation_id": variation_id,
            "request_id": request_id,
        }

    result = await forwarder.forward(spec, body=payload)
    body = _require_success(result, service_type)

    status = _order_status(body)
    logger.info("VTU purchase placed", service_type=service_type, request_id=request_id, status=status)
    return {"success": True, "requestId": request_id, "status": status, "response": body}


async def purchase_electricity(
    forwarder: RouteForwarder,
    amount: float,
    provider: str,
    customer_id: str,
    variation_id: str
) -> Dict[str, Any]:
    """
    Buy electricity units for a verified meter.

    The meter is verified before purchase; eBills reports a minimum purchase
    and any outstanding arrears, and the amount must cover both.
    """
    if provider not in VALID_PROVIDERS or variation_id not in VALID_VARIATIONS:
        raise ValidationError("Invalid provider or meter type")
    if amount < ELECTRICITY_MIN_AMOUNT or amount > ELECTRICITY_MAX_AMOUNT:
        raise ValidationError("Amount out of range")

    balance = await get_platform_balance(forwarder)
    if balance < amount:
        logger.warning("Platform balance too low", service_type="electricity", amount=amount, balance=balance)
        raise ProxyError("Platform funds low", status_code=503)

    customer = await verify_customer(forwarder, provider, customer_id, variation_id)
    if not isinstance(customer, dict):
        raise ValidationError("Invalid meter")
    if _as_float(customer.get("min_purchase_amount")) > amount:
        raise ValidationError("Below minimum")
    arrears = _as_float(customer.get("customer_arrears"))
    if arrears > 0 and amount < arrears:
        raise ValidationError("Below arrears")

    request_id = new_request_id("electricity")
    result = await forwarder.forward(ELECTRICITY, body={
        "request_id": request_id,
        "customer_id": customer_id,
        "service_id": provider,
        "variation_id": variation_id,
        "amount": amount,
    })
    body = _require_success(result, "electricity")

    status = _order_status(body)
    logger.info("Electricity purchase placed", provider=provider, request_id=request_id, status=status)
    return {
        "success": True,
        "requestId": request_id,
        "status": status,
        "customerName": customer.get("customer_name"),
        "customerAddress": customer.get("customer_address"),
        "response": body,
    }


async def fund_betting(
    forwarder: RouteForwarder,
    amount: float,
    provider: str,
    customer_id: str
) -> Dict[str, Any]:
    """Top up a verified betting account"""
    if provider not in VALID_BETTING_PROVIDERS:
        raise ValidationError("Invalid provider")
    if amount < BETTING_MIN_AMOUNT or amount > BETTING_MAX_AMOUNT:
        raise ValidationError("Amount out of range")

    balance = await get_platform_balance(forwarder)
    if balance < amount:
        logger.warning("Platform balance too low", service_type="betting", amount=amount, balance=balance)
        raise ProxyError("Platform funds low", status_code=503)

    customer = await verify_customer(forwarder, provider, customer_id)
    if not isinstance(customer, dict):
        raise ValidationError("Invalid customer ID")

    request_id = new_request_id("betting")
    result = await forwarder.forward(BETTING, body={
        "request_id": request_id,
        "customer_id": customer_id,
        "service_id": provider,
        "amount": amount,
    })
    body = _require_success(result, "betting")

    logger.info("Betting account funded", provider=provider, request_id=request_id)
    return {
        "success": True,
        "requestId": request_id,
        "status": _order_status(body),
        "customerName": customer.get("customer_name") or customer_id,
        "response": body,
    }
