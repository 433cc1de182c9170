"""
eBills catalogue, customer verification and webhook status helpers
"""

from typing import Any, Dict, Iterable, List, Optional

import structlog

from app.utils.errors import ProxyError, ValidationError
from app.utils.forwarder import ForwardSpec, RouteForwarder, Upstream

logger = structlog.get_logger(__name__)

DATA_PROVIDERS = ["mtn", "airtel", "glo", "9mobile", "smile"]

WEBHOOK_SUCCESS_STATUSES = {"completed-api", "ORDER COMPLETED", "success"}
WEBHOOK_FAILED_STATUSES = {"failed", "refunded", "error"}

VERIFY_CUSTOMER = ForwardSpec(Upstream.EBILLS, "verify-customer", "POST")
VARIATIONS = {
    "data": ForwardSpec(Upstream.EBILLS, "variations/data", query_params=("service_id",)),
    "tv": ForwardSpec(Upstream.EBILLS, "variations/tv", query_params=("service_id",)),
}


def build_rate_table(plans: Iterable[Dict[str, Any]], plan_type: str, provider: Optional[str] = None) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """
    Group available variation plans by provider and variation id.

    Data plans are limited to the known networks and SME bundles are dropped;
    TV plans are limited to the requested provider.
    """
    if plan_type == "data":
        valid_providers = DATA_PROVIDERS
    else:
        valid_providers = [provider.lower()] if provider else []

    rates: Dict[str, Dict[str, Dict[str, Any]]] = {}
    for plan in plans:
        service_id = str(plan.get("service_id") or "").lower()
        if service_id not in valid_providers:
            continue
        if plan.get("availability") != "Available":
            continue

        plan_name = plan.get("data_plan") or ""
        if plan_type == "data" and "(sme)" in plan_name.lower():
            continue

        variation_id = str(plan.get("variation_id"))
        rates.setdefault(service_id, {})[variation_id] = {
            "price": _parse_price(plan.get("price")),
            "name": plan_name or plan.get("name") or f"Plan {variation_id}",
        }

    return rates


def _parse_price(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


async def fetch_rates(forwarder: RouteForwarder, plan_type: str, provider: Optional[str] = None) -> Dict[str, Any]:
    """Fetch variations for a plan type and reduce them to a rate table"""
    if plan_type == "tv" and not provider:
        raise ValidationError("provider is required for tv rates")

    query = {"service_id": provider.lower()} if plan_type == "tv" else None
    result = await forwarder.forward(VARIATIONS[plan_type], query=query)

    body = result.body
    if not isinstance(body, dict) or body.get("code") != "success" or not isinstance(body.get("data"), list):
        logger.error("Unexpected variations payload", plan_type=plan_type, status_code=result.status_code)
        raise ProxyError("Invalid response from eBills")

    return build_rate_table(body["data"], plan_type, provider)


async def verify_customer(
    forwarder: RouteForwarder,
    service_id: str,
    customer_id: str,
    variation_id: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """Return the customer record eBills resolves, or None when it does not"""
    body: Dict[str, Any] = {"service_id": service_id, "customer_id": customer_id}
    if variation_id:
        body["variation_id"] = variation_id

    result = await forwarder.forward(VERIFY_CUSTOMER, body=body)
    if isinstance(result.body, dict) and result.body.get("code") == "success":
        return result.data
    return None


def classify_webhook_status(status: Any) -> str:
    """Collapse the many eBills order states into success, failed or pending"""
    if not isinstance(status, str):
        return "pending"
    if status in WEBHOOK_SUCCESS_STATUSES:
        return "success"
    if status in WEBHOOK_FAILED_STATUSES:
        return "failed"
    return "pending"


def missing_params(**params: Optional[str]) -> List[str]:
    return [name for name, value in params.items() if not value]
