"""
eBills Routes
Bill-payment endpoints: token bootstrap, relay routes, rate catalogue and
customer verification
"""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
import structlog

from app.models.schemas import FetchRatesRequest
from app.services import ebills_service
from app.utils.dependencies import get_forwarder, get_token_manager
from app.utils.errors import ValidationError
from app.utils.forwarder import ForwardSpec, RouteForwarder, Upstream
from app.utils.token_manager import TokenManager

logger = structlog.get_logger(__name__)

router = APIRouter()

# Routes whose upstream status and JSON body are relayed unmodified
RELAY_ROUTES = {
    "/balance": ForwardSpec(Upstream.EBILLS, "balance"),
    "/variations/data": ForwardSpec(Upstream.EBILLS, "variations/data", query_params=("service_id",)),
    "/variations/tv": ForwardSpec(Upstream.EBILLS, "variations/tv", query_params=("service_id",)),
    "/verify-customer": ForwardSpec(Upstream.EBILLS, "verify-customer", "POST"),
    "/airtime": ForwardSpec(Upstream.EBILLS, "airtime", "POST"),
    "/data": ForwardSpec(Upstream.EBILLS, "data", "POST"),
    "/tv": ForwardSpec(Upstream.EBILLS, "tv", "POST"),
    "/electricity": ForwardSpec(Upstream.EBILLS, "electricity", "POST"),
    "/betting": ForwardSpec(Upstream.EBILLS, "betting", "POST"),
}


async def read_json_body(request: Request) -> Any:
    """Inbound JSON body; an empty body reads as an empty object"""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON") from e


def make_relay_handler(spec: ForwardSpec):
    """Build the endpoint that forwards one ForwardSpec and relays the reply"""

    async def relay(request: Request, forwarder: RouteForwarder = Depends(get_forwarder)):
        body = await read_json_body(request) if spec.has_body else None
        result = await forwarder.forward(spec, query=request.query_params, body=body)
        return JSONResponse(status_code=result.status_code, content=result.body)

    relay.__name__ = f"relay_{spec.path.replace('/', '_').replace('-', '_')}"
    relay.__doc__ = f"Relay {spec.method} {spec.path} to eBills"
    return relay


for route_path, route_spec in RELAY_ROUTES.items():
    router.add_api_route(route_path, make_relay_handler(route_spec), methods=[route_spec.method])


@router.post("/auth")
async def authenticate(token_manager: TokenManager = Depends(get_token_manager)):
    """Force a fresh eBills token and return it"""
    token = await token_manager.refresh()
    return {"success": True, "token": token}


@router.post("/fetch-rates")
async def fetch_rates(
    rates_request: FetchRatesRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Available data or TV plans grouped by provider"""
    rates = await ebills_service.fetch_rates(forwarder, rates_request.type, rates_request.provider)
    return {"success": True, "rates": rates}


async def _verify(forwarder: RouteForwarder, service_id: str, customer_id: str, variation_id: Optional[str] = None):
    data = await ebills_service.verify_customer(forwarder, service_id, customer_id, variation_id)
    if data:
        return {"success": True, "data": data}
    return {"success": False, "message": "Customer verification failed"}


@router.get("/tv/verify")
async def verify_tv_customer(
    provider: Optional[str] = None,
    customerId: Optional[str] = None,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Verify a TV smartcard number"""
    if ebills_service.missing_params(provider=provider, customerId=customerId):
        raise ValidationError("Missing provider or customerId")
    return await _verify(forwarder, provider, customerId)


@router.get("/electricity/verify")
async def verify_electricity_customer(
    service_id: Optional[str] = None,
    customer_id: Optional[str] = None,
    variation_id: Optional[str] = None,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Verify a meter number for a distribution company and meter type"""
    if ebills_service.missing_params(service_id=service_id, customer_id=customer_id, variation_id=variation_id):
        raise ValidationError("Missing service_id, customer_id, or variation_id")
    return await _verify(forwarder, service_id, customer_id, variation_id)


@router.get("/betting/verify")
async def verify_betting_customer(
    provider: Optional[str] = None,
    customerId: Optional[str] = None,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Verify a betting account id"""
    if ebills_service.missing_params(provider=provider, customerId=customerId):
        raise ValidationError("Missing provider or customerId")
    return await _verify(forwarder, provider, customerId)


# Paths the wallet app has always called, mounted under /api
api_router = APIRouter()
api_router.add_api_route("/vtu/fetch-rates", fetch_rates, methods=["POST"])
api_router.add_api_route("/tv/verify", verify_tv_customer, methods=["GET"])
api_router.add_api_route("/electricity/verify", verify_electricity_customer, methods=["GET"])
api_router.add_api_route("/betting/verify", verify_betting_customer, methods=["GET"])
