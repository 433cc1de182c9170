"""
Purchase Routes
Airtime, data, cable, electricity and betting purchases, mounted under /api
"""

from fastapi import APIRouter, Depends
import structlog

from app.models.schemas import BettingFundRequest, ElectricityPurchaseRequest, VtuTransactionRequest
from app.services import purchase_service
from app.utils.dependencies import get_forwarder
from app.utils.forwarder import RouteForwarder

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/vtu/transaction")
async def vtu_transaction(
    transaction: VtuTransactionRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Buy airtime, data or a cable subscription"""
    return await purchase_service.purchase_vtu(
        forwarder,
        service_type=transaction.serviceType,
        amount=transaction.amount,
        phone=transaction.phone,
        network=transaction.network,
        variation_id=transaction.variationId,
        customer_id=transaction.customerId
    )


@router.post("/electricity/purchase")
async def electricity_purchase(
    purchase: ElectricityPurchaseRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Buy electricity units for a prepaid or postpaid meter"""
    return await purchase_service.purchase_electricity(
        forwarder,
        amount=purchase.amount,
        provider=purchase.provider,
        customer_id=purchase.customerId,
        variation_id=purchase.variationId
    )


@router.post("/betting/fund")
async def betting_fund(
    funding: BettingFundRequest,
    forwarder: RouteForwarder = Depends(get_forwarder)
):
    """Top up a betting account"""
    return await purchase_service.fund_betting(
        forwarder,
        amount=funding.amount,
        provider=funding.provider,
        customer_id=funding.customerId
    )
