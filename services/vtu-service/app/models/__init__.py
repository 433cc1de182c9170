"""
Request/response models for vtu service
"""

from .schemas import (
    InitializePaymentRequest,
    ResolveAccountRequest,
    CreateRecipientRequest,
    InitiateTransferRequest,
    FetchRatesRequest,
    VtuTransactionRequest,
    ElectricityPurchaseRequest,
    BettingFundRequest,
)

__all__ = [
    "InitializePaymentRequest",
    "ResolveAccountRequest",
    "CreateRecipientRequest",
    "InitiateTransferRequest",
    "FetchRatesRequest",
    "VtuTransactionRequest",
    "ElectricityPurchaseRequest",
    "BettingFundRequest",
]
