from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional, Union


# Paystack payment schemas
class InitializePaymentRequest(BaseModel):
    email: str = Field(min_length=1)
    amount: float = Field(gt=0, description="Amount in naira")
    userId: Union[str, int]

    @field_validator('userId')
    @classmethod
    def validate_user_id(cls, v):
        # Wallet ids arrive as numbers from some clients
        v = str(v)
        if not v:
            raise ValueError('userId must not be empty')
        return v


# Withdrawal schemas
class ResolveAccountRequest(BaseModel):
    accountNumber: str
    bankCode: str = Field(min_length=1)


class CreateRecipientRequest(BaseModel):
    accountName: str = Field(min_length=1)
    accountNumber: str
    bankCode: str = Field(min_length=1)


class InitiateTransferRequest(BaseModel):
    amount: float = Field(gt=0, description="Amount in naira")
    recipientCode: str = Field(min_length=1)
    reference: str = Field(min_length=1)
    reason: Optional[str] = None


# eBills catalogue schemas
class FetchRatesRequest(BaseModel):
    type: Literal["data", "tv"]
    provider: Optional[str] = None


# Purchase schemas
class VtuTransactionRequest(BaseModel):
    serviceType: Literal["airtime", "data", "cable"]
    amount: float = Field(gt=0, description="Amount in naira")
    phone: Optional[str] = None
    network: Optional[str] = None
    variationId: Optional[str] = None
    customerId: Optional[str] = None


class ElectricityPurchaseRequest(BaseModel):
    amount: float = Field(gt=0, description="Amount in naira")
    provider: str = Field(min_length=1)
    customerId: str = Field(min_length=1)
    variationId: str = Field(min_length=1)


class BettingFundRequest(BaseModel):
    amount: float = Field(gt=0, description="Amount in naira")
    provider: str = Field(min_length=1)
    customerId: str = Field(min_length=1)
