"""Pydantic schemas for request/response."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ----- Request -----
class MemberIn(BaseModel):
    id: str = Field(..., min_length=1, strict=True)
    # strict: "12.5", true and null are rejected rather than coerced
    net: float = Field(..., strict=True, allow_inf_nan=False)


class SettleRequest(BaseModel):
    members: list[MemberIn]


# ----- Response -----
class TransactionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(..., alias="from")
    to: str
    amount: float


class ResidualOut(BaseModel):
    id: str
    amount: float


class SettlementSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_members: int = Field(..., alias="totalMembers")
    total_transactions: int = Field(..., alias="totalTransactions")
    total_amount: float = Field(..., alias="totalAmount")
    unsettled_amount: float = Field(0.0, alias="unsettledAmount")


class SettleResponse(BaseModel):
    transactions: list[TransactionOut]
    summary: SettlementSummary
    unsettled: list[ResidualOut] = []


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: str
