"""Settlements: turn a list of net balances into who pays whom."""
from fastapi import APIRouter, Depends, HTTPException

from cashflow.config import Settings, get_settings
from cashflow.logging import get_logger
from cashflow.schemas import (
    ErrorResponse, ResidualOut, SettleRequest, SettleResponse, SettlementSummary, TransactionOut,
)
from cashflow.services.settlement_calculator import Member, SettlementResult, settle_group

router = APIRouter(tags=["settlements"])
log = get_logger(__name__)


def _settle_response(member_count: int, result: SettlementResult) -> SettleResponse:
    return SettleResponse(
        transactions=[
            TransactionOut(from_=t.from_id, to=t.to_id, amount=float(t.amount))
            for t in result.transactions
        ],
        summary=SettlementSummary(
            total_members=member_count,
            total_transactions=len(result.transactions),
            total_amount=float(result.total_amount),
            unsettled_amount=float(result.unsettled_amount),
        ),
        unsettled=[ResidualOut(id=r.id, amount=float(r.amount)) for r in result.unsettled],
    )


@router.post(
    "/settle",
    response_model=SettleResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
def settle(data: SettleRequest, settings: Settings = Depends(get_settings)):
    if len(data.members) > settings.max_members:
        raise HTTPException(
            status_code=400,
            detail=f"Too many members: at most {settings.max_members} allowed",
        )
    ids = [m.id for m in data.members]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=400, detail="Duplicate member IDs found")

    result = settle_group(Member(id=m.id, net=m.net) for m in data.members)
    log.info(
        "settle.request",
        members=len(data.members),
        transactions=len(result.transactions),
        unsettled=len(result.unsettled),
    )
    return _settle_response(len(data.members), result)
