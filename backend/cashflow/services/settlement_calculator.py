"""Greedy settlement: match the largest creditor with the largest debtor until one side runs out."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Union

from cashflow.logging import get_logger
from cashflow.services.heap import HeapNode, MaxHeap
from cashflow.services.quantize import from_subunits, split_balances, to_subunits

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Member:
    id: str
    net: Union[Decimal, float, int]


@dataclass(frozen=True, slots=True)
class Transaction:
    from_id: str
    to_id: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class Residual:
    """Balance left unmatched: positive is still owed to id, negative is still owed by id."""
    id: str
    amount: Decimal


@dataclass(slots=True)
class SettlementResult:
    transactions: list[Transaction] = field(default_factory=list)
    unsettled: list[Residual] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return from_subunits(sum(to_subunits(t.amount) for t in self.transactions))

    @property
    def unsettled_amount(self) -> Decimal:
        return from_subunits(sum(abs(to_subunits(r.amount)) for r in self.unsettled))


def build_heaps(members: Iterable[Member]) -> tuple[MaxHeap, MaxHeap]:
    creditors, debtors = split_balances(members)
    return (
        MaxHeap(HeapNode(amount=cents, id=uid) for uid, cents in creditors),
        MaxHeap(HeapNode(amount=cents, id=uid) for uid, cents in debtors),
    )


def settle_heaps(creditors: MaxHeap, debtors: MaxHeap) -> list[Transaction]:
    """
    Drain both heaps against each other. Consumes the heaps; whatever is left
    in the non-empty one afterwards was never matched.
    """
    out: list[Transaction] = []
    while not creditors.is_empty() and not debtors.is_empty():
        cred = creditors.pop()
        debt = debtors.pop()
        settled = min(cred.amount, debt.amount)
        out.append(Transaction(from_id=debt.id, to_id=cred.id, amount=from_subunits(settled)))

        if cred.amount > settled:
            creditors.push(HeapNode(amount=cred.amount - settled, id=cred.id))
        if debt.amount > settled:
            debtors.push(HeapNode(amount=debt.amount - settled, id=debt.id))
    return out


def settle_group(members: Iterable[Member]) -> SettlementResult:
    """
    members: objects with .id (unique str) and .net (finite number; positive = is owed money).
    Returns the ordered transfers plus any residual when the balances don't net to zero.
    """
    creditors, debtors = build_heaps(members)
    result = SettlementResult(transactions=settle_heaps(creditors, debtors))

    while not creditors.is_empty():
        node = creditors.pop()
        result.unsettled.append(Residual(id=node.id, amount=from_subunits(node.amount)))
    while not debtors.is_empty():
        node = debtors.pop()
        result.unsettled.append(Residual(id=node.id, amount=-from_subunits(node.amount)))

    if result.unsettled:
        log.warning(
            "settle.unsettled",
            residuals=len(result.unsettled),
            amount=str(result.unsettled_amount),
        )
    return result


def compute_settlements(members: Iterable[Member]) -> list[Transaction]:
    return settle_group(members).transactions
