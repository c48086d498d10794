"""Convert currency amounts to integer subunits (cents) and back."""
from decimal import Decimal, ROUND_HALF_UP, localcontext

SUBUNITS = 100
TWOPLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        dec = value
    else:
        # str() gives the shortest repr, so 1.005 stays 1.005 instead of 1.00499...
        dec = Decimal(str(value))
    if not dec.is_finite():
        raise ValueError(f"amount must be finite, got {value!r}")
    return dec


def to_subunits(net) -> int:
    """round(net * 100), halves rounded away from zero. Exact at any magnitude."""
    dec = to_decimal(net)
    with localcontext() as ctx:
        # x100 adds at most 3 coefficient digits
        ctx.prec = max(ctx.prec, len(dec.as_tuple().digits) + 3)
        scaled = dec * SUBUNITS
        return int(scaled.to_integral_value(rounding=ROUND_HALF_UP))


def from_subunits(amount: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(abs(amount))) + 2)
        return (Decimal(amount) / SUBUNITS).quantize(TWOPLACES)


def split_balances(members) -> tuple[list[tuple[str, int]], list[tuple[str, int]]]:
    """
    members: iterable of objects with .id and .net.
    Returns (creditors, debtors) as (id, subunits) pairs, debtor amounts as
    positive magnitudes. Members that quantize to zero are dropped.
    """
    creditors: list[tuple[str, int]] = []
    debtors: list[tuple[str, int]] = []
    for m in members:
        cents = to_subunits(m.net)
        if cents > 0:
            creditors.append((m.id, cents))
        elif cents < 0:
            debtors.append((m.id, -cents))
    return creditors, debtors
