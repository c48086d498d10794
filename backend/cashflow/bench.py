"""
Benchmark and comparison entry points for the settlement engine.

Usage:
    cashflow-bench run --members 10000 --iterations 10
    cashflow-bench run --input members.json
    cashflow-bench compare
    cashflow-bench generate --members 10000 --output members.json
"""
from __future__ import annotations

import argparse
import json
import random
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from cashflow.config import get_settings
from cashflow.logging import configure_logging
from cashflow.schemas import SettleRequest
from cashflow.services.quantize import from_subunits, to_subunits
from cashflow.services.settlement_calculator import Member, SettlementResult, settle_group

# Ten members, nets sum to zero. Sequential matching needs k - 1 = 9 payments.
IMBALANCED_SCENARIO = [
    Member(id="C", net=-50.0),
    Member(id="I", net=10.0),
    Member(id="B", net=-100.0),
    Member(id="G", net=100.0),
    Member(id="A", net=-500.0),
    Member(id="F", net=500.0),
    Member(id="J", net=10.0),
    Member(id="H", net=50.0),
    Member(id="E", net=-10.0),
    Member(id="D", net=-10.0),
]


@dataclass(frozen=True, slots=True)
class Comparison:
    non_zero_members: int
    baseline_transactions: int
    result: SettlementResult

    @property
    def heap_transactions(self) -> int:
        return len(self.result.transactions)

    @property
    def reduction_percent(self) -> float:
        if self.baseline_transactions <= 0:
            return 0.0
        saved = self.baseline_transactions - self.heap_transactions
        return saved / self.baseline_transactions * 100


def generate_members(count: int, seed: Optional[int] = None, max_cents: int = 100_000) -> list[Member]:
    """Random member list whose nets sum to exactly zero (the last member absorbs the total)."""
    if count < 0:
        raise ValueError("count must be non-negative")
    rng = random.Random(seed)
    cents = [rng.randint(-max_cents, max_cents) for _ in range(max(count - 1, 0))]
    if count:
        cents.append(-sum(cents))
    return [Member(id=f"m{i:06d}", net=from_subunits(c)) for i, c in enumerate(cents)]


def load_members(path: Path) -> list[Member]:
    """Read a JSON file holding either a list of members or {"members": [...]}."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, list):
        raw = {"members": raw}
    request = SettleRequest.model_validate(raw)
    ids = [m.id for m in request.members]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate member IDs found")
    return [Member(id=m.id, net=m.net) for m in request.members]


def dump_members(members: Sequence[Member], path: Path) -> None:
    payload = [{"id": m.id, "net": float(m.net)} for m in members]
    path.write_text(json.dumps(payload), encoding="utf-8")


def time_settlement(members: Sequence[Member], iterations: int = 10) -> list[float]:
    """Wall-clock milliseconds of settle_group for each iteration."""
    timings = []
    for _ in range(iterations):
        start = time.perf_counter()
        settle_group(members)
        timings.append((time.perf_counter() - start) * 1000)
    return timings


def sequential_baseline(members: Sequence[Member]) -> int:
    """Transactions a naive chain needs: one fewer than the non-zero members."""
    non_zero = sum(1 for m in members if to_subunits(m.net) != 0)
    return max(non_zero - 1, 0)


def compare(members: Sequence[Member]) -> Comparison:
    return Comparison(
        non_zero_members=sum(1 for m in members if to_subunits(m.net) != 0),
        baseline_transactions=sequential_baseline(members),
        result=settle_group(members),
    )


def _members_from_args(args) -> list[Member]:
    if args.input:
        return load_members(Path(args.input))
    return generate_members(args.members, seed=args.seed)


def run_command(args) -> int:
    members = _members_from_args(args)
    print(f"Benchmarking {len(members)} members across {args.iterations} iterations...")
    print(f"Transactions generated: {len(settle_group(members).transactions)}")
    timings = time_settlement(members, args.iterations)
    for i, elapsed in enumerate(timings, start=1):
        print(f"Iteration {i}: {elapsed:.3f} ms")
    if timings:
        print(f"Best: {min(timings):.3f} ms  Mean: {sum(timings) / len(timings):.3f} ms")
    return 0


def compare_command(args) -> int:
    members = load_members(Path(args.input)) if args.input else IMBALANCED_SCENARIO
    comparison = compare(members)
    result = comparison.result

    print(f"Input members (non-zero): {comparison.non_zero_members}")
    print(f"Sequential baseline (k - 1): {comparison.baseline_transactions} transactions")
    print(f"Max-heap greedy:             {comparison.heap_transactions} transactions")
    print(f"Reduction: {comparison.reduction_percent:.2f}%")
    print()
    for t in result.transactions:
        print(f"- {t.from_id} pays {t.to_id}: {t.amount:.2f}")
    if result.unsettled:
        print(f"Unsettled: {result.unsettled_amount:.2f} across {len(result.unsettled)} members")
    return 0


def generate_command(args) -> int:
    members = generate_members(args.members, seed=args.seed)
    dump_members(members, Path(args.output))
    print(f"Wrote {len(members)} members to {args.output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cashflow-bench",
        description="Benchmark and compare the greedy settlement engine",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Time settle_group over a member list")
    source = run.add_mutually_exclusive_group()
    source.add_argument("--members", type=int, default=10_000, help="Generate this many members (default: 10000)")
    source.add_argument("--input", type=str, help="Load members from a JSON file")
    run.add_argument("--iterations", type=int, default=10, help="Timed runs (default: 10)")
    run.add_argument("--seed", type=int, default=None, help="Random seed for generated members")
    run.set_defaults(func=run_command)

    cmp_ = sub.add_parser("compare", help="Compare against the sequential k - 1 baseline")
    cmp_.add_argument("--input", type=str, help="Load members from a JSON file (default: built-in scenario)")
    cmp_.set_defaults(func=compare_command)

    gen = sub.add_parser("generate", help="Write a zero-sum random member list as JSON")
    gen.add_argument("--members", type=int, required=True)
    gen.add_argument("--output", type=str, required=True)
    gen.add_argument("--seed", type=int, default=None)
    gen.set_defaults(func=generate_command)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    try:
        return args.func(args)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
