import json
from decimal import Decimal

import pytest

from cashflow.bench import (
    IMBALANCED_SCENARIO, compare, generate_members, load_members, main, sequential_baseline, time_settlement,
)
from cashflow.services.quantize import to_subunits
from cashflow.services.settlement_calculator import Member


def test_generate_members_sums_to_zero():
    members = generate_members(100, seed=7)
    assert len(members) == 100
    assert len({m.id for m in members}) == 100
    assert sum(to_subunits(m.net) for m in members) == 0
    assert generate_members(100, seed=7) == members


def test_generate_members_edge_counts():
    assert generate_members(0) == []
    assert [m.net for m in generate_members(1, seed=1)] == [Decimal("0.00")]


def test_imbalanced_scenario_comparison():
    comparison = compare(IMBALANCED_SCENARIO)
    assert comparison.non_zero_members == 10
    assert comparison.baseline_transactions == 9
    assert comparison.heap_transactions == 5
    assert comparison.reduction_percent == pytest.approx(44.444, rel=1e-3)
    assert comparison.result.unsettled == []


def test_sequential_baseline_ignores_zero():
    members = [Member(id="a", net=0), Member(id="b", net=0.001), Member(id="c", net=2), Member(id="d", net=-2)]
    assert sequential_baseline(members) == 1
    assert sequential_baseline([]) == 0


def test_time_settlement_runs_each_iteration():
    timings = time_settlement(generate_members(50, seed=2), iterations=3)
    assert len(timings) == 3
    assert all(t >= 0 for t in timings)


def test_load_members_accepts_both_shapes(tmp_path):
    listed = tmp_path / "list.json"
    listed.write_text(json.dumps([{"id": "a", "net": 1.5}, {"id": "b", "net": -1.5}]))
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"members": [{"id": "a", "net": 1.5}, {"id": "b", "net": -1.5}]}))

    assert load_members(listed) == load_members(wrapped)
    assert [m.id for m in load_members(listed)] == ["a", "b"]


def test_load_members_rejects_duplicates(tmp_path):
    path = tmp_path / "dup.json"
    path.write_text(json.dumps([{"id": "a", "net": 1}, {"id": "a", "net": -1}]))
    with pytest.raises(ValueError):
        load_members(path)


def test_cli_generate_then_run(tmp_path, capsys):
    output = tmp_path / "members.json"
    assert main(["generate", "--members", "30", "--output", str(output), "--seed", "4"]) == 0
    assert len(json.loads(output.read_text())) == 30

    assert main(["run", "--input", str(output), "--iterations", "2"]) == 0
    out = capsys.readouterr().out
    assert "Iteration 2:" in out
    assert "Best:" in out


def test_cli_compare_default(capsys):
    assert main(["compare"]) == 0
    out = capsys.readouterr().out
    assert "Reduction: 44.44%" in out
    assert "- A pays F: 500.00" in out


def test_cli_missing_file(tmp_path, capsys):
    assert main(["run", "--input", str(tmp_path / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_configures_logging(monkeypatch, capsys):
    calls = []
    monkeypatch.setattr("cashflow.bench.configure_logging", lambda level: calls.append(level))
    assert main(["compare"]) == 0
    assert calls == ["INFO"]
