"""Tests that every bundled example compiles cleanly."""

from pathlib import Path

import pytest

from sankey_dsl import DiagramState, load_definition

EXAMPLES_DIR = Path(__file__).parent.parent.parent / "examples"

EXAMPLE_FILES = sorted(EXAMPLES_DIR.glob("*.skm.txt"))


@pytest.mark.parametrize("path", EXAMPLE_FILES, ids=[p.name.replace(".skm.txt", "") for p in EXAMPLE_FILES])
def test_example_compiles_without_issues(path: Path) -> None:
    diagram = load_definition(path.read_text(), DiagramState())
    assert diagram.diagnostics.issues == []
    assert diagram.imbalances == []
    assert all(f.is_resolved for f in diagram.flows)


def test_budget_example() -> None:
    diagram = load_definition((EXAMPLES_DIR / "budget.skm.txt").read_text(), DiagramState())
    values = diagram.flow_values()
    assert values[("Budget", "Savings")] == 185
    assert diagram.stage_count == 3
    assert diagram.settings["size_w"] == 800
    assert diagram.settings["size_h"] == 500
    assert diagram.settings["margin_l"] == 40
    assert diagram.settings["value_prefix"] == "$"
    assert diagram.node("Budget").paint_inputs == ("<<", None)
    assert diagram.totals.balanced(1e-9)


def test_calculated_example() -> None:
    diagram = load_definition((EXAMPLES_DIR / "calculated.skm.txt").read_text(), DiagramState())
    values = diagram.flow_values()
    assert values[("Operations", "Profit")] == 400
    assert values[("Profit", "Dividends")] == 150
    assert values[("Profit", "Retained")] == 250
    assert diagram.stage_count == 5
