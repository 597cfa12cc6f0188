"""Tests for sankey_dsl.ir.graph: DiagramIR construction and topology queries."""

from sankey_dsl.ir.ast import FlowLine
from sankey_dsl.ir.flows import FlowBuilder
from sankey_dsl.ir.graph import DiagramIR
from sankey_dsl.ir.registry import NodeRegistry
from sankey_dsl.types import Side


def _make_ir(*specs: tuple[str, float, str], extra_nodes: tuple[str, ...] = ()) -> DiagramIR:
    registry = NodeRegistry()
    lines = [
        FlowLine(row=row, text="", source=s, target=t, amount=amount)
        for row, (s, amount, t) in enumerate(specs)
    ]
    flows = FlowBuilder(registry).build_all(lines)
    for name in extra_nodes:
        registry.register_or_update(name, 1000)
    return DiagramIR.from_model(registry.ordered(), flows)


class TestBasicConstruction:
    def test_empty(self):
        gir = _make_ir()
        assert gir.node_count() == 0
        assert gir.flow_count() == 0
        assert gir.stage_count() == 0

    def test_parallel_flows_kept(self):
        gir = _make_ir(("A", 1, "B"), ("A", 2, "B"))
        assert gir.node_count() == 2
        assert gir.flow_count() == 2
        assert gir.total("B", Side.IN) == 3

    def test_isolated_nodes_included(self):
        gir = _make_ir(("A", 1, "B"), extra_nodes=("Lonely",))
        assert gir.node_count() == 3
        assert gir.in_degree("Lonely") == 0

    def test_degree_of_unknown_node(self):
        gir = _make_ir(("A", 1, "B"))
        assert gir.in_degree("Nope") == 0
        assert gir.out_degree("Nope") == 0


class TestStages:
    def test_chain(self):
        gir = _make_ir(("A", 1, "B"), ("B", 1, "C"))
        assert gir.stage_count() == 3

    def test_longest_path_wins(self):
        gir = _make_ir(("A", 1, "B"), ("B", 1, "C"), ("A", 1, "C"), ("C", 1, "D"))
        assert gir.stage_count() == 4

    def test_cycle(self):
        gir = _make_ir(("A", 1, "B"), ("B", 1, "A"))
        assert not gir.is_dag()
        assert gir.stage_count() is None
        assert len(gir.cycles()) == 1

    def test_cycles_grouped_by_component(self):
        names = "ABCDEFGH"
        gir = _make_ir(*[(s, 1, t) for s in names for t in names if s != t], ("H", 1, "Z"))
        assert gir.cycles() == [list(names)]

    def test_self_loop_is_a_cycle(self):
        gir = _make_ir(("A", 1, "B"), ("B", 1, "B"))
        assert gir.cycles() == [["B"]]
        assert gir.stage_count() is None


class TestBalance:
    def test_balanced_node(self):
        gir = _make_ir(("A", 5, "B"), ("B", 2, "C"), ("B", 3, "D"))
        assert gir.imbalances(0.01) == []

    def test_imbalanced_node(self):
        gir = _make_ir(("A", 5, "B"), ("B", 2, "C"))
        [imbalance] = gir.imbalances(0.01)
        assert imbalance.name == "B"
        assert imbalance.difference == 3

    def test_within_epsilon(self):
        gir = _make_ir(("A", 1.0, "B"), ("B", 1.004, "C"))
        assert gir.imbalances(0.01) == []

    def test_grand_totals(self):
        gir = _make_ir(("A", 5, "B"), ("X", 1, "B"), ("B", 4, "C"))
        totals = gir.grand_totals()
        assert totals.total_in == 6
        assert totals.total_out == 4
        assert not totals.balanced(0.01)
