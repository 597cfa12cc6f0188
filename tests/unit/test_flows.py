"""Tests for sankey_dsl.ir.flows: flow building and target suffixes."""

from sankey_dsl.ir.ast import FlowLine
from sankey_dsl.ir.flows import FlowBuilder, split_target_suffix
from sankey_dsl.ir.registry import NodeRegistry
from sankey_dsl.types import FlowOperation


def _flow_line(source, target, amount=None, operation=None, row=0) -> FlowLine:
    return FlowLine(row=row, text="", source=source, target=target, amount=amount, operation=operation)


class TestTargetSuffix:
    def test_color_and_opacity(self):
        assert split_target_suffix("Budget #99aa00.25") == ("Budget", "#99aa00", 0.25)

    def test_color_only(self):
        assert split_target_suffix("Budget #abc") == ("Budget", "#abc", None)

    def test_opacity_only(self):
        assert split_target_suffix("Budget #.5") == ("Budget", None, 0.5)

    def test_not_a_color_kept_in_name(self):
        assert split_target_suffix("Team #1") == ("Team #1", None, None)

    def test_no_suffix(self):
        assert split_target_suffix("Budget") == ("Budget", None, None)


class TestFlowBuilder:
    def test_links_registry_nodes(self):
        reg = NodeRegistry()
        flow = FlowBuilder(reg).build(_flow_line("A", "B #f00", amount=5.0, row=3), 0)
        assert flow.source is reg.get("A")
        assert flow.target is reg.get("B")
        assert flow.value == 5.0
        assert flow.color == "#f00"

    def test_target_row_is_half_after_source(self):
        reg = NodeRegistry()
        FlowBuilder(reg).build(_flow_line("A", "B", amount=1.0, row=3), 0)
        assert reg.get("A").source_row == 3
        assert reg.get("B").source_row == 3.5

    def test_wildcard_value_is_operation(self):
        reg = NodeRegistry()
        flow = FlowBuilder(reg).build(_flow_line("A", "B", operation=FlowOperation.USE_REMAINDER), 0)
        assert flow.value is FlowOperation.USE_REMAINDER
        assert not flow.is_resolved

    def test_reversed_graph_swaps_endpoints_and_operation(self):
        reg = NodeRegistry()
        flow = FlowBuilder(reg, reversed_graph=True).build(
            _flow_line("A", "B", operation=FlowOperation.USE_REMAINDER), 0
        )
        assert flow.source is reg.get("B")
        assert flow.target is reg.get("A")
        assert flow.operation is FlowOperation.FILL_MISSING
        assert flow.reversed

    def test_build_all_indexes_in_order(self):
        reg = NodeRegistry()
        flows = FlowBuilder(reg).build_all(
            [_flow_line("A", "B", amount=1.0, row=0), _flow_line("B", "C", amount=1.0, row=1)]
        )
        assert [f.index for f in flows] == [0, 1]
