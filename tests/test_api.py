"""Tests for sankey_dsl.api: the full compile pipeline."""

from sankey_dsl import CompilerConfig, DiagramState, compile_definition, load_definition
from sankey_dsl.config import MAX_BREAKPOINT
from sankey_dsl.types import FlowOperation, Level


def _names(diagram):
    return [n.name for n in diagram.nodes]


class TestPipeline:
    def test_simple_diagram(self):
        d = compile_definition("Wages [1500] Budget\nBudget [400] Food\nBudget [*] Savings")
        assert _names(d) == ["Wages", "Budget", "Food", "Savings"]
        assert [f.value for f in d.flows] == [1500, 400, 1100]
        assert d.flows[2].source is d.node("Budget")

    def test_flows_reference_node_objects(self):
        d = compile_definition("A [1] B")
        assert d.flows[0].source is d.nodes[0]
        assert d.flows[0].target is d.nodes[1]

    def test_node_line_before_flows_sets_order(self):
        d = compile_definition(":C #f00\nA [1] B\nB [1] C")
        assert _names(d) == ["C", "A", "B"]
        assert d.node("C").color == "#f00"

    def test_node_mentioned_twice_merges(self):
        d = compile_definition(":A #111111\nA [1] B\n:A #222222.5")
        assert len(d.nodes) == 2
        assert d.node("A").color == "#222222"
        assert d.node("A").opacity == 0.5
        assert d.node("A").source_row == 0

    def test_flow_suffix(self):
        d = compile_definition("A [1] B #abcdef.3")
        assert d.node("B") is not None
        assert d.flows[0].color == "#abcdef"
        assert d.flows[0].opacity == 0.3

    def test_values_are_floats_after_resolution(self):
        d = compile_definition("A [3] B\nB [*] C\nD [?] C\nC [10] E")
        assert all(isinstance(f.value, float) and f.value >= 0 for f in d.flows)
        assert d.flows[1].value == 3
        assert d.flows[2].value == 7

    def test_empty_input(self):
        d = compile_definition("")
        assert d.nodes == []
        assert d.flows == []
        assert len(d.diagnostics) == 0
        assert d.settings["size_w"] == 600


class TestDiagnostics:
    def test_invalid_line_gives_one_issue(self):
        d = compile_definition("foo bar")
        assert len(d.diagnostics) == 1
        assert d.diagnostics.issues[0].text == "foo bar"

    def test_parsing_continues_after_errors(self):
        d = compile_definition("A [-1] B\nnonsense!\nC [2] D")
        assert len(d.diagnostics.issues) == 2
        assert [f.value for f in d.flows] == [2]

    def test_skipped_flow_is_info(self):
        d = compile_definition("A [] B\nA [1] C")
        [info] = d.diagnostics.infos
        assert info.level is Level.INFO
        assert info.text == "A [] B"
        assert d.node("B") is None

    def test_unanchored_wildcards_dropped_and_reported(self):
        d = compile_definition("A [5] B\nX [*] Y\nY [?] Z")
        assert [f.value for f in d.flows] == [5]
        texts = [i.text for i in d.diagnostics.issues]
        assert texts == ["X [*] Y", "Y [?] Z"]

    def test_cycle_reported(self):
        d = compile_definition("A [1] B\nB [1] A")
        assert d.stage_count is None
        assert any(i.message == "Flows form a cycle" for i in d.diagnostics.issues)

    def test_dense_cycle_reported_once(self):
        names = "ABCDEFGH"
        text = "\n".join(f"{s} [1] {t}" for s in names for t in names if s != t)
        d = compile_definition(text)
        [issue] = d.diagnostics.issues
        assert issue.text == ", ".join(names)

    def test_overflowing_amount_does_not_zero_siblings(self):
        d = compile_definition("A [" + "9" * 400 + "] B\nA [*] C\nS [5] A")
        assert len(d.diagnostics.issues) == 1
        assert [f.value for f in d.flows] == [5, 5]

    def test_imbalance_reported_when_enabled(self):
        d = compile_definition("A [5] B\nB [2] C")
        assert [i.name for i in d.imbalances] == ["B"]
        assert any(info.text == "B" for info in d.diagnostics.infos)

    def test_imbalance_not_reported_when_disabled(self):
        d = compile_definition("A [5] B\nB [2] C\nmeta_listimbalances n")
        assert [i.name for i in d.imbalances] == ["B"]
        assert not any(info.text == "B" for info in d.diagnostics.infos)


class TestSettings:
    def test_setting_applied(self):
        d = compile_definition("A [1] B\nflow_opacity 0.2")
        assert d.settings["flow_opacity"] == 0.2

    def test_invalid_setting_keeps_default(self):
        d = compile_definition("flow_opacity 2")
        assert d.settings["flow_opacity"] == 0.45
        assert len(d.diagnostics.issues) == 1

    def test_unknown_setting_reported(self):
        d = compile_definition("colour_of_node 5")
        assert len(d.diagnostics.issues) == 1

    def test_contained_reset_when_canvas_shrinks(self):
        state = DiagramState()
        compile_definition("size_w 1000\nmargin_l 700", state)
        assert state.get("margin_l") == 700
        d = compile_definition("size_w 500", state)
        assert d.settings["margin_l"] == 12
        assert state.get("margin_l") == 12

    def test_breakpoint_follows_stage_count(self):
        state = DiagramState()
        d = compile_definition("A [1] B\nB [1] C", state)
        assert d.stage_count == 3
        assert d.settings["labelposition_breakpoint"] == 4
        assert state.breakpoint_ceiling == 4

    def test_breakpoint_kept_when_below_ceiling(self):
        d = compile_definition("A [1] B\nB [1] C\nC [1] D\nlabelposition breakpoint 2")
        assert d.settings["labelposition_breakpoint"] == 2

    def test_breakpoint_on_never_grows_with_stages(self):
        state = DiagramState()
        compile_definition("A [1] B", state)
        assert state.get("labelposition_breakpoint") == 3
        d = compile_definition("A [1] B\nB [1] C", state)
        assert d.settings["labelposition_breakpoint"] == 4


class TestReversedGraph:
    def test_reversed_setting(self):
        d = compile_definition("A [10] B\nB [*] C\nlayout_reversegraph y")
        assert d.reversed
        assert d.flows[0].source is d.node("B")
        assert d.flows[1].operation is FlowOperation.FILL_MISSING
        assert d.flows[1].value == 10

    def test_inherit_from_swapped_in_output_only(self):
        state = DiagramState()
        d = compile_definition("A [1] B\nflow_inheritfrom source\nlayout_reversegraph y", state)
        assert d.settings["flow_inheritfrom"] == "target"
        assert state.get("flow_inheritfrom") == "source"

    def test_config_override(self):
        d = compile_definition("A [1] B", config=CompilerConfig(reverse_override=True))
        assert d.reversed
        assert d.settings["layout_reversegraph"] is True


class TestState:
    def test_settings_persist_between_runs(self):
        state = DiagramState()
        compile_definition("node_color #123456", state)
        d = compile_definition("A [1] B", state)
        assert d.settings["node_color"] == "#123456"

    def test_moves_persist_and_match_by_name(self):
        state = DiagramState()
        compile_definition("A [1] B\nmove A 0.1, 0.2\nmove Gone 1, 1", state)
        d = compile_definition("A [1] B", state)
        assert d.moves == {"A": (0.1, 0.2)}
        assert "Gone" in state.moves

    def test_load_definition_resets_state(self):
        state = DiagramState()
        compile_definition("node_color #123456\nmove A 1, 1", state)
        d = load_definition("A [1] B", state)
        assert d.settings["node_color"] == "#888888"
        assert state.moves == {}

    def test_reset_restores_ceiling(self):
        state = DiagramState()
        compile_definition("A [1] B", state)
        state.reset()
        assert state.breakpoint_ceiling == MAX_BREAKPOINT
        assert state.get("labelposition_breakpoint") == MAX_BREAKPOINT
