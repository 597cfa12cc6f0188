"""Public API: compile definition text into nodes, flows, and settings."""

from __future__ import annotations

import logging

from sankey_dsl.config import CompilerConfig
from sankey_dsl.diagnostics import Diagnostics
from sankey_dsl.diagram import CompiledDiagram
from sankey_dsl.errors import UnresolvableCalculationError
from sankey_dsl.formatting import format_number
from sankey_dsl.ir.flows import FlowBuilder
from sankey_dsl.ir.graph import DiagramIR
from sankey_dsl.ir.model import Flow
from sankey_dsl.ir.registry import NodeRegistry
from sankey_dsl.ir.resolver import FlowResolver
from sankey_dsl.parsers.lines import apply_moves, apply_settings, classify
from sankey_dsl.renderers.base import Renderer
from sankey_dsl.renderers.text import DefinitionRenderer
from sankey_dsl.settings.catalog import SETTINGS
from sankey_dsl.settings.validators import ValidationContext, to_human, validate
from sankey_dsl.state import DiagramState

logger = logging.getLogger(__name__)

BREAKPOINT_SETTING = "labelposition_breakpoint"


def _resolve(flows: list[Flow], diagnostics: Diagnostics) -> list[Flow]:
    """Resolve wildcard flows; unanchored ones are reported and dropped."""
    try:
        FlowResolver(flows, diagnostics).resolve()
        return flows
    except UnresolvableCalculationError as exc:
        dropped = set(exc.flows)
        for flow in exc.flows:
            diagnostics.issue(flow.describe(), exc.reason, row=flow.source_row)
        remaining = [f for f in flows if f not in dropped]
        FlowResolver(remaining, diagnostics).resolve()
        return remaining


def _approve_settings(state: DiagramState, diagnostics: Diagnostics, max_breakpoint: int) -> dict[str, object]:
    """Re-validate every stored setting in catalog order, resetting failures to defaults."""
    approved: dict[str, object] = {}
    for name, meta in SETTINGS.items():
        context = ValidationContext(
            width=approved.get("size_w", state.settings["size_w"]),
            height=approved.get("size_h", state.settings["size_h"]),
            breakpoint_ceiling=max_breakpoint,
        )
        ok, value = validate(meta, to_human(meta, state.settings[name]), context)
        if not ok:
            value = state.reset_setting(name)
            diagnostics.info(f"Reset {name.replace('_', ' ')} to its default", text=to_human(meta, value))
        approved[name] = value
    return approved


def _update_breakpoint(stage_count: int, state: DiagramState, settings: dict[str, object]) -> None:
    """Move the 'never' breakpoint to one past the last stage."""
    new_max = stage_count + 1
    old_max = state.breakpoint_ceiling
    if new_max == old_max:
        return
    state.breakpoint_ceiling = new_max
    current = settings[BREAKPOINT_SETTING]
    if current > new_max or current == old_max:
        settings[BREAKPOINT_SETTING] = new_max
        state.set(BREAKPOINT_SETTING, new_max)


def compile_definition(
    text: str,
    state: DiagramState | None = None,
    config: CompilerConfig | None = None,
) -> CompiledDiagram:
    """Compile definition text into a CompiledDiagram.

    ``state`` carries settings and remembered moves between runs and is
    updated in place; a fresh one is created when omitted. Bad input never
    raises; it is reported in the returned diagram's diagnostics.

    Args:
        text: Diagram definition text.
        state: Persistent state from earlier runs, or None.
        config: Compiler options; defaults to CompilerConfig().

    Returns:
        The compiled diagram (nodes, flows, settings, diagnostics, ...).
    """
    config = config or CompilerConfig()
    if state is None:
        state = DiagramState(breakpoint_ceiling=config.max_breakpoint)
    diagnostics = Diagnostics()

    classified = classify(text)
    apply_moves(classified.moves, state)
    apply_settings(classified.settings, state, diagnostics, config.max_breakpoint)
    for invalid in classified.invalid:
        diagnostics.issue(invalid.text, invalid.reason, row=invalid.row)
    for skipped in classified.skipped_flows:
        diagnostics.info("Skipped empty flow", text=skipped)

    reversed_graph = bool(state.settings["layout_reversegraph"])
    if config.reverse_override is not None:
        reversed_graph = config.reverse_override

    registry = NodeRegistry()
    for node_line in classified.nodes:
        registry.apply_attributes(node_line)
    flows = FlowBuilder(registry, reversed_graph=reversed_graph).build_all(classified.flows)
    flows = _resolve(flows, diagnostics)
    for index, flow in enumerate(flows):
        flow.index = index
    nodes = registry.ordered(reversed_graph=reversed_graph)

    settings = _approve_settings(state, diagnostics, config.max_breakpoint)
    graph = DiagramIR.from_model(nodes, flows)
    stage_count = graph.stage_count()
    if stage_count is None:
        for cycle in graph.cycles():
            diagnostics.issue(", ".join(cycle), "Flows form a cycle")
    elif flows:
        _update_breakpoint(stage_count, state, settings)

    if reversed_graph:
        swap = {"source": "target", "target": "source"}
        settings["flow_inheritfrom"] = swap.get(settings["flow_inheritfrom"], settings["flow_inheritfrom"])
    settings["layout_reversegraph"] = reversed_graph

    epsilon = 10 ** (-classified.max_decimal_places - 1)
    imbalances = graph.imbalances(epsilon) if flows else []
    totals = graph.grand_totals()
    if settings["meta_listimbalances"]:
        for imbalance in imbalances:
            diagnostics.info(
                f"Total in {format_number(imbalance.total_in, config.number_precision)} "
                f"!= total out {format_number(imbalance.total_out, config.number_precision)}",
                text=imbalance.name,
            )

    logger.debug("Compiled %d nodes and %d flows", len(nodes), len(flows))
    return CompiledDiagram(
        nodes=nodes,
        flows=flows,
        settings=settings,
        diagnostics=diagnostics,
        moves=state.moves_for(n.name for n in nodes),
        stage_count=stage_count,
        imbalances=imbalances,
        totals=totals,
        reversed=reversed_graph,
        max_decimal_places=classified.max_decimal_places,
    )


def load_definition(text: str, state: DiagramState, config: CompilerConfig | None = None) -> CompiledDiagram:
    """Compile ``text`` as a brand-new diagram: ``state`` is reset first."""
    config = config or CompilerConfig()
    state.reset(max_breakpoint=config.max_breakpoint)
    return compile_definition(text, state, config)


def serialize_definition(
    diagram: CompiledDiagram,
    state: DiagramState,
    verbose: bool = False,
    precision: int = 5,
) -> str:
    """Write ``diagram`` and ``state`` back out as definition text."""
    renderer: Renderer = DefinitionRenderer(verbose=verbose, precision=precision)
    return renderer.render(diagram, state)
