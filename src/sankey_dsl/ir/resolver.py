"""Calculated-Flow Resolver: turn wildcard amounts into numbers.

Two wildcard operators exist, and both pick a *parent* node and a *side*:

  USE_REMAINDER ('*'): parent = source.
      value = source's known total in - source's other known outflows
  FILL_MISSING  ('?'): parent = target.
      value = target's known total out - target's other known inflows

Results below zero are floored at zero.

Flows are resolved from most to least certain. On every pass each pending
flow is ranked by its parent's count of unknown flows (plus 0.5 when either
endpoint is a graph boundary on the relevant side), then by input row.
If any flow's parent has exactly one unknown, every such flow is resolved
in one wave; otherwise only the best-ranked flow is resolved and the
ranking is recomputed. The ordering for ambiguous flows is arbitrary but
results depend on it, so it must stay exactly as it is.

Every pass resolves at least one flow, so the loop runs at most once per
pending flow. A group of wildcard flows with no literal amount anywhere in
its connected component has nothing to calculate from; those are rejected
up front with UnresolvableCalculationError rather than silently set to 0.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from sankey_dsl.diagnostics import Diagnostics
from sankey_dsl.errors import UnresolvableCalculationError
from sankey_dsl.formatting import format_number
from sankey_dsl.ir.model import Flow, Node
from sankey_dsl.types import FlowOperation, Side

logger = logging.getLogger(__name__)

BOUNDARY_ADJUSTMENT = 0.5


@dataclass
class Resolution:
    flow: Flow
    value: float
    unknown_count: float
    parent: Node


def _parent_and_other(flow: Flow) -> tuple[Node, Side, Node, Side]:
    """Return (parent, parent's side, other endpoint, other's side) for a pending flow."""
    if flow.operation is FlowOperation.USE_REMAINDER:
        return flow.source, Side.OUT, flow.target, Side.IN
    return flow.target, Side.IN, flow.source, Side.OUT


def _touches(flow: Flow, node: Node, side: Side) -> bool:
    """True when ``flow`` is on ``side`` of ``node`` (IN: arrives there, OUT: leaves it)."""
    return (flow.target if side is Side.IN else flow.source) is node


def find_unanchored(flows: Iterable[Flow]) -> list[Flow]:
    """Return pending flows whose connected component holds no literal amount."""
    flows = list(flows)
    graph = nx.MultiGraph()
    for flow in flows:
        graph.add_edge(flow.source.name, flow.target.name, flow=flow)

    unanchored: list[Flow] = []
    for component in nx.connected_components(graph):
        members = [data["flow"] for _, _, data in graph.subgraph(component).edges(data=True)]
        if any(f.is_resolved for f in members):
            continue
        unanchored.extend(members)
    unanchored.sort(key=lambda f: f.source_row)
    return unanchored


class FlowResolver:
    def __init__(self, flows: list[Flow], diagnostics: Diagnostics | None = None) -> None:
        self.flows = flows
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        # Insertion-ordered set of pending flows.
        self.queue: dict[Flow, None] = {f: None for f in flows if not f.is_resolved}
        self._boundary: dict[Flow, float] = {}
        self._prepare()

    # ── Setup ─────────────────────────────────────────────────────────────────

    def _prepare(self) -> None:
        endpoints = {n for f in self.flows for n in (f.source, f.target)}
        for node in endpoints:
            node.unknowns = {Side.IN: set(), Side.OUT: set()}
            node.terminates = {Side.IN: True, Side.OUT: True}
        for f in self.flows:
            f.source.terminates[Side.OUT] = False
            f.target.terminates[Side.IN] = False
        for f in self.queue:
            parent, parent_side, other, other_side = _parent_and_other(f)
            parent.unknowns[parent_side].add(f)
            other.unknowns[other_side].add(f)
            # Flows touching a graph boundary rank after internal singletons.
            at_boundary = parent.terminates[parent_side.opposite] or other.terminates[other_side.opposite]
            self._boundary[f] = BOUNDARY_ADJUSTMENT if at_boundary else 0

    # ── Ranking ───────────────────────────────────────────────────────────────

    def unknown_count(self, flow: Flow) -> float:
        parent = _parent_and_other(flow)[0]
        return len(parent.unknowns[Side.IN]) + len(parent.unknowns[Side.OUT]) + self._boundary[flow]

    def ranked(self) -> list[tuple[Flow, float]]:
        counts = {f: self.unknown_count(f) for f in self.queue}
        return sorted(counts.items(), key=lambda item: (item[1], item[0].source_row))

    # ── Resolution ────────────────────────────────────────────────────────────

    def _resolve_one(self, flow: Flow, count: float) -> Resolution:
        parent, parent_side, other, other_side = _parent_and_other(flow)
        parent_total = 0.0
        sibling_total = 0.0
        for known in self.flows:
            if not known.is_resolved:
                continue
            if _touches(known, parent, parent_side.opposite):
                parent_total += known.amount
            elif _touches(known, parent, parent_side):
                sibling_total += known.amount

        flow.value = max(0.0, parent_total - sibling_total)
        parent.unknowns[parent_side].discard(flow)
        other.unknowns[other_side].discard(flow)
        del self.queue[flow]

        unknowns = int(count)
        note = ""
        if unknowns > 1:
            note = f" ('{parent.tipname}' had {unknowns} unknowns)"
            self.diagnostics.info_once(
                "ambiguous",
                "Note: Beyond this point, some flow amounts depended on multiple unknown values. "
                "They will be resolved in the order of fewest unknowns + their order in the input data.",
            )
        self.diagnostics.info(f"Calculated: {flow.describe()} = {format_number(flow.value)}{note}")
        return Resolution(flow=flow, value=flow.value, unknown_count=count, parent=parent)

    def resolve(self) -> list[Resolution]:
        """Resolve every pending flow in place and return what was done, in order.

        Raises UnresolvableCalculationError when pending flows have no literal
        amount to start from; nothing is modified in that case.
        """
        if not self.queue:
            return []
        unanchored = find_unanchored(self.flows)
        if unanchored:
            raise UnresolvableCalculationError(unanchored, "No literal amount to calculate from")

        self.diagnostics.info_once("declare", "Resolving calculated flows.")
        resolutions: list[Resolution] = []
        budget = len(self.queue)
        passes = 0
        while self.queue:
            passes += 1
            if passes > budget:
                raise UnresolvableCalculationError(list(self.queue), "Calculated flows did not converge")
            ranked = self.ranked()
            if ranked[0][1] == 1:
                wave = [(f, c) for f, c in ranked if c == 1]
            else:
                wave = ranked[:1]
            for flow, count in wave:
                resolutions.append(self._resolve_one(flow, count))
            logger.debug("Pass %d resolved %d flows, %d pending", passes, len(wave), len(self.queue))
        return resolutions


def resolve_flows(flows: list[Flow], diagnostics: Diagnostics | None = None) -> list[Resolution]:
    """Resolve every wildcard flow in ``flows``; see FlowResolver."""
    return FlowResolver(flows, diagnostics).resolve()
