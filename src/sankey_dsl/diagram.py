"""The compiled diagram: the contract handed to a layout/rendering stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sankey_dsl.diagnostics import Diagnostics
from sankey_dsl.ir.graph import Imbalance, Totals
from sankey_dsl.ir.model import Flow, Node
from sankey_dsl.state import Move


@dataclass
class CompiledDiagram:
    nodes: list[Node] = field(default_factory=list)
    flows: list[Flow] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    moves: dict[str, Move] = field(default_factory=dict)
    stage_count: int | None = 0
    imbalances: list[Imbalance] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)
    reversed: bool = False
    max_decimal_places: int = 0

    def node(self, name: str) -> Node | None:
        return next((n for n in self.nodes if n.name == name), None)

    def flow_values(self) -> dict[tuple[str, str], float]:
        """Map (source, target) to the summed amount of the flows between them."""
        values: dict[tuple[str, str], float] = {}
        for flow in self.flows:
            key = (flow.source.name, flow.target.name)
            values[key] = values.get(key, 0.0) + flow.amount
        return values

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "flows": [f.to_dict() for f in self.flows],
            "settings": dict(self.settings),
            "moves": {name: list(move) for name, move in self.moves.items()},
            "stage_count": self.stage_count,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
