"""Node and Flow records handed to the layout/rendering stage.

Both are identity-hashed: the resolver keeps them in sets, and two flows
between the same nodes with the same amount are still different flows.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sankey_dsl.formatting import format_number
from sankey_dsl.types import FlowOperation, Paint, Side


def _sides_true() -> dict[Side, bool]:
    return {Side.IN: True, Side.OUT: True}


def _sides_empty() -> dict[Side, set[Flow]]:
    return {Side.IN: set(), Side.OUT: set()}


@dataclass(eq=False)
class Node:
    name: str
    tipname: str
    hide_label: bool = False
    source_row: float = 0
    color: str | None = None
    opacity: float | None = None
    previous_value: str | None = None
    label_colors: dict[str, str] = field(default_factory=dict)
    paint_inputs: tuple[str | None, str | None] = (None, None)
    paint: dict[Paint, bool] = field(default_factory=lambda: {Paint.BEFORE: False, Paint.AFTER: False})
    terminates: dict[Side, bool] = field(default_factory=_sides_true)
    unknowns: dict[Side, set[Flow]] = field(default_factory=_sides_empty, repr=False)
    index: int | None = None

    @classmethod
    def new(cls, name: str, row: float, hide_label: bool = False) -> Node:
        return cls(name=name, tipname=name.replace("\\n", " "), hide_label=hide_label, source_row=row)

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "name": self.name,
            "tipname": self.tipname,
            "hide_label": self.hide_label,
            "color": self.color,
            "opacity": self.opacity,
            "previous_value": self.previous_value,
            "label_colors": dict(self.label_colors),
            "paint": {"before": self.paint[Paint.BEFORE], "after": self.paint[Paint.AFTER]},
        }


@dataclass(eq=False)
class Flow:
    source: Node
    target: Node
    value: float | FlowOperation
    source_row: int
    operation: FlowOperation | None = None
    color: str | None = None
    opacity: float | None = None
    index: int | None = None
    reversed: bool = False

    @property
    def is_resolved(self) -> bool:
        return not isinstance(self.value, FlowOperation)

    @property
    def amount(self) -> float:
        """The resolved value; raises if the flow is still a wildcard."""
        if isinstance(self.value, FlowOperation):
            raise ValueError(f"Flow {self.describe()} has not been resolved")
        return self.value

    def describe(self) -> str:
        middle = self.operation.value if self.operation else format_number(self.amount)
        return f"{self.source.tipname} [{middle}] {self.target.tipname}"

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "source": self.source.name,
            "target": self.target.name,
            "value": self.amount,
            "operation": self.operation.value if self.operation else None,
            "color": self.color,
            "opacity": self.opacity,
        }
