"""AST data structures for the diagram definition language.

Each record is one classified input line; ``row`` is its 0-based index in
the original text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sankey_dsl.types import FlowOperation


@dataclass
class SettingLine:
    row: int
    text: str
    name: str  # normalized catalog name, e.g. 'margin_l'
    display_name: str  # as typed, with any implied group prefix
    value: str


@dataclass
class MoveLine:
    row: int
    text: str
    node_name: str
    dx: float
    dy: float


@dataclass
class NodeLine:
    row: int
    text: str
    name: str
    color: str | None = None
    opacity: str | None = None
    previous_value: str | None = None
    label_colors: dict[str, str] = field(default_factory=dict)
    paint_inputs: tuple[str | None, str | None] = (None, None)


@dataclass
class FlowLine:
    row: int
    text: str
    source: str
    target: str  # may still carry a '#color.opacity' suffix
    amount: float | None
    operation: FlowOperation | None = None


@dataclass
class InvalidLine:
    row: int
    text: str
    reason: str


@dataclass
class Classified:
    settings: list[SettingLine] = field(default_factory=list)
    moves: list[MoveLine] = field(default_factory=list)
    nodes: list[NodeLine] = field(default_factory=list)
    flows: list[FlowLine] = field(default_factory=list)
    invalid: list[InvalidLine] = field(default_factory=list)
    skipped_flows: list[str] = field(default_factory=list)
    comments: int = 0
    max_decimal_places: int = 0
