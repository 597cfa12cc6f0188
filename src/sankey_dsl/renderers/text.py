"""Definition Serializer: write a compiled diagram back out as definition text.

Re-parsing the output reproduces the same nodes, flows and settings.
"""

from __future__ import annotations

from datetime import datetime

from sankey_dsl.diagram import CompiledDiagram
from sankey_dsl.formatting import format_number
from sankey_dsl.ir.model import Flow, Node
from sankey_dsl.settings.catalog import SETTINGS, SettingMeta, setting_group
from sankey_dsl.settings.validators import to_human
from sankey_dsl.state import DiagramState
from sankey_dsl.types import DataType

HEADER_PREFIX = "// Diagram definition -"
NODES_MARKER = "// === Nodes and Flows ==="
SETTINGS_MARKER = "// === Settings ==="
MOVES_MARKER = "// === Moved Nodes ==="

_QUOTED_TYPES = (DataType.LIST, DataType.TEXT, DataType.GRADIENT)


def _fraction(value: float, precision: int) -> str:
    """Format an opacity like 0.25 as '.25'."""
    text = format_number(value, precision)
    return text[1:] if text.startswith("0.") else text


def _color_suffix(color: str | None, opacity: float | None, precision: int) -> str:
    if not color and opacity is None:
        return ""
    hex_part = color.lstrip("#") if color else ""
    opacity_part = _fraction(opacity, precision) if opacity is not None else ""
    return f" #{hex_part}{opacity_part}"


def setting_value_text(meta: SettingMeta, value: object) -> str:
    text = to_human(meta, value)
    if meta.data_type in _QUOTED_TYPES:
        return "'{}'".format(text.replace("'", "''"))
    return text


class DefinitionRenderer:
    """Render nodes, flows, settings and moves as definition text."""

    def __init__(self, verbose: bool = False, precision: int = 5) -> None:
        self.verbose = verbose
        self.precision = precision

    def render(self, diagram: CompiledDiagram, state: DiagramState) -> str:
        lines: list[str] = []
        if self.verbose:
            lines += [f"{HEADER_PREFIX} Saved: {datetime.now().isoformat(timespec='seconds')}", "", NODES_MARKER, ""]
        lines += [self.node_line(n) for n in diagram.nodes]
        decimals = max(self.precision, diagram.max_decimal_places)
        lines += [self.flow_line(f, decimals) for f in diagram.flows]
        if self.verbose:
            lines += ["", SETTINGS_MARKER, ""]
        lines += self.settings_lines(state)
        if state.moves:
            if self.verbose:
                lines += ["", MOVES_MARKER, ""]
            lines += self.move_lines(state)
        return "\n".join(lines)

    # ── Nodes & flows ─────────────────────────────────────────────────────────

    def node_line(self, node: Node) -> str:
        name = f"-{node.name}-" if node.hide_label else node.name
        parts = [f":{name}{_color_suffix(node.color, node.opacity, self.precision)}"]
        if node.previous_value:
            parts.append(f"[{node.previous_value}]")
        if node.label_colors:
            slots = [node.label_colors.get(key, "") for key in ("labelname_color", "labelvalue_color", "labelchange_color")]
            parts.append("{" + ",".join(slots) + "}")
        parts += [p for p in node.paint_inputs if p]
        return " ".join(parts)

    def flow_line(self, flow: Flow, decimals: int | None = None) -> str:
        """Write one flow in input orientation; literal amounts keep up to ``decimals`` places."""
        source, target, operation = flow.source, flow.target, flow.operation
        if flow.reversed:
            source, target = target, source
            operation = operation.swapped if operation else None
        amount = operation.value if operation else format_number(flow.amount, decimals or self.precision)
        suffix = _color_suffix(flow.color, flow.opacity, self.precision)
        return f"{source.name} [{amount}] {target.name}{suffix}"

    # ── Settings & moves ──────────────────────────────────────────────────────

    def settings_lines(self, state: DiagramState) -> list[str]:
        lines: list[str] = []
        group = ""
        for name, meta in SETTINGS.items():
            if meta.internal:
                continue
            if group and name.startswith(f"{group}_"):
                shown = "  " + name[len(group) + 1 :]
            else:
                shown = name
            lines.append(f"{shown.replace('_', ' ')} {setting_value_text(meta, state.settings[name])}")
            group = setting_group(name)
        return lines

    def move_lines(self, state: DiagramState) -> list[str]:
        return [
            f"move {name} {format_number(dx, self.precision)}, {format_number(dy, self.precision)}"
            for name, (dx, dy) in state.moves.items()
        ]
