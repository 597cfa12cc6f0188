"""Node Registry: one Node per distinct name, however often it is mentioned.

A node may be mentioned by any number of Node and Flow lines. Mentions are
merged: the stored row is the lowest row seen, a dash-wrapped mention hides
the label, and attributes from Node lines are last-write-wins.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from sankey_dsl.ir.ast import NodeLine
from sankey_dsl.ir.model import Node
from sankey_dsl.syntax import patterns
from sankey_dsl.types import Paint

logger = logging.getLogger(__name__)


def parse_node_name(raw_name: str) -> tuple[str, bool]:
    """Split '-Name-' into ('Name', True); anything else into (name, False)."""
    m = patterns.HIDDEN_NAME.match(raw_name)
    if m is not None:
        return m.group(1), True
    return raw_name, False


def _opacity(text: str | None) -> float | None:
    return float(text) if text else None


class NodeRegistry:
    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def get(self, name: str) -> Node | None:
        return self._nodes.get(name)

    def register_or_update(self, raw_name: str, row: float) -> Node:
        """Return the node for ``raw_name``, creating it on first mention."""
        name, hide_label = parse_node_name(raw_name.strip())
        node = self._nodes.get(name)
        if node is not None:
            node.source_row = min(node.source_row, row)
            node.hide_label = node.hide_label or hide_label
            return node
        node = Node.new(name, row, hide_label=hide_label)
        self._nodes[name] = node
        return node

    def apply_attributes(self, line: NodeLine) -> Node:
        """Merge a Node line into the registry; the name itself is never rewritten."""
        node = self.register_or_update(line.name, line.row)
        color = line.color
        if color and patterns.BARE_COLOR.match(color):
            color = f"#{color}"
        if color:
            node.color = color
        if line.opacity:
            node.opacity = _opacity(line.opacity)
        if line.previous_value:
            node.previous_value = line.previous_value.strip()
        node.label_colors.update(line.label_colors)
        node.paint_inputs = line.paint_inputs
        return node

    def ordered(self, reversed_graph: bool = False) -> list[Node]:
        """Return nodes by ascending source row, indexed, with paint flags set."""
        nodes = sorted(self._nodes.values(), key=lambda n: n.source_row)
        for index, node in enumerate(nodes):
            paint_left = "<<" in node.paint_inputs
            paint_right = ">>" in node.paint_inputs
            node.paint = {
                Paint.BEFORE: paint_right if reversed_graph else paint_left,
                Paint.AFTER: paint_left if reversed_graph else paint_right,
            }
            node.index = index
        return nodes
