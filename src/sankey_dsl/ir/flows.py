"""Flow Builder: link FlowLines to registry nodes.

The target text of a flow may end with '#color', '.opacity' or both
(e.g. 'Budget #99aa00.25'). That suffix is split off only when it strictly
matches the color grammar, so a node named 'Team #1' keeps its name.
"""

from __future__ import annotations

import logging

from sankey_dsl.ir.ast import FlowLine
from sankey_dsl.ir.model import Flow
from sankey_dsl.ir.registry import NodeRegistry
from sankey_dsl.syntax import patterns

logger = logging.getLogger(__name__)


def split_target_suffix(target: str) -> tuple[str, str | None, float | None]:
    """Return (target name, color, opacity) for a flow's target text."""
    m = patterns.FLOW_TARGET_WITH_SUFFIX.match(target)
    if m is None:
        return target, None, None
    possible_name, possible_color = m.groups()
    color_opacity = patterns.COLOR_PLUS_OPACITY.match(possible_color)
    if color_opacity is None:
        return target, None, None
    color, opacity = color_opacity.groups()
    return (
        possible_name.strip(),
        f"#{color}" if color else None,
        float(opacity) if opacity else None,
    )


class FlowBuilder:
    """Build Flow records in input order, registering their endpoints.

    With ``reversed_graph`` every flow's endpoints are swapped, and so is
    its wildcard operator, since the calculation direction flips as well.
    """

    def __init__(self, registry: NodeRegistry, reversed_graph: bool = False) -> None:
        self.registry = registry
        self.reversed_graph = reversed_graph

    def build(self, line: FlowLine, index: int) -> Flow:
        target_name, color, opacity = split_target_suffix(line.target)
        source = self.registry.register_or_update(line.source, line.row)
        target = self.registry.register_or_update(target_name, line.row + 0.5)
        operation = line.operation
        if self.reversed_graph:
            source, target = target, source
            if operation is not None:
                operation = operation.swapped
        return Flow(
            source=source,
            target=target,
            value=operation if operation is not None else line.amount,
            source_row=line.row,
            operation=operation,
            color=color,
            opacity=opacity,
            index=index,
            reversed=self.reversed_graph,
        )

    def build_all(self, lines: list[FlowLine]) -> list[Flow]:
        flows = [self.build(line, index) for index, line in enumerate(lines)]
        logger.debug("Built %d flows between %d nodes", len(flows), len(self.registry))
        return flows
