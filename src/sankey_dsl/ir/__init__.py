"""Intermediate representation: classified lines, nodes, flows, and the graph IR."""

from sankey_dsl.ir.ast import Classified, FlowLine, InvalidLine, MoveLine, NodeLine, SettingLine
from sankey_dsl.ir.model import Flow, Node

__all__ = [
    "Classified",
    "Flow",
    "FlowLine",
    "InvalidLine",
    "MoveLine",
    "Node",
    "NodeLine",
    "SettingLine",
]
