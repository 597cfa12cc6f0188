"""Graph IR: a networkx view of resolved nodes and flows.

Used after resolution for topology queries: stage counting (which sets the
label breakpoint ceiling), cycle detection, and the node balance report.
Parallel flows between the same two nodes are kept, so the underlying
graph is a MultiDiGraph.
"""

from __future__ import annotations

from dataclasses import dataclass

import networkx as nx

from sankey_dsl.ir.model import Flow, Node
from sankey_dsl.types import Side


@dataclass
class Imbalance:
    name: str
    total_in: float
    total_out: float

    @property
    def difference(self) -> float:
        return self.total_in - self.total_out


@dataclass
class Totals:
    total_in: float = 0.0
    total_out: float = 0.0

    def balanced(self, epsilon: float) -> bool:
        return abs(self.total_in - self.total_out) <= epsilon


class DiagramIR:
    """The graph intermediate representation built from resolved nodes and flows."""

    def __init__(self, digraph: nx.MultiDiGraph) -> None:
        self.digraph = digraph

    @classmethod
    def from_model(cls, nodes: list[Node], flows: list[Flow]) -> DiagramIR:
        digraph: nx.MultiDiGraph = nx.MultiDiGraph()
        for node in nodes:
            digraph.add_node(node.name, data=node)
        for flow in flows:
            digraph.add_edge(flow.source.name, flow.target.name, key=flow.index, data=flow)
        return cls(digraph)

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def flow_count(self) -> int:
        return self.digraph.number_of_edges()

    def in_degree(self, name: str) -> int:
        if name not in self.digraph:
            return 0
        return self.digraph.in_degree(name)

    def out_degree(self, name: str) -> int:
        if name not in self.digraph:
            return 0
        return self.digraph.out_degree(name)

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(self.digraph)

    def cycles(self) -> list[list[str]]:
        """Groups of nodes whose flows loop back into each other, in node order.

        One group per strongly connected component with more than one node,
        plus any node with a flow to itself.
        """
        order = {name: index for index, name in enumerate(self.digraph.nodes)}
        groups: list[list[str]] = []
        for component in nx.strongly_connected_components(self.digraph):
            if len(component) == 1:
                (name,) = component
                if not self.digraph.has_edge(name, name):
                    continue
            groups.append(sorted(component, key=order.__getitem__))
        return sorted(groups, key=lambda group: order[group[0]])

    def stage_count(self) -> int | None:
        """Number of stages (columns) in the diagram, or None when it has a cycle."""
        if self.node_count() == 0:
            return 0
        if not self.is_dag():
            return None
        return nx.dag_longest_path_length(nx.DiGraph(self.digraph)) + 1

    def total(self, name: str, side: Side) -> float:
        edges = self.digraph.in_edges(name, data=True) if side is Side.IN else self.digraph.out_edges(name, data=True)
        return sum(data["data"].amount for _, _, data in edges)

    def imbalances(self, epsilon: float) -> list[Imbalance]:
        """Nodes with flows on both sides whose in and out totals differ by more than ``epsilon``."""
        result: list[Imbalance] = []
        for name in self.digraph.nodes:
            if not (self.in_degree(name) and self.out_degree(name)):
                continue
            imbalance = Imbalance(name, self.total(name, Side.IN), self.total(name, Side.OUT))
            if abs(imbalance.difference) > epsilon:
                result.append(imbalance)
        return result

    def grand_totals(self) -> Totals:
        """Totals flowing into and out of the whole diagram, measured at its boundary nodes."""
        totals = Totals()
        for name in self.digraph.nodes:
            if self.in_degree(name) and self.out_degree(name):
                continue
            # An endpoint's inflow leaves the diagram; an origin's outflow enters it.
            totals.total_out += self.total(name, Side.IN)
            totals.total_in += self.total(name, Side.OUT)
        return totals
