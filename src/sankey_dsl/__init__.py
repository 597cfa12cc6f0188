"""sankey-dsl: compile flow-diagram definition text into nodes, flows, and settings."""

import logging

from sankey_dsl.api import compile_definition, load_definition, serialize_definition
from sankey_dsl.config import CompilerConfig
from sankey_dsl.diagram import CompiledDiagram
from sankey_dsl.errors import SankeyDslError, UnresolvableCalculationError
from sankey_dsl.state import DiagramState

__all__ = [
    "CompiledDiagram",
    "CompilerConfig",
    "DiagramState",
    "SankeyDslError",
    "UnresolvableCalculationError",
    "compile_definition",
    "load_definition",
    "serialize_definition",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
