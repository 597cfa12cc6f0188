"""Shared type definitions for sankey-dsl.

Enums used across the classifier, settings, IR, resolver, and serializer.
"""

from __future__ import annotations

from enum import Enum, auto


class Side(Enum):
    IN = auto()
    OUT = auto()

    @property
    def opposite(self) -> Side:
        return Side.OUT if self is Side.IN else Side.IN


class Paint(Enum):
    BEFORE = auto()  # <<
    AFTER = auto()  # >>


class FlowOperation(Enum):
    USE_REMAINDER = "*"  # adopt the unused amount of the flow's source
    FILL_MISSING = "?"  # adopt the unmet amount of the flow's target

    @classmethod
    def from_symbol(cls, symbol: str) -> FlowOperation | None:
        for op in cls:
            if op.value == symbol:
                return op
        return None

    @property
    def swapped(self) -> FlowOperation:
        if self is FlowOperation.USE_REMAINDER:
            return FlowOperation.FILL_MISSING
        return FlowOperation.USE_REMAINDER


class DataType(Enum):
    BOOLEAN = "yn"
    RADIO = "radio"
    LIST = "list"
    COLOR = "color"
    GRADIENT = "gradient"
    TEXT = "text"
    DECIMAL = "decimal"
    INTEGER = "integer"
    HALF = "half"
    WHOLE = "whole"
    CONTAINED = "contained"
    BREAKPOINT = "breakpoint"

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_TYPES


_NUMERIC_TYPES = frozenset(
    {
        DataType.DECIMAL,
        DataType.INTEGER,
        DataType.HALF,
        DataType.WHOLE,
        DataType.CONTAINED,
        DataType.BREAKPOINT,
    }
)


class Level(Enum):
    ISSUE = "issue"
    INFO = "info"
