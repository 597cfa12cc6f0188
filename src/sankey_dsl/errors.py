"""Exceptions raised by sankey-dsl."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sankey_dsl.ir.model import Flow


class SankeyDslError(Exception):
    """Base class for all sankey-dsl errors."""


class UnknownSettingError(SankeyDslError, KeyError):
    """A setting name is not present in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Not a valid setting name: {self.name}"


class UnresolvableCalculationError(SankeyDslError):
    """Calculated flows could not be derived from any literal amount."""

    def __init__(self, flows: list[Flow], reason: str) -> None:
        super().__init__(reason)
        self.flows = flows
        self.reason = reason

    def __str__(self) -> str:
        names = ", ".join(f.describe() for f in self.flows)
        return f"{self.reason}: {names}"
