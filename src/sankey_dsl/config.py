"""Centralized configuration for sankey-dsl."""

from __future__ import annotations

from dataclasses import dataclass

MAX_BREAKPOINT = 9999


@dataclass
class CompilerConfig:
    """Configuration for the compile pipeline."""

    max_breakpoint: int = MAX_BREAKPOINT
    reverse_override: bool | None = None
    number_precision: int = 5
    strict: bool = False
