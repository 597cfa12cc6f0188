"""State that survives between compile runs.

Nodes and flows are rebuilt from nothing on every run. Only the stored
settings values, the remembered manual node moves and the breakpoint
ceiling persist, and they are reset explicitly when a new diagram is loaded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sankey_dsl.config import MAX_BREAKPOINT
from sankey_dsl.settings.catalog import default_values, get_setting
from sankey_dsl.settings.validators import ValidationContext

logger = logging.getLogger(__name__)

Move = tuple[float, float]


@dataclass
class DiagramState:
    settings: dict[str, Any] = field(default_factory=default_values)
    moves: dict[str, Move] = field(default_factory=dict)
    breakpoint_ceiling: int = MAX_BREAKPOINT

    def reset(self, max_breakpoint: int = MAX_BREAKPOINT) -> None:
        """Forget everything; used when a brand-new diagram is loaded."""
        logger.debug("Resetting diagram state")
        self.settings = default_values()
        self.moves.clear()
        self.breakpoint_ceiling = max_breakpoint

    # ── Settings ──────────────────────────────────────────────────────────────

    def get(self, name: str) -> Any:
        return self.settings[get_setting(name).name]

    def set(self, name: str, value: Any) -> None:
        self.settings[get_setting(name).name] = value

    def reset_setting(self, name: str) -> Any:
        default = get_setting(name).default
        self.settings[name] = default
        return default

    def validation_context(self, breakpoint_ceiling: int = MAX_BREAKPOINT) -> ValidationContext:
        """Bounds for validating a setting against the current canvas size.

        Breakpoints are checked against ``breakpoint_ceiling`` (the largest
        allowed value) and clamped to this state's stage-based ceiling later.
        """
        return ValidationContext(
            width=self.settings["size_w"],
            height=self.settings["size_h"],
            breakpoint_ceiling=breakpoint_ceiling,
        )

    # ── Remembered moves ──────────────────────────────────────────────────────

    def remember_move(self, name: str, dx: float, dy: float) -> None:
        self.moves[name] = (dx, dy)

    def merge_moves(self, moves: Mapping[str, Move]) -> None:
        """Merge moves by node name; entries in ``moves`` win."""
        for name, (dx, dy) in moves.items():
            self.remember_move(name, dx, dy)

    def forget_moves(self) -> None:
        self.moves.clear()

    def moves_for(self, node_names: Iterable[str]) -> dict[str, Move]:
        """Return only the moves whose name matches one of ``node_names``."""
        names = set(node_names)
        return {name: move for name, move in self.moves.items() if name in names}
