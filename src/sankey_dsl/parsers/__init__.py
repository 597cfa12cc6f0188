"""Line classification for diagram definition text."""

from __future__ import annotations

from sankey_dsl.parsers.lines import apply_moves, apply_settings, classify, normalize_lines

__all__ = ["apply_moves", "apply_settings", "classify", "normalize_lines"]
