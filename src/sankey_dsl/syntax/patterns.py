"""Regular expressions for the diagram definition language.

Each input line is matched against these patterns in a fixed order:

  move_line / settings_value / settings_text   (first pass, all lines)
  comment_line / node_line / flow_line         (second pass, the rest)

A line matching none of them is reported as invalid.
"""

from __future__ import annotations

import re

ZERO_WIDTH_SPACE = "\u200b"

# ─── Comments ────────────────────────────────────────────────────────────────

COMMENT_LINE = re.compile(r"^(?:'|//)")

# ─── Settings & moves ────────────────────────────────────────────────────────

SETTINGS_VALUE = re.compile(r"^((?:\w+\s*){1,3}) (#?[\w.-]+)$")
SETTINGS_TEXT = re.compile(r"^((?:\w+\s*){1,3}) '(.*)'$")
MOVE_LINE = re.compile(r"^move (.+) (-?\d+(?:\.\d+)?), (-?\d+(?:\.\d+)?)$")

# Long words which may end a setting name; each is shortened to its initial.
LONG_SETTING_WORDS = ("width", "height", "left", "right", "top", "bottom")

# ─── Nodes ───────────────────────────────────────────────────────────────────

# :Name #abc123.5 [prev] {nameColor,valueColor,changeColor} << >>
NODE_LINE = re.compile(
    r"^:(?P<name>.+?)"
    r"(?:\s+#(?P<color>[a-f0-9]{6}|[a-f0-9]{3})?(?P<opacity>\.\d{1,4})?)?"
    r"(?:\s*\[(?P<previous>[^\]]*)\])?"
    r"(?:\s*\{(?P<label_colors>[^}]*)\})?"
    r"\s*(?P<paint1>>>|<<)?"
    r"\s*(?P<paint2>>>|<<)?$",
    re.IGNORECASE,
)

HIDDEN_NAME = re.compile(r"^-(.*)-$")

# ─── Flows ───────────────────────────────────────────────────────────────────

FLOW_LINE = re.compile(r"^(?P<source>.+)\[(?P<amount>[\d\s.+-]+|\*|\?|)\](?P<target>.+)$")
FLOW_TARGET_WITH_SUFFIX = re.compile(r"^(.+)\s+(#\S+)$")
COLOR_PLUS_OPACITY = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})?(\.\d{1,4})?$", re.IGNORECASE)
NUMERIC_AMOUNT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)$")

# ─── Setting values ──────────────────────────────────────────────────────────

YES_NO = re.compile(r"^(?:y|yes|n|no)$", re.IGNORECASE)
YES = re.compile(r"^(?:y|yes)$", re.IGNORECASE)
RGB_COLOR = re.compile(r"^#(?:[a-f\d]{3}|[a-f\d]{6})$", re.IGNORECASE)
BARE_COLOR = re.compile(r"^(?:[a-f\d]{3}|[a-f\d]{6})$", re.IGNORECASE)
WHOLE_NUMBER = re.compile(r"^\d+$")
HALF_NUMBER = re.compile(r"^\d+(?:\.5)?$")
INTEGER = re.compile(r"^-?\d+$")
DECIMAL = re.compile(r"^\d(?:\.\d+)?$")
