"""Line Classifier: split definition text into typed line records.

Settings and Move lines are found in a first pass over every line, so a
setting may appear anywhere in the text. Node, Flow, and Comment lines are
classified in a second pass over whatever the first pass left behind.
"""

from __future__ import annotations

import logging
import math
import re

from sankey_dsl.config import MAX_BREAKPOINT
from sankey_dsl.diagnostics import Diagnostics
from sankey_dsl.errors import UnknownSettingError
from sankey_dsl.formatting import decimal_places
from sankey_dsl.ir.ast import Classified, FlowLine, InvalidLine, MoveLine, NodeLine, SettingLine
from sankey_dsl.settings.catalog import get_setting, has_setting, setting_group
from sankey_dsl.settings.validators import validate
from sankey_dsl.state import DiagramState
from sankey_dsl.syntax import patterns
from sankey_dsl.types import FlowOperation

logger = logging.getLogger(__name__)

LABEL_COLOR_KEYS = ("labelname_color", "labelvalue_color", "labelchange_color")

NOT_A_SETTING = "Not a valid setting name"
NOT_A_LINE = "Does not match the format of a Flow or Node or Setting"
BAD_AMOUNT = (
    "The [Amount] must be a number in the form #.# or a wildcard "
    f'("{FlowOperation.USE_REMAINDER.value}" or "{FlowOperation.FILL_MISSING.value}")'
)
NEGATIVE_AMOUNT = "Amounts must not be negative"
HUGE_AMOUNT = "Amounts must be finite numbers"


# ─── Line normalization ──────────────────────────────────────────────────────


def normalize_lines(text: str) -> list[str]:
    """Split ``text`` into lines, trimmed and without leading/trailing zero-width spaces."""
    return [line.strip().strip(patterns.ZERO_WIDTH_SPACE).strip() for line in text.split("\n")]


# ─── First pass: settings & moves ────────────────────────────────────────────


def normalize_setting_name(raw_name: str, group: str) -> tuple[str, str]:
    """Return (catalog name, display name) for a setting name as typed.

    ``group`` is the group of the previous settings line; an unknown
    single-word name is retried inside that group.
    """
    display_name = raw_name.strip()
    name = "_".join(display_name.split())
    for long_word in patterns.LONG_SETTING_WORDS:
        if name.endswith(long_word):
            name = name.replace(long_word, long_word[0], 1)
    if not has_setting(name) and "_" not in name and group:
        name = f"{group}_{name}"
        display_name = f"{group} {display_name}"
    return name, display_name


def _classify_setting(line: str, row: int, group: str) -> tuple[SettingLine | InvalidLine | None, str]:
    """Classify one line as a setting; returns (record or None, next group)."""
    parts = patterns.SETTINGS_VALUE.match(line) or patterns.SETTINGS_TEXT.match(line)
    if parts is None:
        return None, group
    name, display_name = normalize_setting_name(parts.group(1), group)
    # The group follows the latest settings line whether or not it is valid.
    next_group = setting_group(name)
    try:
        meta = get_setting(name)
    except UnknownSettingError:
        return InvalidLine(row=row, text=line, reason=f"{NOT_A_SETTING}: {display_name}"), next_group
    record = SettingLine(row=row, text=line, name=meta.name, display_name=display_name, value=parts.group(2))
    return record, next_group


def _classify_move(line: str, row: int) -> MoveLine | None:
    parts = patterns.MOVE_LINE.match(line)
    if parts is None:
        return None
    node_name, dx, dy = parts.groups()
    return MoveLine(row=row, text=line, node_name=node_name, dx=float(dx), dy=float(dy))


# ─── Second pass: nodes, flows, comments ─────────────────────────────────────


def _classify_node(line: str, row: int) -> NodeLine | None:
    m = patterns.NODE_LINE.match(line)
    if m is None:
        return None
    label_colors: dict[str, str] = {}
    if m.group("label_colors"):
        for key, part in zip(LABEL_COLOR_KEYS, m.group("label_colors").split(",")):
            if part.strip():
                label_colors[key] = part.strip()
    return NodeLine(
        row=row,
        text=line,
        name=m.group("name").strip(),
        color=m.group("color"),
        opacity=m.group("opacity"),
        previous_value=m.group("previous"),
        label_colors=label_colors,
        paint_inputs=(m.group("paint1"), m.group("paint2")),
    )


def _classify_flow(m: re.Match[str], line: str, row: int, out: Classified) -> FlowLine | InvalidLine | None:
    """Build a FlowLine from a flow match; None when the amount is blank."""
    amount_text = "".join(m.group("amount").split())
    if amount_text == "":
        out.skipped_flows.append(line)
        return None
    operation = FlowOperation.from_symbol(amount_text)
    amount: float | None = None
    if operation is None:
        if not patterns.NUMERIC_AMOUNT.match(amount_text):
            return InvalidLine(row=row, text=line, reason=BAD_AMOUNT)
        amount = float(amount_text)
        if not math.isfinite(amount):
            return InvalidLine(row=row, text=line, reason=HUGE_AMOUNT)
        if amount < 0:
            return InvalidLine(row=row, text=line, reason=NEGATIVE_AMOUNT)
        amount += 0.0  # normalizes -0.0
        out.max_decimal_places = max(out.max_decimal_places, decimal_places(amount_text))
    return FlowLine(
        row=row,
        text=line,
        source=m.group("source").strip(),
        target=m.group("target").strip(),
        amount=amount,
        operation=operation,
    )


# ─── Public API ──────────────────────────────────────────────────────────────


def classify(text: str) -> Classified:
    """Classify every line of ``text``."""
    lines = normalize_lines(text)
    out = Classified()
    claimed: set[int] = set()

    group = ""
    for row, line in enumerate(lines):
        move = _classify_move(line, row)
        if move is not None:
            out.moves.append(move)
            claimed.add(row)
            continue
        setting, group = _classify_setting(line, row, group)
        if setting is None:
            continue
        claimed.add(row)
        if isinstance(setting, SettingLine):
            out.settings.append(setting)
        else:
            out.invalid.append(setting)

    for row, line in enumerate(lines):
        if row in claimed:
            continue
        if line == "":
            continue
        if patterns.COMMENT_LINE.match(line):
            out.comments += 1
            continue
        node = _classify_node(line, row)
        if node is not None:
            out.nodes.append(node)
            continue
        m = patterns.FLOW_LINE.match(line)
        if m is None:
            out.invalid.append(InvalidLine(row=row, text=line, reason=NOT_A_LINE))
            continue
        flow = _classify_flow(m, line, row, out)
        if isinstance(flow, InvalidLine):
            out.invalid.append(flow)
        elif flow is not None:
            out.flows.append(flow)

    out.invalid.sort(key=lambda inv: inv.row)
    logger.debug(
        "Classified %d settings, %d moves, %d nodes, %d flows, %d invalid",
        len(out.settings),
        len(out.moves),
        len(out.nodes),
        len(out.flows),
        len(out.invalid),
    )
    return out


def apply_settings(
    lines: list[SettingLine],
    state: DiagramState,
    diagnostics: Diagnostics,
    max_breakpoint: int = MAX_BREAKPOINT,
) -> set[int]:
    """Validate settings lines in order and store valid values in ``state``.

    Returns the rows whose settings were applied.
    """
    applied: set[int] = set()
    for line in lines:
        meta = get_setting(line.name)
        ok, value = validate(meta, line.value, state.validation_context(max_breakpoint))
        if ok:
            state.set(meta.name, value)
            applied.add(line.row)
        else:
            diagnostics.issue(line.value, f"Invalid value for {line.display_name}", row=line.row)
    return applied


def apply_moves(lines: list[MoveLine], state: DiagramState) -> None:
    """Record move lines in the state's move map, by node name."""
    state.merge_moves({line.node_name: (line.dx, line.dy) for line in lines})
