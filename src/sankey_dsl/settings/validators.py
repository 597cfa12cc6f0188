"""Settings Validator: coerce human-entered values into typed setting values.

Every ``DataType`` has exactly one validator. A validator receives the
setting's metadata, the raw text the user typed and a ``ValidationContext``
carrying the dynamic bounds (canvas size, breakpoint ceiling). It returns
``(True, coerced)`` when the value is acceptable and ``(False, None)``
otherwise. Validators never touch stored state; resetting a bad value to its
default is the caller's job.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from matplotlib import colors as mcolors

from sankey_dsl.config import MAX_BREAKPOINT
from sankey_dsl.formatting import format_number
from sankey_dsl.settings.catalog import SettingMeta
from sankey_dsl.syntax import patterns
from sankey_dsl.types import DataType

Result = tuple[bool, Any]
Validator = Callable[[SettingMeta, str, "ValidationContext"], Result]

_REJECT: Result = (False, None)


@dataclass(frozen=True)
class ValidationContext:
    """Dynamic bounds for 'contained' and 'breakpoint' settings."""

    width: float = 600
    height: float = 600
    breakpoint_ceiling: int = MAX_BREAKPOINT

    def container(self, dimension: str) -> float:
        return self.width if dimension == "w" else self.height


# ─── Helpers ─────────────────────────────────────────────────────────────────


def resolve_color(text: str) -> str | None:
    """Return a 6-digit lowercase hex color for ``text``, or None.

    Accepts '#rgb'/'#rrggbb', the same without '#', and CSS color names.
    """
    candidate = text.strip()
    if patterns.RGB_COLOR.match(candidate):
        hex_digits = candidate[1:]
    elif patterns.BARE_COLOR.match(candidate):
        hex_digits = candidate
    else:
        named = mcolors.CSS4_COLORS.get(candidate.lower())
        return named.lower() if named else None
    if len(hex_digits) == 3:
        hex_digits = "".join(ch * 2 for ch in hex_digits)
    return f"#{hex_digits.lower()}"


def _in_bounds(value: float, low: float, high: float | None) -> bool:
    return value >= low and (high is None or value <= high)


def _as_number(text: str) -> int | float:
    number = float(text)
    return int(number) if number.is_integer() else number


# ─── Validators, one per DataType ────────────────────────────────────────────


def _validate_boolean(meta: SettingMeta, value: str, ctx: ValidationContext) -> Result:
    if patterns.YES_NO.match(value):
        return (True, bool(patterns.YES.match(value)))
    return _REJECT


def _validate_choice(meta: SettingMeta, value: str, ctx: ValidationContext) -> Result:
    if value in meta.choices:
        return (True, value)
    return _REJECT


def _validate_color(meta: SettingMeta, value: str, ctx: ValidationContext) -> Result:
    resolved = resolve_color(value)
    if resolved is None:
        return _REJECT
    return (True, resolved)


def _validate_gradient(meta: SettingMeta, value: str, ctx: ValidationContext) -> Result:
    # Gradients are permissive: anything that is not two resolvable colors
    # passes through unchanged.
    if not value or value in ("NaN", "0"):
        return (True, "")
    tokens = value.replace("'", "").split(",")
    if len(tokens) == 2:
        resolved = [resolve_color(token) for token in tokens]
        if all(resolved):
            return (True, ",".join(resolved))
    return (True, value)


def _validate_text(meta: SettingMeta, value: str, ctx: ValidationContext) -> Result:
    unescaped = value.replace("''", "'")
    low, high = meta.bounds
    if _in_bounds(len(unescaped), low, high):
        return (True, unescaped)
    return _REJECT


def _numeric_validator(pattern, bounds: Callable[[SettingMeta, ValidationContext], tuple[float, float | None]]):
    def _validate(meta: SettingMeta, value: str, ctx: ValidationContext) -> Result:
        if not pattern.match(value):
            return _REJECT
        number = _as_number(value)
        low, high = bounds(meta, ctx)
        if _in_bounds(number, low, high):
            return (True, number)
        return _REJECT

    return _validate


def _declared_bounds(meta: SettingMeta, ctx: ValidationContext) -> tuple[float, float | None]:
    return meta.bounds


_validate_decimal = _numeric_validator(patterns.DECIMAL, lambda meta, ctx: (0, 1.0))
_validate_integer = _numeric_validator(patterns.INTEGER, _declared_bounds)
_validate_half = _numeric_validator(patterns.HALF_NUMBER, _declared_bounds)
_validate_whole = _numeric_validator(patterns.WHOLE_NUMBER, _declared_bounds)
_validate_contained = _numeric_validator(
    patterns.WHOLE_NUMBER, lambda meta, ctx: (0, ctx.container(meta.container or "w"))
)
_validate_breakpoint = _numeric_validator(patterns.WHOLE_NUMBER, lambda meta, ctx: (0, ctx.breakpoint_ceiling))


_VALIDATORS: dict[DataType, Validator] = {
    DataType.BOOLEAN: _validate_boolean,
    DataType.RADIO: _validate_choice,
    DataType.LIST: _validate_choice,
    DataType.COLOR: _validate_color,
    DataType.GRADIENT: _validate_gradient,
    DataType.TEXT: _validate_text,
    DataType.DECIMAL: _validate_decimal,
    DataType.INTEGER: _validate_integer,
    DataType.HALF: _validate_half,
    DataType.WHOLE: _validate_whole,
    DataType.CONTAINED: _validate_contained,
    DataType.BREAKPOINT: _validate_breakpoint,
}

_unhandled = set(DataType) - set(_VALIDATORS)
if _unhandled:
    raise RuntimeError(f"No validator for data types: {sorted(t.value for t in _unhandled)}")


# ─── Public API ──────────────────────────────────────────────────────────────


def validate(meta: SettingMeta, human_value: str, context: ValidationContext | None = None) -> Result:
    """Validate ``human_value`` for the setting described by ``meta``."""
    return _VALIDATORS[meta.data_type](meta, human_value, context or ValidationContext())


def to_human(meta: SettingMeta, value: Any) -> str:
    """Turn a stored (coerced) value back into the text a user would type."""
    if meta.data_type is DataType.BOOLEAN:
        return "y" if value else "n"
    if meta.data_type.is_numeric:
        return format_number(value)
    return str(value)
