"""The ordered settings catalog.

Order matters: 'contained' settings (margins, node width, border) come after
``size_w``/``size_h`` so that a full validation pass can bound them by the
canvas size approved earlier in the same pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sankey_dsl.config import MAX_BREAKPOINT
from sankey_dsl.errors import UnknownSettingError
from sankey_dsl.types import DataType


@dataclass(frozen=True)
class SettingMeta:
    name: str
    data_type: DataType
    default: Any
    choices: tuple[str, ...] = ()
    bounds: tuple[float, float | None] = (0, None)
    container: str | None = None  # 'w' or 'h' for CONTAINED settings

    @property
    def group(self) -> str:
        return setting_group(self.name)

    @property
    def internal(self) -> bool:
        return self.group == "internal"


def _yn(name: str, default: bool) -> SettingMeta:
    return SettingMeta(name, DataType.BOOLEAN, default)


def _radio(name: str, default: str, *choices: str) -> SettingMeta:
    return SettingMeta(name, DataType.RADIO, default, choices=choices)


def _color(name: str, default: str) -> SettingMeta:
    return SettingMeta(name, DataType.COLOR, default)


def _whole(name: str, default: int, low: int, high: int | None = None) -> SettingMeta:
    return SettingMeta(name, DataType.WHOLE, default, bounds=(low, high))


def _half(name: str, default: float, low: float, high: float | None = None) -> SettingMeta:
    return SettingMeta(name, DataType.HALF, default, bounds=(low, high))


def _decimal(name: str, default: float) -> SettingMeta:
    return SettingMeta(name, DataType.DECIMAL, default, bounds=(0, 1.0))


def _contained(name: str, default: int, dimension: str) -> SettingMeta:
    return SettingMeta(name, DataType.CONTAINED, default, container=dimension)


def _text(name: str, default: str, low: int = 0, high: int = 99) -> SettingMeta:
    return SettingMeta(name, DataType.TEXT, default, bounds=(low, high))


_FONT_WEIGHT = (100, 700)

_CATALOG: list[SettingMeta] = [
    _whole("size_w", 600, 40),
    _whole("size_h", 600, 40),
    _contained("margin_l", 12, "w"),
    _contained("margin_r", 12, "w"),
    _contained("margin_t", 18, "h"),
    _contained("margin_b", 20, "h"),
    _color("bg_color", "#ffffff"),
    _yn("bg_transparent", False),
    _contained("node_w", 9, "w"),
    _half("node_h", 50, 0, 100),
    _half("node_spacing", 85, 0, 100),
    _contained("node_border", 0, "w"),
    _radio("node_theme", "none", "a", "b", "c", "d", "none"),
    _color("node_color", "#888888"),
    _decimal("node_opacity", 1.0),
    _decimal("flow_curvature", 0.5),
    _radio("flow_inheritfrom", "none", "source", "target", "outside-in", "none"),
    _color("flow_color", "#999999"),
    _decimal("flow_opacity", 0.45),
    _radio("layout_order", "automatic", "automatic", "exact"),
    _yn("layout_justifyorigins", False),
    _yn("layout_justifyends", False),
    _yn("layout_reversegraph", False),
    _radio("layout_attachincompletesto", "nearest", "leading", "nearest", "trailing"),
    _color("labels_color", "#000000"),
    _yn("labels_hide", False),
    _decimal("labels_highlight", 0.55),
    _radio("labels_fontface", "sans-serif", "monospace", "sans-serif", "serif"),
    _decimal("labels_linespacing", 0.2),
    _whole("labels_relativesize", 110, 50, 150),
    _whole("labels_magnify", 100, 50, 150),
    _yn("labelname_appears", True),
    _half("labelname_size", 16, 6),
    _whole("labelname_weight", 400, *_FONT_WEIGHT),
    _color("labelname_color", "#000000"),
    _yn("labelvalue_appears", True),
    _yn("labelvalue_fullprecision", True),
    _radio("labelvalue_position", "below", "above", "before", "after", "below"),
    _whole("labelvalue_weight", 400, *_FONT_WEIGHT),
    _color("labelvalue_color", "#000000"),
    _yn("labelchange_appears", False),
    _text("labelchange_suffix", ""),
    _whole("labelchange_weight", 400, *_FONT_WEIGHT),
    _color("labelchange_color", "#000000"),
    SettingMeta("labelposition_autoalign", DataType.INTEGER, 0, bounds=(-1, 1)),
    _radio("labelposition_scheme", "auto", "auto", "per_stage"),
    _radio("labelposition_first", "before", "before", "after"),
    SettingMeta("labelposition_breakpoint", DataType.BREAKPOINT, MAX_BREAKPOINT),
    SettingMeta("value_format", DataType.LIST, ",.", choices=(",.", ".,", " .", " ,", "X.", "X,")),
    _text("value_prefix", ""),
    _text("value_suffix", ""),
    _text("diagram_title", ""),
    _half("title_size", 24, 6),
    _whole("title_weight", 700, *_FONT_WEIGHT),
    SettingMeta("title_gradient", DataType.GRADIENT, ""),
    _whole("themeoffset_a", 9, 0, 9),
    _whole("themeoffset_b", 0, 0, 9),
    _whole("themeoffset_c", 0, 0, 7),
    _whole("themeoffset_d", 0, 0, 11),
    _yn("meta_mentionsankeymatic", True),
    _yn("meta_listimbalances", True),
    _whole("internal_iterations", 25, 0, 50),
    _yn("internal_revealshadows", False),
]

SETTINGS: dict[str, SettingMeta] = {meta.name: meta for meta in _CATALOG}


def setting_group(name: str) -> str:
    """Return the group prefix of a setting name ('margin' for 'margin_l')."""
    return name.split("_")[0]


def has_setting(name: str) -> bool:
    return name in SETTINGS


def get_setting(name: str) -> SettingMeta:
    try:
        return SETTINGS[name]
    except KeyError:
        raise UnknownSettingError(name) from None


def default_values() -> dict[str, Any]:
    return {name: meta.default for name, meta in SETTINGS.items()}
