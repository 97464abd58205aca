from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import re
import tomllib
from typing import Any, Literal, Mapping

from .errors import GraphConfigError

RGBA = tuple[int, int, int, int]
RendererMode = Literal["buffered", "incremental"]
GraphStyle = Literal["line", "fill"]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")
_MODES = ("buffered", "incremental")
_STYLES = ("line", "fill")


@dataclass(frozen=True)
class GraphOptions:
    """Registry-wide geometry and formatting options shared by every plot."""

    graph_width: int = 75
    graph_height: int = 25
    font_size: float = 5.0
    title_to_value_ratio: float = 0.6
    rounding_factor: float = 100.0
    pixel_ratio: int = 1
    mode: RendererMode = "buffered"
    min_graph_range: float | None = None
    font_family: str = "DejaVu Sans"

    @property
    def canvas_width(self) -> int:
        return int(self.graph_width * self.pixel_ratio)

    @property
    def canvas_height(self) -> int:
        return int(self.graph_height * self.pixel_ratio)

    @property
    def padding(self) -> int:
        return int(self.pixel_ratio)

    @property
    def header_height(self) -> int:
        """Rows kept visible when a plot is collapsed: title text plus padding."""
        return int(round(self.font_size * self.pixel_ratio)) + 2 * self.padding


@dataclass(frozen=True)
class GraphSettings:
    """Per-plot presentation settings; immutable once the plot exists."""

    title: str = "Graph"
    section: str | None = None
    foreground: str | tuple[int, ...] = "#FF00FF"
    background: str | tuple[int, ...] = "#220022"
    show_range: bool = True
    style: GraphStyle = "line"
    min_graph_range: float = 1.5
    collapse: bool = False
    value_prefix: str = ""
    value_suffix: str = ""

    @property
    def foreground_rgba(self) -> RGBA:
        return parse_color(self.foreground, "foreground")

    @property
    def background_rgba(self) -> RGBA:
        return parse_color(self.background, "background")


DEFAULT_OPTIONS = GraphOptions()
_CLASS_DEFAULTS = GraphSettings()

DEFAULT_SETTINGS: dict[str, GraphSettings] = {
    "buffered": GraphSettings(),
    # The incremental renderer never draws range annotations.
    "incremental": GraphSettings(foreground="#0000FF", background="#FF0000", show_range=False),
}


def parse_color(value: object, label: str = "color") -> RGBA:
    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise GraphConfigError(f"`{label}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        r = int(value[1:3], 16)
        g = int(value[3:5], 16)
        b = int(value[5:7], 16)
        a = int(value[7:9], 16) if len(value) == 9 else 255
        return (r, g, b, a)
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise GraphConfigError(f"`{label}` channels must be within 0..255")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise GraphConfigError(f"`{label}` must be a hex string or an RGB(A) tuple")


def create_options(overrides: Mapping[str, Any] | GraphOptions | None = None) -> GraphOptions:
    """Merge caller overrides over `DEFAULT_OPTIONS`.

    Geometry values are passed through unchecked; only key names, the renderer
    mode and the font family type are validated.
    """

    if isinstance(overrides, GraphOptions):
        return overrides
    raw: dict[str, Any] = asdict(DEFAULT_OPTIONS)
    for key, value in (overrides or {}).items():
        if key not in raw:
            raise GraphConfigError(f"Unknown graph option: {key}")
        if value is not None:
            raw[key] = value
    if raw["mode"] not in _MODES:
        raise GraphConfigError(f"Option `mode` must be one of {', '.join(_MODES)}")
    if not isinstance(raw["font_family"], str):
        raise GraphConfigError("Option `font_family` must be a string")
    return GraphOptions(**raw)


def merge_settings(
    overrides: Mapping[str, Any] | GraphSettings | None,
    *,
    mode: RendererMode = "buffered",
    min_graph_range: float | None = None,
) -> GraphSettings:
    """Merge caller settings over the per-mode defaults, field by field.

    `min_graph_range` is the registry-wide option; it replaces the per-mode default
    but still loses to a value supplied by the caller.
    """

    if isinstance(overrides, GraphSettings):
        # Only fields that differ from the class defaults override the mode defaults.
        overrides = {
            f.name: getattr(overrides, f.name)
            for f in fields(GraphSettings)
            if getattr(overrides, f.name) != getattr(_CLASS_DEFAULTS, f.name)
        }
    raw: dict[str, Any] = asdict(DEFAULT_SETTINGS[mode])
    if min_graph_range is not None:
        raw["min_graph_range"] = float(min_graph_range)
    for key, value in (overrides or {}).items():
        if key not in raw:
            raise GraphConfigError(f"Unknown graph setting: {key}")
        if value is not None:
            raw[key] = value

    parse_color(raw["foreground"], "foreground")
    parse_color(raw["background"], "background")
    if raw["style"] not in _STYLES:
        raise GraphConfigError("Setting `style` must be `line` or `fill`")
    if raw["section"] is not None:
        raw["section"] = str(raw["section"])

    return GraphSettings(
        title=str(raw["title"]),
        section=raw["section"],
        foreground=raw["foreground"],
        background=raw["background"],
        show_range=bool(raw["show_range"]),
        style=raw["style"],
        min_graph_range=float(raw["min_graph_range"]),
        collapse=bool(raw["collapse"]),
        value_prefix=str(raw["value_prefix"]),
        value_suffix=str(raw["value_suffix"]),
    )


@dataclass(frozen=True)
class GraphConfig:
    options: GraphOptions
    graphs: dict[str, dict[str, Any]]


def load_config(path: str | Path) -> GraphConfig:
    """Read `[options]` and `[graphs.<key>]` tables from a TOML file."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"graph config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise GraphConfigError(f"invalid graph config {config_path}: {exc}") from exc

    unknown = set(raw) - {"options", "graphs"}
    if unknown:
        raise GraphConfigError(f"Unknown config table: {sorted(unknown)[0]}")
    options_table = raw.get("options", {})
    graphs_table = raw.get("graphs", {})
    if not isinstance(options_table, dict):
        raise GraphConfigError("`options` must be a table")
    if not isinstance(graphs_table, dict):
        raise GraphConfigError("`graphs` must be a table")

    options = create_options(options_table)
    graphs: dict[str, dict[str, Any]] = {}
    for key, table in graphs_table.items():
        if not isinstance(table, dict):
            raise GraphConfigError(f"`graphs.{key}` must be a table")
        # add() merges again against the same defaults.
        merge_settings(table, mode=options.mode, min_graph_range=options.min_graph_range)
        graphs[str(key)] = dict(table)
    return GraphConfig(options=options, graphs=graphs)
