from __future__ import annotations

from dataclasses import asdict, dataclass, field
import logging
from pathlib import Path
from typing import Any, Iterator, Literal, Mapping

import numpy as np

from .interaction import PressEvent, parse_press_event
from .options import GraphOptions, GraphSettings, create_options, load_config, merge_settings
from .plot import Plot
from .raster.framebuffer import FrameBuffer
from .renderers import create_renderer
from .surface import OverlaySurface, SurfaceTarget, compile_full_rewrite_batch, compile_replace_patches_batch


LOGGER = logging.getLogger(__name__)

SECTION_FONT_PX = 12.0
SECTION_BACKGROUND = (0, 0, 255, 255)
SECTION_FOREGROUND = (0, 0, 0, 255)
OVERLAY_OPACITY = 0.9


@dataclass
class Section:
    """Header band grouping the plots that name it, in registration order."""

    name: str
    header: FrameBuffer
    keys: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LayoutSlot:
    kind: Literal["section", "plot"]
    name: str
    y: int
    height: int


class DebugGraphs:
    """Registry of named plots stacked into one overlay.

    Keys are unique and their registration order is the stacking order. Sections
    are created lazily the first time a plot's settings name them and take the
    root position of that first plot.
    """

    def __init__(self, options: Mapping[str, Any] | GraphOptions | None = None) -> None:
        self.options = create_options(options)
        self._plots: dict[str, Plot] = {}
        self._sections: dict[str, Section] = {}
        self._root: list[tuple[Literal["section", "plot"], str]] = []
        self._target: SurfaceTarget | None = None
        self._origin = (0, 0)
        self._presented_height = 0

    @classmethod
    def from_config(cls, path: str | Path, overrides: Mapping[str, Any] | None = None) -> "DebugGraphs":
        """Build a registry from a TOML file; non-None `overrides` win over its `[options]`."""
        config = load_config(path)
        options = config.options
        if overrides:
            options = create_options({**asdict(options), **overrides})
        graphs = cls(options)
        for key, settings in config.graphs.items():
            graphs.add(key, settings)
        return graphs

    def __contains__(self, key: object) -> bool:
        return key in self._plots

    def __len__(self) -> int:
        return len(self._plots)

    def __iter__(self) -> Iterator[str]:
        return iter(self._plots)

    def get(self, key: str) -> Plot | None:
        return self._plots.get(key)

    @property
    def sections(self) -> tuple[str, ...]:
        return tuple(self._sections)

    @property
    def target(self) -> SurfaceTarget | None:
        return self._target

    def add(self, key: str, settings: Mapping[str, Any] | GraphSettings | None = None) -> None:
        if key in self._plots:
            LOGGER.debug("ignoring duplicate graph key %r", key)
            return

        merged = merge_settings(settings, mode=self.options.mode, min_graph_range=self.options.min_graph_range)
        plot = Plot(key=key, settings=merged, renderer=create_renderer(self.options, merged))
        self._plots[key] = plot

        if merged.section:
            section = self._sections.get(merged.section)
            if section is None:
                section = self._create_section(merged.section)
                self._sections[merged.section] = section
                self._root.append(("section", merged.section))
            section.keys.append(key)
        else:
            self._root.append(("plot", key))
        self._present_all()

    def update(self, key: str, value: float) -> None:
        plot = self._plots.get(key)
        if plot is None:
            # Callers may feed metrics that were only registered conditionally.
            LOGGER.debug("ignoring update for unknown graph key %r", key)
            return
        plot.update(value)
        self._present_plot(key)

    def toggle(self, key: str) -> None:
        plot = self._plots.get(key)
        if plot is None:
            return
        plot.toggle_collapsed()
        self._present_all()

    def plot_at(self, x: float, y: float) -> str | None:
        if x < 0 or x >= self.options.canvas_width:
            return None
        for slot in self.layout():
            if slot.kind == "plot" and slot.y <= y < slot.y + slot.height:
                return slot.name
        return None

    def handle_press(self, event: PressEvent | str, payload: object = None) -> str | None:
        """Toggle the plot under a click; returns its key, or None if nothing toggled.

        Accepts either a parsed `PressEvent` or a raw `(event_type, payload)` pair.
        Coordinates are relative to the overlay origin.
        """

        press = event if isinstance(event, PressEvent) else parse_press_event(event, payload)
        if press is None or not press.toggles_collapse:
            return None
        key = self.plot_at(press.x, press.y)
        if key is not None:
            self.toggle(key)
        return key

    def layout(self) -> list[LayoutSlot]:
        slots: list[LayoutSlot] = []
        y = 0
        for kind, name in self._root:
            if kind == "plot":
                height = self._plots[name].visible_height(self.options.header_height)
                slots.append(LayoutSlot(kind="plot", name=name, y=y, height=height))
                y += height
                continue
            section = self._sections[name]
            slots.append(LayoutSlot(kind="section", name=name, y=y, height=section.header.height))
            y += section.header.height
            for key in section.keys:
                height = self._plots[key].visible_height(self.options.header_height)
                slots.append(LayoutSlot(kind="plot", name=key, y=y, height=height))
                y += height
        return slots

    def compose(self) -> np.ndarray:
        """Render the whole overlay as one RGBA array."""
        slots = self.layout()
        height = slots[-1].y + slots[-1].height if slots else 0
        overlay = np.zeros((height, self.options.canvas_width, 4), dtype=np.uint8)
        for slot in slots:
            pixels = self._slot_pixels(slot)
            overlay[slot.y : slot.y + pixels.shape[0], : pixels.shape[1]] = pixels
        return overlay

    def attach(self, target: SurfaceTarget | None = None, *, x: int = 0, y: int = 0) -> SurfaceTarget:
        """Route every redraw into `target` at offset (x, y).

        Without a target an auto-growing `OverlaySurface` is created.
        """

        if target is None:
            target = OverlaySurface(0, 0, auto_grow=True)
        self._target = target
        self._origin = (int(x), int(y))
        self._presented_height = 0
        LOGGER.info("debug graphs attached to %s at (%d, %d)", type(target).__name__, x, y)
        self._present_all()
        return target

    def close(self) -> None:
        """Tear down every plot and section; the registry is empty afterwards."""
        self._plots.clear()
        self._sections.clear()
        self._root.clear()
        self._target = None

    def _create_section(self, name: str) -> Section:
        pr = self.options.pixel_ratio
        font_px = SECTION_FONT_PX * pr
        header = FrameBuffer(
            width=self.options.canvas_width,
            height=int(round(font_px)) + 2 * self.options.padding,
            background=SECTION_BACKGROUND,
            font_family=self.options.font_family,
        )
        header.draw_text(name, pr, self.options.padding + font_px, SECTION_FOREGROUND, font_size_px=font_px)
        LOGGER.debug("created graph section %r", name)
        return Section(name=name, header=header)

    def _slot_pixels(self, slot: LayoutSlot) -> np.ndarray:
        if slot.kind == "section":
            pixels = self._sections[slot.name].header.pixels.copy()
        else:
            pixels = self._plots[slot.name].visible_pixels(self.options.header_height).copy()
        pixels[:, :, 3] = (pixels[:, :, 3].astype(np.float32) * OVERLAY_OPACITY).astype(np.uint8)
        return pixels

    def _present_all(self) -> None:
        if self._target is None:
            return
        overlay = self.compose()
        ox, oy = self._origin
        if isinstance(self._target, OverlaySurface) and self._target.auto_grow:
            # A growing surface is resized to the overlay, so collapsed rows disappear with it.
            frame = np.pad(overlay, ((oy, 0), (ox, 0), (0, 0)))
            if frame.shape[0] > 0 and frame.shape[1] > 0:
                self._target.submit_write_batch(compile_full_rewrite_batch(frame))
            self._presented_height = overlay.shape[0]
            return
        patches = []
        if overlay.shape[0] > 0:
            patches.append((ox, oy, overlay))
        stale_rows = self._presented_height - overlay.shape[0]
        if stale_rows > 0:
            # Rows left behind by a plot that just collapsed.
            blank = np.zeros((stale_rows, self.options.canvas_width, 4), dtype=np.uint8)
            patches.append((ox, oy + overlay.shape[0], blank))
        self._presented_height = overlay.shape[0]
        if patches:
            self._target.submit_write_batch(compile_replace_patches_batch(patches))

    def _present_plot(self, key: str) -> None:
        if self._target is None:
            return
        ox, oy = self._origin
        for slot in self.layout():
            if slot.kind == "plot" and slot.name == key:
                pixels = self._slot_pixels(slot)
                self._target.submit_write_batch(compile_replace_patches_batch([(ox, oy + slot.y, pixels)]))
                return
