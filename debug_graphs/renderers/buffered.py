from __future__ import annotations

import numpy as np

from debug_graphs.options import GraphOptions, GraphSettings
from debug_graphs.pixel_mapper import values_to_y
from debug_graphs.range_tracker import ValueRange, window_range
from debug_graphs.raster.framebuffer import FrameBuffer
from debug_graphs.renderers.base import Renderer, format_number, round_to_factor
from debug_graphs.ring import RingState, SampleRing


class BufferedReplayRenderer(Renderer):
    """Keeps the last `graph_width` samples and replays all of them on every update.

    The range is rescanned from the ring each time, so it always matches exactly
    the samples on screen. Cost is O(width) per update.
    """

    def __init__(self, options: GraphOptions, settings: GraphSettings, surface: FrameBuffer | None = None) -> None:
        self.ring = SampleRing(int(options.graph_width))
        self._range: ValueRange | None = None
        super().__init__(options, settings, surface)

    @property
    def state(self) -> RingState:
        return self.ring.state

    @property
    def plot_top(self) -> float:
        return self.surface.height - self.plot_height - self.padding

    def current_range(self) -> ValueRange | None:
        return self._range

    def update(self, value: float, *, collapsed: bool = False) -> None:
        self.ring.push(value)
        value_range = window_range(self.ring.raw(), self.settings.min_graph_range)
        self._range = value_range

        factor = self.options.rounding_factor
        self.draw_value_label(format_number(round_to_factor(float(value), factor)))
        if collapsed:
            return
        self._draw_plot(value_range)

    def _draw_plot(self, value_range: ValueRange) -> None:
        s = self.surface
        top = self.plot_top
        height = self.plot_height
        s.fill_rect(0, top - self.padding, s.width, height + 2 * self.padding, self.background)

        samples = self.ring.ordered()
        xs = self.pixel_ratio * np.arange(samples.size, dtype=np.float64)
        ys = values_to_y(samples, value_range, height, top)
        if self.settings.style == "fill":
            bottom = top + height
            for x, y in zip(xs.tolist(), ys.tolist()):
                s.fill_rect(x, y, self.pixel_ratio, bottom - y, self.foreground)
        s.stroke_polyline(xs, ys, self.foreground, width=self.pixel_ratio)

        if self.settings.show_range:
            self._draw_range_labels(value_range, top)

    def _draw_range_labels(self, value_range: ValueRange, top: float) -> None:
        s = self.surface
        factor = self.options.rounding_factor
        max_width = s.width / 2
        for text, baseline in (
            (format_number(round_to_factor(value_range.min, factor)), s.height - self.padding),
            (format_number(round_to_factor(value_range.max, factor)), top + self.label_height / 2),
        ):
            s.draw_text(
                text,
                self.padding,
                baseline,
                self.foreground,
                font_size_px=self.font_px,
                max_width=max_width,
                outline_color=self.background,
                outline_px=self.pixel_ratio,
            )
