from __future__ import annotations

from dataclasses import dataclass

from debug_graphs.options import GraphOptions, GraphSettings
from debug_graphs.pixel_mapper import value_to_y
from debug_graphs.range_tracker import RunningExtrema, ValueRange
from debug_graphs.raster.framebuffer import FrameBuffer, Rect
from debug_graphs.renderers.base import Renderer, format_number


@dataclass(frozen=True)
class BlitStep:
    """Source and destination rectangles of one scroll-and-rescale step."""

    src: Rect
    dst: Rect


class IncrementalBlitRenderer(Renderer):
    """Stores no samples: the plot raster is the history.

    Each update scrolls the plot region one column left through a self-blit,
    squeezing the old pixels vertically when the running extrema widen, then
    paints a single new column on the right edge. O(1) per update, but repeated
    rescales accumulate resampling error and the range never tightens.
    """

    def __init__(self, options: GraphOptions, settings: GraphSettings, surface: FrameBuffer | None = None) -> None:
        self.extrema = RunningExtrema(floor=settings.min_graph_range)
        super().__init__(options, settings, surface)

    @property
    def plot_top(self) -> float:
        return self.label_height + self.padding

    def current_range(self) -> ValueRange | None:
        return self.extrema.current()

    def update(self, value: float, *, collapsed: bool = False) -> None:
        value = float(value)
        value_range = self.extrema.observe(value)
        self.draw_value_label(format_number(value))
        if collapsed:
            # The raster is not scrolled while hidden, so the committed range must not move either.
            return

        step = self.blit_step(value)
        s = self.surface
        s.blit(step.src, step.dst, fill=self.background)

        x = s.width - self.pixel_ratio
        s.fill_rect(x, self.label_height, self.pixel_ratio, s.height, self.background)
        mark_height = self.pixel_ratio if self.settings.style == "line" else s.height
        y = value_to_y(value, value_range, self.plot_height, self.plot_top)
        s.fill_rect(x, y, self.pixel_ratio, mark_height, self.foreground)

        self.extrema.commit(value_range)

    def blit_step(self, value: float) -> BlitStep:
        """Rectangles that shift the plot one column left and rescale it for `value`.

        Exceeding the old max moves the destination down and shortens it by
        `(value - max) / (max - min)` of the plot height; falling below the old min
        shortens it by `(min - value) / (max - min)`. A jump that would shrink the
        destination to nothing compresses it by `old span / new span` instead,
        anchored at the bottom for a new max and at the top for a new min.
        """

        top = self.plot_top
        height = self.plot_height
        src_height = height + self.padding
        dst_y = top
        dst_height = src_height
        previous = self.extrema.current()
        if previous is not None and (value > previous.max or value < previous.min):
            span = previous.span
            outside = value - previous.max if value > previous.max else previous.min - value
            delta = outside / span * height
            if delta >= src_height:
                dst_height = src_height * span / self.extrema.observe(value).span
                delta = src_height - dst_height
            else:
                dst_height -= delta
            if value > previous.max:
                dst_y += delta
        width = self.surface.width
        return BlitStep(
            src=(0, top, width, src_height),
            dst=(-self.pixel_ratio, dst_y, width, dst_height),
        )
