from __future__ import annotations

from abc import ABC, abstractmethod
import math

from debug_graphs.options import GraphOptions, GraphSettings
from debug_graphs.range_tracker import ValueRange
from debug_graphs.raster.framebuffer import FrameBuffer


def round_to_factor(value: float, factor: float) -> float:
    """Round half up to `1 / factor` steps (factor 100 keeps two decimals)."""
    if not math.isfinite(value) or factor <= 0:
        return value
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


class Renderer(ABC):
    """Draws one plot into its framebuffer.

    Layout, top to bottom: title and value label, a separator line, then the plot
    region. The label is redrawn on every update; the plot region only when the
    plot is expanded.
    """

    def __init__(self, options: GraphOptions, settings: GraphSettings, surface: FrameBuffer | None = None) -> None:
        self.options = options
        self.settings = settings
        self.foreground = settings.foreground_rgba
        self.background = settings.background_rgba
        if surface is None:
            surface = FrameBuffer(
                width=options.canvas_width,
                height=options.canvas_height,
                background=self.background,
                font_family=options.font_family,
            )
        self.surface = surface
        self.draw_frame()

    @property
    def pixel_ratio(self) -> int:
        return self.options.pixel_ratio

    @property
    def padding(self) -> int:
        return self.options.padding

    @property
    def font_px(self) -> float:
        return self.options.font_size * self.options.pixel_ratio

    @property
    def label_height(self) -> float:
        # Text plus padding for the separator underneath it.
        return self.font_px + 2 * self.padding

    @property
    def plot_height(self) -> float:
        return self.surface.height - self.label_height - 3 * self.padding

    def draw_frame(self) -> None:
        s = self.surface
        s.clear(self.background)
        s.draw_text(self.settings.title, self.pixel_ratio, self.font_px, self.foreground, font_size_px=self.font_px)
        s.fill_rect(0, self.font_px + self.padding, s.width, self.padding, self.foreground)

    def draw_value_label(self, text: str) -> None:
        s = self.surface
        ratio = self.options.title_to_value_ratio
        # Stop above the separator.
        s.fill_rect(s.width * ratio, 0, s.width, self.label_height - self.padding, self.background)
        s.draw_text(
            f"{self.settings.value_prefix}{text}{self.settings.value_suffix}",
            s.width,
            self.label_height - 2 * self.padding,
            self.foreground,
            font_size_px=self.font_px,
            align="right",
            max_width=s.width * (1 - ratio),
        )

    @abstractmethod
    def update(self, value: float, *, collapsed: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    def current_range(self) -> ValueRange | None:
        raise NotImplementedError
