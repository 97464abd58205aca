from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Literal

import numpy as np

from .options import GraphSettings
from .range_tracker import ValueRange
from .raster.framebuffer import FrameBuffer
from .renderers import Renderer


LOGGER = logging.getLogger(__name__)

PlotDisplay = Literal["expanded", "collapsed"]


@dataclass
class Plot:
    """One named strip-chart: settings, renderer and the raster the renderer owns."""

    key: str
    settings: GraphSettings
    renderer: Renderer
    display: PlotDisplay = "expanded"

    def __post_init__(self) -> None:
        if self.settings.collapse:
            self.display = "collapsed"

    @property
    def surface(self) -> FrameBuffer:
        return self.renderer.surface

    @property
    def collapsed(self) -> bool:
        return self.display == "collapsed"

    def collapse(self) -> PlotDisplay:
        self.display = "collapsed"
        return self.display

    def expand(self) -> PlotDisplay:
        self.display = "expanded"
        return self.display

    def toggle_collapsed(self) -> PlotDisplay:
        state = self.expand() if self.collapsed else self.collapse()
        LOGGER.debug("plot %r is now %s", self.key, state)
        return state

    def update(self, value: float) -> None:
        self.renderer.update(value, collapsed=self.collapsed)

    def current_range(self) -> ValueRange | None:
        return self.renderer.current_range()

    def visible_height(self, header_height: int) -> int:
        if self.collapsed:
            return min(header_height, self.surface.height)
        return self.surface.height

    def visible_pixels(self, header_height: int) -> np.ndarray:
        return self.surface.pixels[: self.visible_height(header_height)]
