from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from debug_graphs.raster.canvas import RGBA, fill_rect, new_canvas, pixel_bounds
from debug_graphs.raster.draw_lines import draw_polyline
from debug_graphs.raster.draw_text import DEFAULT_FONT_FAMILY, TextAlign, draw_text


Rect = tuple[float, float, float, float]


@dataclass
class FrameBuffer:
    """RGBA raster owned by exactly one plot.

    Exposes the three primitives the renderers need (rectangle fill, text draw
    and self-blit) plus polyline stroking. Coordinates are floats and are
    rounded to pixel edges; anything outside the surface is clipped.
    """

    width: int
    height: int
    background: RGBA = (0, 0, 0, 255)
    font_family: str = DEFAULT_FONT_FAMILY

    def __post_init__(self) -> None:
        self.pixels = new_canvas(self.width, self.height, self.background)

    def clear(self, color: RGBA | None = None) -> None:
        self.fill_rect(0, 0, self.width, self.height, self.background if color is None else color)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        fill_rect(self.pixels, x, y, w, h, color)

    def stroke_polyline(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
        draw_polyline(self.pixels, xs, ys, color=color, width=width)

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: RGBA,
        *,
        font_size_px: float,
        align: TextAlign = "left",
        max_width: float | None = None,
        outline_color: RGBA | None = None,
        outline_px: int = 0,
    ) -> None:
        draw_text(
            self.pixels,
            x,
            y,
            text,
            color,
            font_family=self.font_family,
            font_size_px=font_size_px,
            align=align,
            max_width=max_width,
            outline_color=outline_color,
            outline_px=outline_px,
        )

    def blit(self, src: Rect, dst: Rect, *, fill: RGBA | None = None) -> None:
        """Copy `src` onto `dst` of this same surface, resampling nearest-neighbour.

        The source is sampled before anything is written, so overlapping
        rectangles are safe. When `fill` is given the source rectangle is painted
        with it after sampling; destination pixels then cover only what the
        resized copy reaches. A destination with no height or width leaves just
        the fill.
        """

        sx0, sy0, sx1, sy1 = pixel_bounds(*src)
        sx0 = max(0, sx0)
        sy0 = max(0, sy0)
        sx1 = min(self.width, sx1)
        sy1 = min(self.height, sy1)
        if sx1 <= sx0 or sy1 <= sy0:
            return
        patch = self.pixels[sy0:sy1, sx0:sx1].copy()
        if fill is not None:
            self.fill_rect(sx0, sy0, sx1 - sx0, sy1 - sy0, fill)

        dx, dy, dw, dh = dst
        if dw <= 0 or dh <= 0:
            return
        dx0, dy0, dx1, dy1 = pixel_bounds(dx, dy, dw, dh)
        if dx1 <= dx0 or dy1 <= dy0:
            return

        ph, pw, _ = patch.shape
        ys = np.arange(dy0, dy1)
        xs = np.arange(dx0, dx1)
        src_rows = np.clip(((ys - dy0 + 0.5) * ph / (dy1 - dy0)).astype(np.int64), 0, ph - 1)
        src_cols = np.clip(((xs - dx0 + 0.5) * pw / (dx1 - dx0)).astype(np.int64), 0, pw - 1)
        ymask = (ys >= 0) & (ys < self.height)
        xmask = (xs >= 0) & (xs < self.width)
        if not np.any(ymask) or not np.any(xmask):
            return
        self.pixels[np.ix_(ys[ymask], xs[xmask])] = patch[np.ix_(src_rows[ymask], src_cols[xmask])]
