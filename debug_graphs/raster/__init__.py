from .canvas import fill_rect, new_canvas
from .draw_lines import draw_polyline
from .draw_text import draw_text
from .framebuffer import FrameBuffer, Rect

__all__ = [
    "FrameBuffer",
    "Rect",
    "draw_polyline",
    "draw_text",
    "fill_rect",
    "new_canvas",
]
