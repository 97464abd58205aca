from __future__ import annotations

import math

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def pixel_bounds(x: float, y: float, w: float, h: float) -> tuple[int, int, int, int]:
    """Round a float rectangle to pixel edges, normalising negative extents."""
    if not all(math.isfinite(v) for v in (x, y, w, h)):
        return (0, 0, 0, 0)
    xa, xb = sorted((_round_half_up(x), _round_half_up(x + w)))
    ya, yb = sorted((_round_half_up(y), _round_half_up(y + h)))
    return xa, ya, xb, yb


def fill_rect(dst: np.ndarray, x: float, y: float, w: float, h: float, color: RGBA) -> None:
    x0, y0, x1, y1 = pixel_bounds(x, y, w, h)
    x0 = max(0, x0)
    y0 = max(0, y0)
    x1 = min(dst.shape[1], x1)
    y1 = min(dst.shape[0], y1)
    if x1 <= x0 or y1 <= y0:
        return
    patch = dst[y0:y1, x0:x1]
    a = color[3] / 255.0
    if a >= 1.0:
        patch[:, :, :] = np.asarray(color, dtype=np.uint8)
        return
    if a <= 0.0:
        return
    inv = 1.0 - a
    patch[:, :, :3] = (np.asarray(color[0:3], dtype=np.float32) * a + patch[:, :, :3].astype(np.float32) * inv).astype(np.uint8)
    patch[:, :, 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    a = color[3] / 255.0
    inv = 1.0 - a
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * inv).astype(np.uint8)
    dst[y, x, 3] = 255


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))
