from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from debug_graphs.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 5.0
SANS_FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "helvetica",
    "arial",
    "verdana",
)

TextAlign = Literal["left", "right"]
Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    align: TextAlign = "left",
    max_width: float | None = None,
    outline_color: RGBA | None = None,
    outline_px: int = 0,
) -> None:
    """Draw `text` with its baseline at `y`.

    `x` is the left edge for `align="left"` and the right edge for `align="right"`.
    Text wider than `max_width` is squeezed horizontally to fit. With an outline,
    a dilated copy of the glyph mask is laid down in `outline_color` first.
    """

    if not text:
        return
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    mask, left, top = _render_mask(text=text, font=font)
    if max_width is not None and mask.shape[1] > max_width:
        squeezed_w = max(1, int(max_width))
        left = int(round(left * squeezed_w / mask.shape[1]))
        mask = _squeeze_mask(mask, squeezed_w)

    ox = int(round(x)) - mask.shape[1] if align == "right" else int(round(x)) + left
    oy = int(round(y)) + top
    if outline_color is not None and outline_px > 0:
        _blend_mask(dst, ox - outline_px, oy - outline_px, _dilate(mask, outline_px), outline_color)
    _blend_mask(dst, ox, oy, mask, color)


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    if h <= 0 or w <= 0:
        return

    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    sx0 = x0 - x
    sy0 = y0 - y
    cov = mask[sy0 : sy0 + (y1 - y0), sx0 : sx0 + (x1 - x0)].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(out_rgb, 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(out_alpha * 255.0, 0, 255).astype(np.uint8)


def _dilate(mask: np.ndarray, radius: int) -> np.ndarray:
    h, w = mask.shape
    out = np.zeros((h + 2 * radius, w + 2 * radius), dtype=np.uint8)
    for dy in range(2 * radius + 1):
        for dx in range(2 * radius + 1):
            view = out[dy : dy + h, dx : dx + w]
            np.maximum(view, mask, out=view)
    return out


def _squeeze_mask(mask: np.ndarray, width: int) -> np.ndarray:
    image = Image.fromarray(mask).resize((width, mask.shape[0]), Image.Resampling.BILINEAR)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=256)
def _render_mask(text: str, font: Font) -> tuple[np.ndarray, int, int]:
    """Coverage mask plus its offset from the baseline-left origin."""
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8), int(left), int(top) - _ascent(font)


def _ascent(font: Font) -> int:
    if isinstance(font, ImageFont.FreeTypeFont):
        return int(font.getmetrics()[0])
    _, _, _, bottom = font.getbbox("Ag")
    return int(bottom)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError as exc:
            LOGGER.warning("could not load font %s (%s); using Pillow default", font_path, exc)
    else:
        LOGGER.warning("no font matching %r found; using Pillow default", font_family)
    return ImageFont.load_default(size=size)


def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + SANS_FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if stem == p:
                return path
    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p in path.stem.lower().replace(" ", ""):
                return path
    return None
