from __future__ import annotations

from debug_graphs.options import GraphOptions, GraphSettings
from debug_graphs.raster.framebuffer import FrameBuffer

from .base import Renderer, format_number, round_to_factor
from .buffered import BufferedReplayRenderer
from .incremental import BlitStep, IncrementalBlitRenderer

RENDERERS: dict[str, type[Renderer]] = {
    "buffered": BufferedReplayRenderer,
    "incremental": IncrementalBlitRenderer,
}


def create_renderer(options: GraphOptions, settings: GraphSettings, surface: FrameBuffer | None = None) -> Renderer:
    try:
        cls = RENDERERS[options.mode]
    except KeyError as exc:
        raise ValueError(f"unknown renderer mode: {options.mode}") from exc
    return cls(options, settings, surface)


__all__ = [
    "BlitStep",
    "BufferedReplayRenderer",
    "IncrementalBlitRenderer",
    "RENDERERS",
    "Renderer",
    "create_renderer",
    "format_number",
    "round_to_factor",
]
