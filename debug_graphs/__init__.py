from __future__ import annotations

from typing import Any, Mapping

from debug_graphs.errors import DebugGraphError, GraphConfigError
from debug_graphs.interaction import PressEvent, parse_press_event
from debug_graphs.options import GraphOptions, GraphSettings, create_options, load_config, merge_settings
from debug_graphs.plot import Plot
from debug_graphs.range_tracker import RunningExtrema, ValueRange
from debug_graphs.raster.framebuffer import FrameBuffer
from debug_graphs.registry import DebugGraphs
from debug_graphs.renderers import BufferedReplayRenderer, IncrementalBlitRenderer, Renderer
from debug_graphs.surface import OverlaySurface


def create(options: Mapping[str, Any] | GraphOptions | None = None) -> DebugGraphs:
    return DebugGraphs(options)


__all__ = [
    "BufferedReplayRenderer",
    "DebugGraphError",
    "DebugGraphs",
    "FrameBuffer",
    "GraphConfigError",
    "GraphOptions",
    "GraphSettings",
    "IncrementalBlitRenderer",
    "OverlaySurface",
    "Plot",
    "PressEvent",
    "Renderer",
    "RunningExtrema",
    "ValueRange",
    "create",
    "create_options",
    "load_config",
    "merge_settings",
    "parse_press_event",
]
