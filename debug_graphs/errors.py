from __future__ import annotations


class DebugGraphError(Exception):
    """Base class for errors raised by debug_graphs."""


class GraphConfigError(DebugGraphError, ValueError):
    """Raised when options, settings or a config file cannot be interpreted."""
