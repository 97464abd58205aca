from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping


PressPhase = Literal[
    "down",
    "repeat",
    "hold_start",
    "hold_tick",
    "up",
    "hold_end",
    "single",
    "double",
    "cancel",
]

_PHASES = frozenset(
    {
        "down",
        "repeat",
        "hold_start",
        "hold_tick",
        "up",
        "hold_end",
        "single",
        "double",
        "cancel",
    }
)

# A completed click; holds, repeats and double presses leave the plot alone.
TOGGLE_PHASES = frozenset({"single"})


@dataclass(frozen=True)
class PressEvent:
    """Pointer press at overlay coordinates, as delivered by the host input layer."""

    phase: PressPhase
    x: float
    y: float

    @property
    def toggles_collapse(self) -> bool:
        return self.phase in TOGGLE_PHASES


def parse_press_event(event_type: str, payload: object) -> PressEvent | None:
    """Parse a normalized `press` event carrying pointer coordinates.

    Anything that is not a press, has an unknown phase, or lacks numeric `x`/`y`
    yields None.
    """

    if event_type != "press" or not isinstance(payload, Mapping):
        return None
    phase = payload.get("phase")
    if phase not in _PHASES:
        return None
    x = payload.get("x")
    y = payload.get("y")
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    return PressEvent(phase=phase, x=float(x), y=float(y))
