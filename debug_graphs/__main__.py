from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
import random

from PIL import Image

from debug_graphs.registry import DebugGraphs
from debug_graphs.surface import OverlaySurface


LOGGER = logging.getLogger("debug_graphs")

DEMO_GRAPHS = {
    "frame_ms": {"title": "Frame", "section": "perf", "value_suffix": "ms"},
    "fps": {"title": "FPS", "section": "perf", "style": "fill"},
    "sine": {"title": "sin(t)", "foreground": "#00FF88", "background": "#002211"},
    "saw": {"title": "saw", "collapse": True},
}


def demo_value(key: str, tick: int, rng: random.Random) -> float:
    if key == "frame_ms":
        spike = 12.0 if tick % 97 == 0 else 0.0
        return 16.0 + rng.gauss(0.0, 0.8) + spike
    if key == "fps":
        return 1000.0 / demo_value("frame_ms", tick, rng)
    if key == "sine":
        return math.sin(tick / 10.0)
    return float(tick % 40)


def run_demo(graphs: DebugGraphs, samples: int, seed: int = 0) -> None:
    rng = random.Random(seed)
    for key, settings in DEMO_GRAPHS.items():
        graphs.add(key, settings)
    for tick in range(samples):
        for key in graphs:
            graphs.update(key, demo_value(key, tick, rng))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="debug_graphs")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="Drive synthetic signals through the graphs and save the overlay as PNG.")
    demo.add_argument("--mode", choices=["buffered", "incremental"], default=None)
    demo.add_argument("--samples", type=int, default=300)
    demo.add_argument("--pixel-ratio", type=int, default=None)
    demo.add_argument("--seed", type=int, default=0)
    demo.add_argument("--config", type=Path, default=None, help="TOML file with [options] and [graphs.<key>] tables.")
    demo.add_argument("--out", type=Path, default=Path("debug_graphs.png"))
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "demo":
        overrides = {"mode": args.mode, "pixel_ratio": args.pixel_ratio}
        if args.config is not None:
            graphs = DebugGraphs.from_config(args.config, overrides)
        else:
            graphs = DebugGraphs(overrides)
        surface = OverlaySurface(0, 0, auto_grow=True)
        graphs.attach(surface)
        run_demo(graphs, samples=args.samples, seed=args.seed)
        Image.fromarray(surface.to_numpy()).save(args.out)
        LOGGER.info("wrote %d graphs (%s mode) to %s", len(graphs), graphs.options.mode, args.out)


if __name__ == "__main__":
    main()
