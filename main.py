"""
Live viewer: draws a simulation's fish and food once per display frame.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional

import config
from render.viewport import SurfaceNotFoundError, ViewportManager
from runtime.animation import AnimationLoop
from runtime.logging_config import setup_logging
from runtime.pygame_host import PygameHost
from world.demo import DemoSimulation
from world.loader import load_simulation

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Render a live simulation of fish and food.")
    p.add_argument("--width", type=int, default=config.SCREEN_W, help="initial window width")
    p.add_argument("--height", type=int, default=config.SCREEN_H, help="initial window height")
    p.add_argument("--fps", type=int, default=config.FPS, help="target frames per second")
    p.add_argument("--device-scale", type=float, default=config.DEVICE_SCALE,
                   help="force a device pixel ratio (supersampling); default asks the display")
    p.add_argument("--steps-per-frame", type=int, default=config.STEPS_PER_FRAME,
                   help="simulation steps per rendered frame")
    p.add_argument("--simulation", default=None,
                   help="external engine as 'module:factory' (default: built-in demo)")
    p.add_argument("--seed", type=int, default=None, help="seed for the demo simulation")
    p.add_argument("--frames", type=int, default=None, help="stop after this many frames")
    p.add_argument("--headless", action="store_true", help="render without a visible window")
    p.add_argument("--screenshot", default=None, help="save the last frame to this image file")
    p.add_argument("--no-validate", action="store_true",
                   help="draw out-of-range entities instead of skipping them")
    p.add_argument("--log-level", default=config.LOG_LEVEL)
    p.add_argument("--log-format", choices=("human", "json"), default=config.LOG_FORMAT)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, fmt=args.log_format)

    if args.headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        os.environ["SDL_AUDIODRIVER"] = "dummy"

    try:
        if args.simulation:
            simulation = load_simulation(args.simulation)
        else:
            simulation = DemoSimulation(seed=args.seed)
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        log.error("could not load simulation %r: %s", args.simulation, exc)
        return 2

    host = PygameHost(
        size=(args.width, args.height),
        fps=args.fps,
        device_scale=args.device_scale,
    )
    host.open()
    try:
        try:
            viewport = ViewportManager(host, config.VIEWPORT_ELEMENT_ID)
        except SurfaceNotFoundError as exc:
            log.critical("%s", exc)
            return 1
        viewport.attach()

        loop = AnimationLoop(
            simulation,
            viewport,
            host,
            steps_per_frame=args.steps_per_frame,
            validate=not args.no_validate,
        )
        token = loop.start()
        shown = host.run(max_frames=args.frames)
        loop.stop(token)

        if args.screenshot:
            host.save_screenshot(args.screenshot)
        log.info("shown %d frame(s)", shown)
    finally:
        host.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
