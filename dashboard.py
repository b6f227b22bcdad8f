#!/usr/bin/env python3
"""
quotaview live dashboard
Real-time terminal view of API usage, quota and spend across tracked accounts.
Uses Rich for rendering; all layout decisions come from the quotaview package.

Features:
- Grid, Stacked, Tabs, Split and Compare views
- Automatic Stacked fallback on narrow terminals
- Gauges, sparklines, braille line charts, stacked daily volume, heatmaps
- ASCII sparklines on Linux TTYs

Snapshots are read from a JSON file written by whatever collects them:
    [{"provider_id": "openai", "status": "OK", "metrics": {...}, "series": {...}}, ...]
"""

import argparse
import json
import logging
import signal
import sys
import time
from pathlib import Path

from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler

from quotaview import Palette, Snapshot, ViewState, render_dashboard
from quotaview import config

logger = logging.getLogger("quotaview")

# State
console = Console()
cached_snapshots = {"data": [], "time": 0, "mtime": 0}


# ─────────────────────────────────────────────────────────────────────────────
# Snapshot loading (with caching)
# ─────────────────────────────────────────────────────────────────────────────

def parse_snapshots(raw) -> list[Snapshot]:
    if isinstance(raw, dict):
        raw = raw.get("snapshots", list(raw.values()))
    return [Snapshot.from_dict(item) for item in raw or [] if isinstance(item, dict)]


def get_snapshots(path: Path) -> list[Snapshot]:
    now = time.time()
    if now - cached_snapshots["time"] < config.RELOAD_INTERVAL and cached_snapshots["data"]:
        return cached_snapshots["data"]

    try:
        mtime = path.stat().st_mtime
        if mtime != cached_snapshots["mtime"]:
            cached_snapshots["data"] = parse_snapshots(json.loads(path.read_text()))
            cached_snapshots["mtime"] = mtime
        cached_snapshots["time"] = now
    except (OSError, json.JSONDecodeError) as exc:
        # keep showing the last good data
        logger.warning("could not read snapshots from %s: %s", path, exc)
        cached_snapshots["time"] = now
    return cached_snapshots["data"]


# ─────────────────────────────────────────────────────────────────────────────
# Frame
# ─────────────────────────────────────────────────────────────────────────────

def make_frame(snapshots: list[Snapshot], state: ViewState, palette: Palette, anim_frame: int) -> Group:
    width, height = console.size
    lines = render_dashboard(snapshots, width, height, state, palette,
                             anim_frame=anim_frame, ascii_mode=config.ASCII_MODE)
    return Group(*lines)


# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live API usage and quota dashboard")
    parser.add_argument("--snapshots", type=Path, default=config.SNAPSHOT_FILE,
                        help="snapshot JSON file (default: %(default)s)")
    parser.add_argument("--view", default=config.DEFAULT_VIEW,
                        help="grid, stacked, tabs, split or compare")
    parser.add_argument("--once", action="store_true", help="render one frame and exit")
    return parser.parse_args(argv)


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main(argv=None):
    args = parse_args(argv)
    setup_logging()
    state = ViewState.from_config(args.view)
    palette = Palette()

    if args.once:
        console.print(make_frame(get_snapshots(args.snapshots), state, palette, 0))
        return

    # Handle Ctrl+C gracefully
    def sigint_handler(sig, frame):
        sys.exit(0)
    signal.signal(signal.SIGINT, sigint_handler)

    console.clear()

    anim_frame = 0
    with Live(make_frame(get_snapshots(args.snapshots), state, palette, anim_frame),
              console=console, refresh_per_second=1, screen=True) as live:
        while True:
            time.sleep(config.REFRESH_INTERVAL)
            anim_frame += 1
            live.update(make_frame(get_snapshots(args.snapshots), state, palette, anim_frame))


if __name__ == "__main__":
    main()
