"""Command line: fetch, pack, schedule, render, write."""

import argparse
import logging
import os

from .config import ConfigError, load_settings
from .fetch import FetchError, fetch_weeks, load_weeks
from .grid import grid_from_weeks
from .render_gif import render_gif
from .render_svg import render_svg
from .rng import derive_seed
from .schedule import POLICIES, schedule_runs

log = logging.getLogger(__name__)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="contrib-tetris",
        description="Render a contribution calendar as falling tetrominoes (animated SVG).",
    )
    p.add_argument("--user", help="GitHub login (default: $GITHUB_USERNAME)")
    p.add_argument("--input", help="read weeks from a saved GraphQL JSON dump instead of the API")
    p.add_argument("--out", help="SVG output path (default: output/tetris.svg)")
    p.add_argument("--gif", help="also write a GIF preview of the first run")
    p.add_argument("--runs", type=int, help="number of independent runs per loop")
    p.add_argument("--weeks", type=int, help="weeks to show, 1..53")
    p.add_argument("--policy", choices=POLICIES, help="pack tetrominoes or build row by row")
    p.add_argument("--seed", type=int, help="base seed (default: derived from user and calendar)")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p.parse_args(argv)


def _ensure_parent(path):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)


def _write(path, data):
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(data)


def main(argv=None, env=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(
            os.environ if env is None else env,
            username=args.user, out_svg=args.out, out_gif=args.gif,
            runs=args.runs, weeks=args.weeks, policy=args.policy,
        )
        if args.input:
            weeks = load_weeks(args.input)
        elif not settings.token:
            raise ConfigError("Missing GITHUB_TOKEN")
        else:
            weeks = fetch_weeks(settings.username, settings.token)
    except (ConfigError, FetchError) as e:
        raise SystemExit(str(e))

    grid = grid_from_weeks(weeks, settings.weeks)
    seed = args.seed if args.seed is not None else derive_seed(
        settings.username, grid.total, grid.first_date and grid.first_date.isoformat())
    log.info("%s: %d contributions over %d weeks, seed %d",
             settings.username, grid.total, grid.width, seed)

    runs = schedule_runs(grid, seed, settings.runs, settings.policy)
    svg = render_svg(grid, runs, title=f"{settings.username} contributions")
    _write(settings.out_svg, svg)
    print(f"Wrote {settings.out_svg}")

    if settings.out_gif:
        _ensure_parent(settings.out_gif)
        render_gif(grid, runs[0], settings.out_gif)
        print(f"Wrote {settings.out_gif}")
    return 0
