"""Turn placements into timed drops, one run after another."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .grid import ActivityGrid, bucket
from .packer import Placement, pack
from .rng import make_rng, run_seed
from .shapes import UNIT, shapes_of

log = logging.getLogger(__name__)

RUNS = 10
RUN_DURATION = 8.0      # seconds per run
STEP_DURATION = 0.12    # spacing between consecutive drops
TRAVEL_DURATION = 0.55  # fall time of one block
HOLD = 2.0              # finished wall stays up this long before the next run
SPAWN_ROWS = 7          # blocks start this many rows above the well

ROW_DURATION = 0.75     # "rows" policy: one weekday row per slot
STAGGER = 0.02          # "rows" policy: spacing inside a row

POLICIES = ("pack", "rows")


@dataclass(frozen=True)
class TimelineEntry:
    placement: Placement
    run: int
    begin: float
    duration: float
    source: Tuple[int, int]
    destination: Tuple[int, int]

    @property
    def end(self) -> float:
        return self.begin + self.duration


@dataclass(frozen=True)
class Run:
    index: int
    seed: int
    start: float
    duration: float
    placements: Tuple[Placement, ...]
    entries: Tuple[TimelineEntry, ...]

    @property
    def end(self) -> float:
        return self.start + self.duration


def _entry(placement, run_index, begin, travel_duration, spawn_rows):
    ox, oy = placement.anchor
    return TimelineEntry(placement, run_index, begin, travel_duration, (ox, -spawn_rows), (ox, oy))


def schedule(placements: Sequence[Placement], run_index: int, run_start: float,
             step_duration: float = STEP_DURATION, travel_duration: float = TRAVEL_DURATION,
             run_duration: float = RUN_DURATION, spawn_rows: int = SPAWN_ROWS,
             hold: float = HOLD) -> List[TimelineEntry]:
    """Space drops ``step_duration`` apart, tighter if the run would overflow.

    Every block has landed by ``run_start + run_duration - hold``.
    """
    if not placements:
        return []
    budget = max(0.0, run_duration - travel_duration - hold)
    step = min(step_duration, budget / len(placements))
    return [_entry(p, run_index, run_start + i * step, travel_duration, spawn_rows)
            for i, p in enumerate(placements)]


def row_placements(grid: ActivityGrid, rng: Callable[[], float]) -> List[Placement]:
    """Unit blocks, bottom row first, each row in shuffled order."""
    unit = shapes_of(UNIT)[0]
    placements = []
    for y in range(grid.height - 1, -1, -1):
        xs = [x for x in range(grid.width) if grid.count(x, y) > 0]
        for i in range(len(xs) - 1, 0, -1):
            j = int(rng() * (i + 1))
            xs[i], xs[j] = xs[j], xs[i]
        placements.extend(Placement(UNIT, 0, unit, (x, y), bucket(grid.count(x, y))) for x in xs)
    return placements


def schedule_rows(placements: Sequence[Placement], height: int, run_index: int, run_start: float,
                  row_duration: float = ROW_DURATION, stagger: float = STAGGER,
                  travel_duration: float = TRAVEL_DURATION, run_duration: float = RUN_DURATION,
                  spawn_rows: int = SPAWN_ROWS, hold: float = HOLD) -> List[TimelineEntry]:
    """Build the wall one weekday row at a time, bottom row first."""
    if not placements:
        return []
    slots = []
    k, last_row = 0, None
    for p in placements:
        row = p.anchor[1]
        k = k + 1 if row == last_row else 0
        last_row = row
        slots.append((height - 1 - row, k))

    span = max(r * row_duration + i * stagger for r, i in slots)
    budget = max(0.0, run_duration - travel_duration - hold)
    scale = min(1.0, budget / span) if span > 0 else 1.0
    return [_entry(p, run_index, run_start + (r * row_duration + i * stagger) * scale,
                   travel_duration, spawn_rows)
            for p, (r, i) in zip(placements, slots)]


def schedule_runs(grid: ActivityGrid, base_seed: int, runs: int = RUNS, policy: str = "pack",
                  step_duration: float = STEP_DURATION, travel_duration: float = TRAVEL_DURATION,
                  run_duration: float = RUN_DURATION, hold: float = HOLD) -> List[Run]:
    """Pack and schedule ``runs`` independent replays, back to back."""
    if policy not in POLICIES:
        raise ValueError(f"unknown policy {policy!r}, expected one of {POLICIES}")
    result = []
    for index in range(runs):
        seed = run_seed(base_seed, index)
        rng = make_rng(seed)
        start = index * run_duration
        if policy == "rows":
            placements = row_placements(grid, rng)
            entries = schedule_rows(placements, grid.height, index, start,
                                    travel_duration=travel_duration, run_duration=run_duration,
                                    hold=hold)
        else:
            placements = pack(grid, rng)
            entries = schedule(placements, index, start, step_duration, travel_duration, run_duration,
                               hold=hold)
        result.append(Run(index, seed, start, run_duration, tuple(placements), tuple(entries)))
    log.debug("scheduled %d runs (%s), %.1fs cycle", runs, policy, cycle_duration(result))
    return result


def cycle_duration(runs: Sequence[Run]) -> float:
    return max((r.end for r in runs), default=0.0)
