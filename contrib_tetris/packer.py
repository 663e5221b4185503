"""Greedy tetromino packing over the occupied cells of a grid."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .grid import ActivityGrid, bucket
from .shapes import KINDS, UNIT, Offsets, shapes_of

log = logging.getLogger(__name__)

MAX_ITERATIONS = 4000


class PackingError(RuntimeError):
    """Occupied cells were left uncovered when the iteration cap was hit."""


@dataclass(frozen=True)
class Placement:
    kind: str
    rotation: int
    offsets: Offsets
    anchor: Tuple[int, int]
    score: int

    @property
    def cells(self) -> List[Tuple[int, int]]:
        ox, oy = self.anchor
        return [(ox + dx, oy + dy) for dx, dy in self.offsets]


def _pick_cell(mask: List[List[bool]], rng: Callable[[], float]) -> Optional[Tuple[int, int]]:
    # Bottom row first, so the board fills up the way a stack would.
    for y in range(len(mask) - 1, -1, -1):
        xs = [x for x, free in enumerate(mask[y]) if free]
        if xs:
            return xs[int(rng() * len(xs))], y
    return None


def _best_fit(grid: ActivityGrid, mask: List[List[bool]], cx: int, cy: int) -> Optional[Placement]:
    best = None
    for kind in KINDS:
        for rotation, offsets in enumerate(shapes_of(kind)):
            for dx, dy in offsets:
                ox, oy = cx - dx, cy - dy
                score = 0
                for ex, ey in offsets:
                    x, y = ox + ex, oy + ey
                    if not (0 <= x < grid.width and 0 <= y < grid.height) or not mask[y][x]:
                        break
                    score += grid.level(x, y)
                else:
                    if best is None or score > best.score:
                        best = Placement(kind, rotation, offsets, (ox, oy), score)
    return best


def pack(grid: ActivityGrid, rng: Callable[[], float]) -> List[Placement]:
    """Cover every occupied cell exactly once with tetrominoes or unit blocks.

    Each step takes a random free cell from the lowest row that still has
    one, then tries every kind, rotation and alignment that puts a block on
    that cell. The highest summed level wins, earliest candidate on ties.
    When nothing fits, the cell gets a unit block of its own.
    """
    mask = [[c > 0 for c in row] for row in grid.counts]
    placements = []
    for _ in range(MAX_ITERATIONS):
        picked = _pick_cell(mask, rng)
        if picked is None:
            break
        cx, cy = picked
        placement = _best_fit(grid, mask, cx, cy)
        if placement is None:
            placement = Placement(UNIT, 0, shapes_of(UNIT)[0], (cx, cy), bucket(grid.count(cx, cy)))
        for x, y in placement.cells:
            mask[y][x] = False
        placements.append(placement)
    else:
        if any(any(row) for row in mask):
            raise PackingError(f"uncovered cells remain after {MAX_ITERATIONS} iterations")

    log.debug("packed %d cells into %d placements", len(grid.occupied()), len(placements))
    return placements
