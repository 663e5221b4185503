"""Tetromino catalog.

Each kind has four rotations; rotation r+1 is rotation r turned a quarter
clockwise and shifted back to non-negative offsets.
"""

from typing import Dict, Iterable, Tuple

Offsets = Tuple[Tuple[int, int], ...]

UNIT = "."

SHAPES: Dict[str, Tuple[Offsets, ...]] = {
    "I": (
        ((0, 0), (1, 0), (2, 0), (3, 0)),
        ((0, 0), (0, 1), (0, 2), (0, 3)),
        ((0, 0), (1, 0), (2, 0), (3, 0)),
        ((0, 0), (0, 1), (0, 2), (0, 3)),
    ),
    "O": (
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
    ),
    "T": (
        ((0, 0), (1, 0), (2, 0), (1, 1)),
        ((1, 0), (0, 1), (1, 1), (1, 2)),
        ((1, 0), (0, 1), (1, 1), (2, 1)),
        ((0, 0), (0, 1), (1, 1), (0, 2)),
    ),
    "S": (
        ((1, 0), (2, 0), (0, 1), (1, 1)),
        ((0, 0), (0, 1), (1, 1), (1, 2)),
        ((1, 0), (2, 0), (0, 1), (1, 1)),
        ((0, 0), (0, 1), (1, 1), (1, 2)),
    ),
    "Z": (
        ((0, 0), (1, 0), (1, 1), (2, 1)),
        ((1, 0), (0, 1), (1, 1), (0, 2)),
        ((0, 0), (1, 0), (1, 1), (2, 1)),
        ((1, 0), (0, 1), (1, 1), (0, 2)),
    ),
    "J": (
        ((0, 0), (0, 1), (1, 1), (2, 1)),
        ((0, 0), (1, 0), (0, 1), (0, 2)),
        ((0, 0), (1, 0), (2, 0), (2, 1)),
        ((1, 0), (1, 1), (0, 2), (1, 2)),
    ),
    "L": (
        ((2, 0), (0, 1), (1, 1), (2, 1)),
        ((0, 0), (0, 1), (0, 2), (1, 2)),
        ((0, 0), (1, 0), (2, 0), (0, 1)),
        ((0, 0), (1, 0), (1, 1), (1, 2)),
    ),
}

KINDS = tuple(SHAPES)

UNIT_ROTATIONS: Tuple[Offsets, ...] = (((0, 0),),)


def shapes_of(kind: str) -> Tuple[Offsets, ...]:
    if kind == UNIT:
        return UNIT_ROTATIONS
    return SHAPES[kind]


def normalize(offsets: Iterable[Tuple[int, int]]) -> Offsets:
    cells = list(offsets)
    mx = min(x for x, _ in cells)
    my = min(y for _, y in cells)
    return tuple((x - mx, y - my) for x, y in cells)


def rotate_cw(offsets: Iterable[Tuple[int, int]]) -> Offsets:
    # y grows downward, so a clockwise quarter turn maps (x, y) to (-y, x)
    return normalize((-y, x) for x, y in offsets)
