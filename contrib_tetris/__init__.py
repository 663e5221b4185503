"""Contribution calendar as falling tetrominoes."""

from .grid import ActivityGrid, bucket, build_grid, grid_from_weeks
from .packer import PackingError, Placement, pack
from .rng import derive_seed, hash_string, make_rng, run_seed
from .schedule import Run, TimelineEntry, schedule, schedule_runs

__version__ = "0.1.0"
