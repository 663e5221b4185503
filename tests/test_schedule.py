"""Tests for timeline scheduling and multi-run replay."""

import pytest

from contrib_tetris.grid import ActivityGrid
from contrib_tetris.packer import Placement, pack
from contrib_tetris.rng import make_rng, run_seed
from contrib_tetris.schedule import (
    HOLD,
    SPAWN_ROWS,
    cycle_duration,
    row_placements,
    schedule,
    schedule_rows,
    schedule_runs,
)
from contrib_tetris.shapes import UNIT


def units(n, y=0):
    return [Placement(UNIT, 0, ((0, 0),), (x, y), 1) for x in range(n)]


class TestSchedule:
    def test_empty(self):
        assert schedule([], 0, 0.0) == []

    def test_fixed_spacing(self):
        entries = schedule(units(5), 2, 16.0, step_duration=0.1, travel_duration=0.5, run_duration=8.0)
        assert [e.begin for e in entries] == pytest.approx([16.0, 16.1, 16.2, 16.3, 16.4])
        assert all(e.duration == 0.5 for e in entries)
        assert all(e.run == 2 for e in entries)

    def test_spacing_compressed_to_fit_run(self):
        entries = schedule(units(100), 0, 8.0, step_duration=0.12, travel_duration=0.55,
                           run_duration=8.0, hold=0.0)
        gaps = {round(b.begin - a.begin, 9) for a, b in zip(entries, entries[1:])}
        assert gaps == {round(7.45 / 100, 9)}
        assert entries[-1].begin <= 16.0
        assert all(e.end <= 16.0 + 1e-9 for e in entries)

    def test_travel_longer_than_run(self):
        entries = schedule(units(3), 0, 0.0, travel_duration=10.0, run_duration=8.0)
        assert [e.begin for e in entries] == [0.0, 0.0, 0.0]

    def test_spawn_above_destination(self):
        p = Placement("O", 0, ((0, 0), (1, 0), (0, 1), (1, 1)), (4, 3), 4)
        (entry,) = schedule([p], 0, 0.0)
        assert entry.destination == (4, 3)
        assert entry.source == (4, -SPAWN_ROWS)
        assert entry.placement is p

    def test_begin_times_non_decreasing(self, sample_grid):
        entries = schedule(pack(sample_grid, make_rng(4)), 1, 8.0)
        begins = [e.begin for e in entries]
        assert begins == sorted(begins)
        assert begins[0] == 8.0
        assert begins[-1] <= 16.0


class TestRowPolicy:
    def test_units_cover_occupied_bottom_first(self, sample_grid):
        placements = row_placements(sample_grid, make_rng(8))
        assert all(p.kind == UNIT for p in placements)
        assert sorted(p.anchor for p in placements) == sorted(sample_grid.occupied())
        rows = [p.anchor[1] for p in placements]
        assert rows == sorted(rows, reverse=True)

    def test_rows_start_on_row_slots(self):
        grid = ActivityGrid([[1, 1, 0], [0, 0, 0], [0, 1, 1]])
        placements = row_placements(grid, make_rng(0))
        entries = schedule_rows(placements, grid.height, 0, 0.0,
                                row_duration=1.0, stagger=0.1, travel_duration=0.5, run_duration=8.0)
        assert [e.begin for e in entries] == pytest.approx([0.0, 0.1, 2.0, 2.1])

    def test_rows_compressed_into_short_run(self, sample_grid):
        placements = row_placements(sample_grid, make_rng(0))
        entries = schedule_rows(placements, sample_grid.height, 0, 0.0, run_duration=2.0)
        begins = [e.begin for e in entries]
        assert begins == sorted(begins)
        assert all(e.end <= 2.0 + 1e-9 for e in entries)

    def test_empty(self):
        assert schedule_rows([], 7, 0, 0.0) == []


class TestScheduleRuns:
    def test_runs_back_to_back(self, sample_grid):
        runs = schedule_runs(sample_grid, 1000, runs=3, run_duration=8.0)
        assert [r.start for r in runs] == [0.0, 8.0, 16.0]
        assert [r.seed for r in runs] == [run_seed(1000, i) for i in range(3)]
        assert cycle_duration(runs) == 24.0

    def test_each_run_packs_with_its_own_seed(self, sample_grid):
        runs = schedule_runs(sample_grid, 1000, runs=3)
        for r in runs:
            assert list(r.placements) == pack(sample_grid, make_rng(r.seed))
            assert all(r.start <= e.begin <= r.end for e in r.entries)

    def test_reproducible(self, sample_grid):
        assert schedule_runs(sample_grid, 77, runs=4) == schedule_runs(sample_grid, 77, runs=4)

    def test_rows_policy(self, sample_grid):
        runs = schedule_runs(sample_grid, 5, runs=2, policy="rows")
        assert all(p.kind == UNIT for r in runs for p in r.placements)

    def test_unknown_policy(self, sample_grid):
        with pytest.raises(ValueError):
            schedule_runs(sample_grid, 5, policy="sweep")

    def test_empty_grid_gives_empty_timelines(self, empty_grid):
        runs = schedule_runs(empty_grid, 5, runs=2)
        assert all(r.entries == () and r.placements == () for r in runs)

    def test_cycle_of_nothing(self):
        assert cycle_duration([]) == 0.0


class TestHold:
    @pytest.mark.parametrize("policy", ["pack", "rows"])
    def test_finished_wall_is_held(self, policy):
        grid = ActivityGrid([[1] * 53 for _ in range(7)])
        for run in schedule_runs(grid, 7, runs=2, policy=policy):
            assert run.end - max(e.end for e in run.entries) >= HOLD - 1e-9

    def test_hold_comes_off_the_build_budget(self):
        entries = schedule(units(10), 0, 0.0, step_duration=1.0, travel_duration=0.5,
                           run_duration=8.0, hold=2.5)
        assert entries[-1].end <= 8.0 - 2.5 + 1e-9
        assert entries[1].begin == pytest.approx(0.5)
