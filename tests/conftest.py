"""Shared fixtures: a synthetic contribution calendar and grids built from it."""

import sys
from datetime import date, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from contrib_tetris.grid import ActivityGrid, grid_from_weeks


def make_weeks(n_weeks, start=date(2024, 1, 7), count=lambda i: (i * 7 + 3) % 11 if i % 3 else 0):
    """GraphQL-shaped weeks, Sunday first, with a deterministic count pattern."""
    weeks = []
    for w in range(n_weeks):
        days = []
        for d in range(7):
            i = w * 7 + d
            day = start + timedelta(days=i)
            days.append({"date": day.isoformat(), "contributionCount": count(i), "weekday": d})
        weeks.append({"contributionDays": days})
    return weeks


@pytest.fixture
def sample_weeks():
    return make_weeks(20)


@pytest.fixture
def sample_grid(sample_weeks):
    return grid_from_weeks(sample_weeks)


@pytest.fixture
def empty_grid():
    return ActivityGrid([[0] * 5 for _ in range(7)])


@pytest.fixture
def graphql_payload(sample_weeks):
    return {"data": {"user": {"contributionsCollection": {
        "contributionCalendar": {"weeks": sample_weeks}}}}}
