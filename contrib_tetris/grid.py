"""Activity grid: 7 weekday rows by up to 53 week columns."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

ROWS = 7
MAX_WEEKS = 53

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def bucket(count: int) -> int:
    if count <= 0: return 0
    if count <= 2: return 1
    if count <= 5: return 2
    if count <= 9: return 3
    return 4


def _as_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class ActivityGrid:
    """Per-day counts indexed ``counts[y][x]`` (row = weekday, column = week)."""

    counts: Tuple[Tuple[int, ...], ...]
    dates: Optional[Tuple[Tuple[Optional[date], ...], ...]] = None

    def __post_init__(self):
        counts = tuple(tuple(int(c) for c in row) for row in self.counts)
        if not counts or not counts[0]:
            raise ValueError("grid needs at least one row and one column")
        width = len(counts[0])
        if any(len(row) != width for row in counts):
            raise ValueError("grid rows must all have the same width")
        if any(c < 0 for row in counts for c in row):
            raise ValueError("contribution counts must be non-negative")
        if self.dates is None:
            dates = tuple((None,) * width for _ in counts)
        else:
            dates = tuple(tuple(_as_date(d) for d in row) for row in self.dates)
            if len(dates) != len(counts) or any(len(row) != width for row in dates):
                raise ValueError("dates must match the shape of counts")
        object.__setattr__(self, "counts", counts)
        object.__setattr__(self, "dates", dates)

    @property
    def width(self) -> int:
        return len(self.counts[0])

    @property
    def height(self) -> int:
        return len(self.counts)

    def count(self, x: int, y: int) -> int:
        return self.counts[y][x]

    def level(self, x: int, y: int) -> int:
        return bucket(self.counts[y][x])

    def occupied(self) -> List[Tuple[int, int]]:
        return [(x, y) for y in range(self.height) for x in range(self.width)
                if self.counts[y][x] > 0]

    def column_major(self) -> List[int]:
        return [self.counts[y][x] for x in range(self.width) for y in range(self.height)]

    @property
    def total(self) -> int:
        return sum(sum(row) for row in self.counts)

    @property
    def first_date(self) -> Optional[date]:
        for x in range(self.width):
            for y in range(self.height):
                if self.dates[y][x] is not None:
                    return self.dates[y][x]
        return None

    def recent_total(self, days: int) -> int:
        """Sum of the last ``days`` day slots, padding included."""
        if days <= 0:
            return 0
        return sum(self.column_major()[-days:])


def _check_window(window_weeks: int):
    if not 1 <= window_weeks <= MAX_WEEKS:
        raise ValueError(f"window_weeks must be within 1..{MAX_WEEKS}, got {window_weeks}")


def _from_columns(columns: Sequence[Sequence[Tuple[Optional[date], int]]]) -> ActivityGrid:
    if not columns:
        columns = [[(None, 0)] * ROWS]
    counts = [[col[y][1] for col in columns] for y in range(ROWS)]
    dates = [[col[y][0] for col in columns] for y in range(ROWS)]
    return ActivityGrid(counts, dates)


def build_grid(day_counts: Iterable[Tuple[object, int]], window_weeks: int = MAX_WEEKS) -> ActivityGrid:
    """Lay an ordered run of ``(date, count)`` pairs out as week columns.

    The first pair is taken to be the first weekday of its week. The last
    week is padded with empty days, and only the newest ``window_weeks``
    columns are kept.
    """
    _check_window(window_weeks)
    days = [(_as_date(d), max(0, int(c or 0))) for d, c in day_counts]
    columns = [days[i:i + ROWS] for i in range(0, len(days), ROWS)]
    if columns and len(columns[-1]) < ROWS:
        columns[-1] = columns[-1] + [(None, 0)] * (ROWS - len(columns[-1]))
    return _from_columns(columns[-window_weeks:])


def grid_from_weeks(weeks: Sequence[dict], window_weeks: int = MAX_WEEKS) -> ActivityGrid:
    """Build a grid from GraphQL ``contributionCalendar.weeks``.

    A day's ``weekday`` field picks its row when present, so a partial first
    week lands on the right weekdays. Slots with no day stay at 0.
    """
    _check_window(window_weeks)
    columns = []
    for week in list(weeks)[-window_weeks:]:
        col = [(None, 0)] * ROWS
        for i, day in enumerate((week or {}).get("contributionDays") or []):
            row = day.get("weekday", i)
            if row is None or not 0 <= row < ROWS:
                continue
            col[row] = (_as_date(day.get("date")), max(0, int(day.get("contributionCount") or 0)))
        columns.append(col)
    return _from_columns(columns)


def month_labels(grid: ActivityGrid, min_gap: int = 4) -> List[Tuple[int, str]]:
    """Columns where a new month starts, thinned to at least ``min_gap`` apart."""
    labels = []
    last_month = None
    last_x = None
    for x in range(grid.width):
        ref = next((grid.dates[y][x] for y in range(grid.height) if grid.dates[y][x]), None)
        if ref is None:
            continue
        if last_month is None:
            labels.append((x, MONTHS[ref.month - 1]))
            last_month, last_x = ref.month, x
        elif ref.month != last_month:
            last_month = ref.month
            if x - last_x >= min_gap:
                labels.append((x, MONTHS[ref.month - 1]))
                last_x = x
    return labels
