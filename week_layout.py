from __future__ import annotations


# =============================================================================
# week_layout.py (week-view lane packing)
#
# Given a week (7 consecutive days) and a set of dated tasks:
#   - keep the tasks that touch the week,
#   - stack overlapping tasks into lanes ("rows"),
#   - work out which grid columns each task covers.
#
# Lane assignment is greedy interval partitioning over tasks sorted by start
# day, which uses as few rows as the busiest day requires.
# =============================================================================

import logging
from collections.abc import Iterable, Sequence
from typing import Dict, List, Tuple

from calendar_models import PlacedTask, Task
from date_utils import WEEK_LENGTH, DayLike, DayOrdinal, clamp, days_between

logger = logging.getLogger(__name__)

_TASK_FIELDS = set(Task.model_fields)


def filter_tasks(tasks: Iterable[Task], window_start: DayLike, window_end: DayLike) -> List[Task]:
    """Tasks whose inclusive [start, end] interval overlaps [window_start, window_end]."""
    range_start = DayOrdinal.coerce(window_start)
    range_end = DayOrdinal.coerce(window_end)
    return [t for t in tasks if t.end >= range_start and t.start <= range_end]


def sort_tasks_by_start(tasks: Iterable[Task]) -> List[Task]:
    """Order by (start_year, start_month, start_day, id). The input is left untouched."""
    return sorted(tasks, key=lambda t: (t.start_year, t.start_month, t.start_day, t.id))


def organize_rows(tasks: Iterable[Task]) -> List[List[Task]]:
    """
    Deterministic greedy lane assignment.

    Rules:
    - Intervals are inclusive on both ends, so a task ending on the day another
      starts overlaps it and goes to a different row.
    - A row accepts a task when the row's last task ends strictly before the
      task starts (full date comparison, month and year boundaries included).
    - Each task goes to the first (lowest index) row that accepts it; if none
      does, a new row is opened.

    Returns rows top to bottom, each row in start order. No tasks, no rows.
    """
    rows: List[List[Task]] = []
    row_end_days: List[DayOrdinal] = []

    for t in sort_tasks_by_start(tasks):
        start = t.start
        assigned_row = None
        for row_idx, last_end in enumerate(row_end_days):
            if last_end < start:
                assigned_row = row_idx
                break

        if assigned_row is None:
            assigned_row = len(rows)
            rows.append([])
            row_end_days.append(t.end)
        else:
            row_end_days[assigned_row] = t.end
        rows[assigned_row].append(t)

    return rows


def grid_column(task: Task, window_start: DayLike, window_end: DayLike) -> Tuple[int, int]:
    """
    (column_start, column_span) of the task's visible part, 1-based.

    The visible interval is the task clamped to the window. The start column is
    clamped to the 7 day columns and the span is never below 1.
    """
    range_start = DayOrdinal.coerce(window_start)
    range_end = DayOrdinal.coerce(window_end)

    visible_start = max(task.start, range_start)
    visible_end = min(task.end, range_end)

    start_col = clamp(days_between(visible_start, range_start) + 1, 1, WEEK_LENGTH)
    span = max(1, days_between(visible_end, visible_start) + 1)
    return start_col, span


def layout_week(tasks: Iterable[Task], window: Sequence[DayLike]) -> List[PlacedTask]:
    """
    Filter, pack and map tasks for one week.

    `window` holds the 7 displayed days in order; only the first and last are
    used as bounds. Output is row by row, each row in start order.
    """
    week_start = DayOrdinal.coerce(window[0])
    week_end = DayOrdinal.coerce(window[WEEK_LENGTH - 1])

    visible = filter_tasks(tasks, week_start, week_end)
    rows = organize_rows(visible)
    logger.debug(
        "Week %s..%s: %d task(s) visible, packed into %d row(s)",
        week_start.to_date(),
        week_end.to_date(),
        len(visible),
        len(rows),
    )

    out: List[PlacedTask] = []
    for row_idx, row in enumerate(rows):
        for t in row:
            start_col, span = grid_column(t, week_start, week_end)
            out.append(
                PlacedTask(
                    **t.model_dump(include=_TASK_FIELDS),
                    row=row_idx,
                    column_start=start_col,
                    column_span=span,
                )
            )
    return out


def max_concurrent(tasks: Iterable[Task]) -> int:
    """Largest number of tasks active on any single day (0 for no tasks)."""
    # +1 when a task starts, -1 the day after it ends.
    deltas: Dict[int, int] = {}
    for t in tasks:
        deltas[t.start.value] = deltas.get(t.start.value, 0) + 1
        deltas[t.end.value + 1] = deltas.get(t.end.value + 1, 0) - 1

    active = 0
    peak = 0
    for day in sorted(deltas):
        active += deltas[day]
        peak = max(peak, active)
    return peak


def validate_no_overlaps_per_row(rows: Iterable[Iterable[Task]]) -> Tuple[bool, str]:
    """
    Utility for tests/debug: confirms no two tasks in a row share a day.

    Returns (ok, message).
    """
    for row_idx, row in enumerate(rows):
        row_sorted = sorted(row, key=lambda t: (t.start, t.end, t.id))
        prev: Task | None = None
        for cur in row_sorted:
            if prev is not None and prev.end >= cur.start:
                return False, f"Overlap detected in row {row_idx}: {prev.id} vs {cur.id}"
            prev = cur
    return True, "ok"
