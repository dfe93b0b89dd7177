from datetime import date

from calendar_models import Task
from week_layout import filter_tasks

WEEK_START = (2025, 3, 10)
WEEK_END = (2025, 3, 16)


def _task(task_id: int, start: date, end: date) -> Task:
    return Task.from_dates(task_id, "P1", start, end)


def test_task_ending_day_before_window_is_dropped():
    t = _task(1, date(2025, 3, 5), date(2025, 3, 9))
    assert filter_tasks([t], WEEK_START, WEEK_END) == []


def test_task_starting_day_after_window_is_dropped():
    t = _task(1, date(2025, 3, 17), date(2025, 3, 20))
    assert filter_tasks([t], WEEK_START, WEEK_END) == []


def test_tasks_touching_window_edges_are_kept():
    ends_on_first_day = _task(1, date(2025, 3, 1), date(2025, 3, 10))
    starts_on_last_day = _task(2, date(2025, 3, 16), date(2025, 3, 30))
    kept = filter_tasks([ends_on_first_day, starts_on_last_day], WEEK_START, WEEK_END)
    assert [t.id for t in kept] == [1, 2]


def test_task_spanning_whole_window_is_kept():
    t = _task(1, date(2025, 2, 1), date(2025, 4, 30))
    assert filter_tasks([t], WEEK_START, WEEK_END) == [t]


def test_comparison_uses_full_dates_not_day_of_month():
    # Day 12 of the previous month must not count as inside 3/10..3/16.
    t = _task(1, date(2025, 2, 12), date(2025, 2, 14))
    assert filter_tasks([t], WEEK_START, WEEK_END) == []


def test_empty_input_yields_empty_output():
    assert filter_tasks([], WEEK_START, WEEK_END) == []


def test_window_bounds_accept_dates():
    t = _task(1, date(2025, 3, 12), date(2025, 3, 12))
    assert filter_tasks([t], date(2025, 3, 10), date(2025, 3, 16)) == [t]
