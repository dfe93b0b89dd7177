from datetime import date

import pytest
from pydantic import ValidationError

from calendar_models import PlacedTask, Settings, Task
from date_utils import DayOrdinal


def test_task_exposes_dates_and_ordinals():
    t = Task(
        id=1,
        project_id="P1",
        start_year=2025,
        start_month=3,
        start_day=30,
        end_year=2025,
        end_month=4,
        end_day=2,
    )
    assert t.start_date == date(2025, 3, 30)
    assert t.end_date == date(2025, 4, 2)
    assert t.end - t.start == 3
    assert t.start == DayOrdinal.from_ymd(2025, 3, 30)


def test_task_rejects_nonexistent_calendar_day():
    with pytest.raises(ValidationError):
        Task(id=1, project_id="P", start_year=2025, start_month=2, start_day=30, end_year=2025, end_month=3, end_day=1)


def test_task_rejects_month_out_of_range():
    with pytest.raises(ValidationError):
        Task(id=1, project_id="P", start_year=2025, start_month=13, start_day=1, end_year=2025, end_month=3, end_day=1)


def test_task_does_not_check_start_before_end():
    # Ordering is the caller's contract; the model only checks each date exists.
    t = Task.from_dates(1, "P", date(2025, 3, 12), date(2025, 3, 10))
    assert t.start > t.end


def test_task_is_frozen():
    t = Task.from_dates(1, "P", date(2025, 3, 10), date(2025, 3, 12))
    with pytest.raises(ValidationError):
        t.start_day = 11


def test_placed_task_grid_helpers():
    p = PlacedTask(
        **Task.from_dates(3, "P", date(2025, 3, 10), date(2025, 3, 12)).model_dump(),
        row=2,
        column_start=1,
        column_span=3,
    )
    assert p.column == (1, 3)
    assert p.grid_column == "1 / span 3"
    assert p.row == 2
    assert p.grid_row == 3


def test_placed_task_column_start_bounded():
    with pytest.raises(ValidationError):
        PlacedTask(
            **Task.from_dates(3, "P", date(2025, 3, 10), date(2025, 3, 12)).model_dump(),
            row=0,
            column_start=8,
            column_span=1,
        )


def test_settings_defaults_and_title_required():
    s = Settings(week_start_date=date(2025, 3, 12))
    assert s.calendar_title == "Week"
    assert s.week_start_day == "Mon"
    assert s.header_locale == "en"

    with pytest.raises(ValidationError):
        Settings(calendar_title="   ", week_start_date=date(2025, 3, 12))


def test_settings_rejects_unknown_week_start_day():
    with pytest.raises(ValidationError):
        Settings(week_start_date=date(2025, 3, 12), week_start_day="Wed")
