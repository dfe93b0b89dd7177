from __future__ import annotations


# =============================================================================
# calendar_models.py (data validation models)
#
#   - Settings: which week to show and how to label it
#   - Task: a dated item on the calendar (inclusive start/end day)
#   - PlacedTask: a Task with its lane and grid column inside the week
#
# Task dates are stored as separate year/month/day components, the shape the
# task store hands them over in. Helpers expose them as dates and day ordinals.
# =============================================================================

from datetime import date
from typing import Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from date_utils import DayOrdinal


class Settings(BaseModel):
    calendar_title: str = Field(default="Week")
    week_start_date: date
    week_start_day: Literal["Mon", "Sun"] = Field(default="Mon")
    header_locale: Literal["en", "ko"] = Field(default="en")

    @field_validator("calendar_title")
    @classmethod
    def _title_not_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("calendar_title is required.")
        return v


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    project_id: Union[int, str]

    start_year: int = Field(ge=1, le=9999)
    start_month: int = Field(ge=1, le=12)
    start_day: int = Field(ge=1, le=31)
    end_year: int = Field(ge=1, le=9999)
    end_month: int = Field(ge=1, le=12)
    end_day: int = Field(ge=1, le=31)

    @model_validator(mode="after")
    def _dates_exist(self) -> "Task":
        # start <= end is left to the caller; only real calendar days are checked here.
        for label, (y, m, d) in (("start", self.start_ymd), ("end", self.end_ymd)):
            try:
                date(y, m, d)
            except ValueError as e:
                raise ValueError(f"{label} date {y:04d}-{m:02d}-{d:02d} is not a calendar date: {e}") from e
        return self

    @classmethod
    def from_dates(cls, id: int, project_id: Union[int, str], start: date, end: date) -> "Task":
        return cls(
            id=id,
            project_id=project_id,
            start_year=start.year,
            start_month=start.month,
            start_day=start.day,
            end_year=end.year,
            end_month=end.month,
            end_day=end.day,
        )

    @property
    def start_ymd(self) -> Tuple[int, int, int]:
        return self.start_year, self.start_month, self.start_day

    @property
    def end_ymd(self) -> Tuple[int, int, int]:
        return self.end_year, self.end_month, self.end_day

    @property
    def start_date(self) -> date:
        return date(*self.start_ymd)

    @property
    def end_date(self) -> date:
        return date(*self.end_ymd)

    @property
    def start(self) -> DayOrdinal:
        return DayOrdinal.from_ymd(*self.start_ymd)

    @property
    def end(self) -> DayOrdinal:
        return DayOrdinal.from_ymd(*self.end_ymd)


class PlacedTask(Task):
    """A task positioned in the week grid: lane index plus 1-based column start/span."""

    row: int = Field(ge=0)
    column_start: int = Field(ge=1, le=7)
    column_span: int = Field(ge=1)

    @property
    def column(self) -> Tuple[int, int]:
        return self.column_start, self.column_span

    @property
    def grid_row(self) -> int:
        # CSS grid lines start at 1; lane 0 sits on grid row 1.
        return self.row + 1

    @property
    def grid_column(self) -> str:
        return f"{self.column_start} / span {self.column_span}"
