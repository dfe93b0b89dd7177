from __future__ import annotations


# =============================================================================
# date_utils.py (whole-day arithmetic)
#
# Days are compared and subtracted as ordinals, never as timestamps.
# Also builds the 7-day week shown in the calendar and its column headers.
# =============================================================================

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Sequence, Tuple, Union

Ymd = Tuple[int, int, int]

WEEK_LENGTH = 7

_WEEKDAY_NAMES = {
    "en": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
    "ko": ["월", "화", "수", "목", "금", "토", "일"],
}


@dataclass(frozen=True, order=True)
class DayOrdinal:
    """
    A whole calendar day as a proleptic Gregorian day count.

    Comparison and subtraction work on the count directly, so there is no
    time-of-day or timezone component to get wrong.
    """

    value: int

    @classmethod
    def from_ymd(cls, year: int, month: int, day: int) -> "DayOrdinal":
        return cls(date(year, month, day).toordinal())

    @classmethod
    def from_date(cls, d: date) -> "DayOrdinal":
        return cls(d.toordinal())

    @classmethod
    def coerce(cls, value: "DayLike") -> "DayOrdinal":
        """Accept a DayOrdinal, a date, or a (year, month, day) triple."""
        if isinstance(value, DayOrdinal):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        year, month, day = value
        return cls.from_ymd(int(year), int(month), int(day))

    def to_date(self) -> date:
        return date.fromordinal(self.value)

    @property
    def ymd(self) -> Ymd:
        d = self.to_date()
        return d.year, d.month, d.day

    def __sub__(self, other: "DayOrdinal") -> int:
        if not isinstance(other, DayOrdinal):
            return NotImplemented
        return self.value - other.value

    def __add__(self, days: int) -> "DayOrdinal":
        if not isinstance(days, int):
            return NotImplemented
        return DayOrdinal(self.value + days)


DayLike = Union[DayOrdinal, date, Ymd]


def days_between(a: DayLike, b: DayLike) -> int:
    """Signed day count a - b."""
    return DayOrdinal.coerce(a) - DayOrdinal.coerce(b)


def clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def start_of_week(d: date, week_start_day: str) -> date:
    # week_start_day is "Mon" or "Sun"
    weekday = d.weekday()  # Mon=0..Sun=6
    if week_start_day == "Mon":
        delta = weekday
    else:
        delta = (weekday + 1) % 7
    return d - timedelta(days=delta)


def week_range(anchor: date, week_start_day: str = "Mon") -> List[Ymd]:
    """
    The 7 consecutive days of the week containing `anchor`, as (y, m, d) triples.
    """
    first = start_of_week(anchor, week_start_day)
    out: List[Ymd] = []
    for offset in range(WEEK_LENGTH):
        d = first + timedelta(days=offset)
        out.append((d.year, d.month, d.day))
    return out


def weekday_headers(window: Sequence[DayLike], locale: str = "en") -> List[str]:
    """
    Column header labels for a window, e.g. "Mon (3/10)" or "월(3/10)".

    The weekday name comes from the actual date, so Sunday-first weeks label
    correctly.
    """
    names = _WEEKDAY_NAMES[locale]
    labels: List[str] = []
    for day in window:
        d = DayOrdinal.coerce(day).to_date()
        name = names[d.weekday()]
        if locale == "ko":
            labels.append(f"{name}({d.month}/{d.day})")
        else:
            labels.append(f"{name} ({d.month}/{d.day})")
    return labels
