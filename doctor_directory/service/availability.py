# doctor_directory/service/availability.py
"""Availability resolution.

Turns a doctor's weekly schedule template plus the unavailability ledger
into concrete bookable days over a fixed horizon. Everything here is pure:
"today" is always passed in, nothing is cached, so the same inputs give
the same output.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from ..errors import ValidationError
from ..models import DATE_RE, WEEKDAYS, AvailableDate, Shift, ShiftOption, Weekday, canonical_weekday

logger = logging.getLogger(__name__)

HORIZON_DAYS = 180


def parse_calendar_date(value: str, field: str = "date") -> date:
    """Strict YYYY-MM-DD parsing for values coming from clients."""
    if not isinstance(value, str) or not DATE_RE.fullmatch(value):
        raise ValidationError(f"Invalid {field}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid {field}, expected YYYY-MM-DD")


def to_calendar_date(value) -> Optional[date]:
    """Whole-day view of a stored value; the time of day is dropped."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _as_dict(value) -> dict:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, Mapping):
        return dict(value)
    if value:
        logger.warning("Ignoring unreadable schedule entry: %r", value)
    return {}


def normalize_schedule(schedule) -> Dict[Weekday, dict]:
    """Collapse weekday keys of any casing onto the canonical Weekday."""
    normalized: Dict[Weekday, dict] = {}
    for key, day in _as_dict(schedule).items():
        weekday = canonical_weekday(key)
        if weekday is None:
            logger.warning("Unknown schedule key: %r", key)
            continue
        normalized[weekday] = _as_dict(day)
    return normalized


def normalize_ranges(unavailable_dates) -> List[Tuple[date, date]]:
    ranges = []
    for entry in unavailable_dates or []:
        entry = _as_dict(entry)
        start = to_calendar_date(entry.get("startDate"))
        end = to_calendar_date(entry.get("endDate"))
        if start is None or end is None:
            logger.warning("Skipping unavailable range with unreadable dates: %r", entry)
            continue
        # start > end simply never matches
        ranges.append((start, end))
    return ranges


def is_date_unavailable(day: date, ranges: List[Tuple[date, date]]) -> bool:
    return any(start <= day <= end for start, end in ranges)


def _offered_shifts(day_schedule: Optional[dict]) -> List[ShiftOption]:
    if not day_schedule:
        return []
    shifts = []
    if day_schedule.get("morning"):
        shifts.append(ShiftOption(value=Shift.MORNING, label="Morning",
                                  hours=day_schedule.get("morningHours") or ""))
    if day_schedule.get("evening"):
        shifts.append(ShiftOption(value=Shift.EVENING, label="Evening",
                                  hours=day_schedule.get("eveningHours") or ""))
    return shifts


def _display_date(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


class AvailableDates:
    """Restartable, ordered sequence of bookable days within the horizon.

    Each iteration walks the days lazily from ``today``; a day is yielded
    when its weekday offers at least one shift and no unavailability range
    covers it.
    """

    def __init__(self, schedule, unavailable_dates, today: date, horizon_days: int = HORIZON_DAYS):
        self.schedule = normalize_schedule(schedule)
        self.ranges = normalize_ranges(unavailable_dates)
        self.today = today
        self.horizon_days = horizon_days

    def __iter__(self) -> Iterator[AvailableDate]:
        if not self.schedule:
            return
        for offset in range(self.horizon_days):
            day = self.today + timedelta(days=offset)
            weekday = WEEKDAYS[day.weekday()]
            if not _offered_shifts(self.schedule.get(weekday)):
                continue
            if is_date_unavailable(day, self.ranges):
                continue
            yield AvailableDate(
                date=day.isoformat(),
                weekdayLabel=weekday.value.capitalize(),
                displayDate=_display_date(day),
            )


def available_dates(schedule, unavailable_dates, today: date) -> List[AvailableDate]:
    return list(AvailableDates(schedule, unavailable_dates, today))


def shifts_for_date(schedule, unavailable_dates, day) -> List[ShiftOption]:
    """Offered shifts for one date, re-derived from the current rules."""
    if not isinstance(day, date):
        day = parse_calendar_date(day)
    if is_date_unavailable(day, normalize_ranges(unavailable_dates)):
        return []
    weekday = WEEKDAYS[day.weekday()]
    return _offered_shifts(normalize_schedule(schedule).get(weekday))
