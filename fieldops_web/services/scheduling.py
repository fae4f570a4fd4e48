"""Scheduling helpers: arrival windows, initial ops status, business dates."""

from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple, Optional
from zoneinfo import ZoneInfo

from ..config import settings
from ..models.ops import OpsStatus, initial_ops_status


class ScheduleFields(NamedTuple):
    scheduled_date: Optional[date]
    window_start: Optional[time]
    window_end: Optional[time]
    ops_status: OpsStatus


def validate_window(window_start: Optional[time], window_end: Optional[time]) -> None:
    if window_start and window_end and not window_start < window_end:
        raise ValueError("Arrival window start must be before end")


def derive_schedule_and_ops(
    scheduled_date: Optional[date],
    window_start: Optional[time] = None,
    window_end: Optional[time] = None,
) -> ScheduleFields:
    """Arrival window is only kept alongside a scheduled date."""
    if scheduled_date is None:
        return ScheduleFields(None, None, None, initial_ops_status(None))

    validate_window(window_start, window_end)
    return ScheduleFields(
        scheduled_date,
        window_start,
        window_end,
        initial_ops_status(scheduled_date),
    )


def business_today(now: Optional[datetime] = None) -> date:
    """Calendar date in the business timezone."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(settings.timezone)).date()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def month_grid_range(year: int, month: int) -> tuple[date, date]:
    """Sunday on/before the 1st through the Saturday on/after the last day."""
    first = date(year, month, 1)
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)

    # weekday(): Monday=0 .. Sunday=6
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = last + timedelta(days=(5 - last.weekday()) % 7)
    return start, end
