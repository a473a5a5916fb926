"""
Company-timezone helpers.

Timestamps are stored in UTC. The calendar date of an attendance record and
the time of day compared against the office hours are taken in the company
timezone (COMPANY_TIMEZONE).
"""
import calendar
from datetime import date, datetime
from typing import Tuple

import pytz

from staffdesk.core.config import settings


def company_timezone() -> pytz.BaseTzInfo:
    return pytz.timezone(settings.company_timezone)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def as_utc(dt: datetime) -> datetime:
    """Naive values come back from SQLite; they were written as UTC."""
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_company_time(dt: datetime) -> datetime:
    return as_utc(dt).astimezone(company_timezone())


def company_date(dt: datetime) -> date:
    return to_company_time(dt).date()


def company_datetime(day: date, hour: int, minute: int = 0, second: int = 0) -> datetime:
    """Localized wall-clock time in the company timezone."""
    return company_timezone().localize(datetime(day.year, day.month, day.day, hour, minute, second))


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
