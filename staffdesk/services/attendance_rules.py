"""
Pure attendance rules: hours worked, check-in/check-out preconditions and
status classification against the company policy. Nothing here touches the
database.
"""
from datetime import date, datetime, timedelta
from typing import Optional

from staffdesk.core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, NotCheckedIn, ValidationFailed
from staffdesk.core.timeutils import as_utc, company_datetime, to_company_time
from staffdesk.models.attendance import AttendanceRecord, AttendanceStatus


def compute_total_hours(check_in: datetime, check_out: datetime) -> float:
    """Elapsed time between the two stamps, in fractional hours."""
    return (as_utc(check_out) - as_utc(check_in)).total_seconds() / 3600


def late_threshold(day: date, policy) -> datetime:
    start = policy.office_start_time
    return company_datetime(day, start.hour, start.minute, start.second) + timedelta(minutes=policy.grace_minutes)


def office_day_end(day: date, policy) -> datetime:
    end = policy.office_end_time
    return company_datetime(day, end.hour, end.minute, end.second)


def classify_check_in(check_in: datetime, policy) -> AttendanceStatus:
    """Late once the local check-in time passes office start plus the grace period."""
    local = to_company_time(check_in)
    if local > late_threshold(local.date(), policy):
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def ensure_can_check_in(existing: Optional[AttendanceRecord]) -> None:
    # An absent marker (no check_in) may still be overwritten by a real check-in
    if existing is not None and existing.check_in is not None:
        raise AlreadyCheckedIn()


def ensure_can_check_out(existing: Optional[AttendanceRecord], timestamp: datetime) -> None:
    if existing is None or existing.check_in is None:
        raise NotCheckedIn()
    if existing.check_out is not None:
        raise AlreadyCheckedOut()
    if as_utc(timestamp) < as_utc(existing.check_in):
        raise ValidationFailed(
            "Check-out time cannot be earlier than check-in time",
            details={"check_in": as_utc(existing.check_in).isoformat(), "check_out": as_utc(timestamp).isoformat()},
        )


def office_day_over(day: date, now: datetime, policy) -> bool:
    """True once `now` is past office end on `day`."""
    return as_utc(now) >= office_day_end(day, policy)
