"""
Pure leave rules: inclusive day counting, the pending -> approved|rejected
state machine and date-range overlap.
"""
from datetime import date
from typing import Iterable, List

from staffdesk.core.exceptions import LeaveAlreadyDecided, ValidationFailed
from staffdesk.models.leave_request import LeaveRequest, LeaveStatus

# Terminal states have no outgoing transitions
ALLOWED_TRANSITIONS = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}


def validate_range(start_date: date, end_date: date) -> None:
    if start_date is None or end_date is None:
        raise ValidationFailed("Start and end dates are required")
    if start_date > end_date:
        raise ValidationFailed(
            "Start date must be on or before end date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


def compute_total_days(start_date: date, end_date: date) -> int:
    """Both ends count, so a single-day leave is 1."""
    validate_range(start_date, end_date)
    return (end_date - start_date).days + 1


def ensure_transition(current: LeaveStatus, target: LeaveStatus) -> None:
    current = LeaveStatus(current)
    target = LeaveStatus(target)
    if target == LeaveStatus.PENDING:
        raise ValidationFailed("A decision must be either approved or rejected")
    if target not in ALLOWED_TRANSITIONS[current]:
        raise LeaveAlreadyDecided(current.value)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and b_start <= a_end


def find_overlaps(start_date: date, end_date: date, approved: Iterable[LeaveRequest]) -> List[LeaveRequest]:
    return [
        leave for leave in approved
        if ranges_overlap(start_date, end_date, leave.start_date, leave.end_date)
    ]
