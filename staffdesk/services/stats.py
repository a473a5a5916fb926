"""
Aggregation over fetched rows. Every reduction here is a commutative sum, so
the result does not depend on the order of the input.
"""
from typing import Iterable

from staffdesk.models.attendance import AttendanceStatus
from staffdesk.models.leave_request import LeaveStatus
from staffdesk.schemas.summary import AttendanceSummary, LeaveSummary


def summarize_attendance(records: Iterable) -> AttendanceSummary:
    counts = {status: 0 for status in AttendanceStatus}
    total_days = 0
    total_hours = 0.0
    for record in records:
        total_days += 1
        counts[AttendanceStatus(record.status)] += 1
        total_hours += record.total_hours or 0

    present = counts[AttendanceStatus.PRESENT]
    return AttendanceSummary(
        total_days=total_days,
        present_days=present,
        late_days=counts[AttendanceStatus.LATE],
        absent_days=counts[AttendanceStatus.ABSENT],
        total_hours=total_hours,
        average_hours=total_hours / present if present else 0.0,
    )


def summarize_leaves(requests: Iterable) -> LeaveSummary:
    counts = {status: 0 for status in LeaveStatus}
    for request in requests:
        counts[LeaveStatus(request.status)] += 1
    return LeaveSummary(
        total=sum(counts.values()),
        pending=counts[LeaveStatus.PENDING],
        approved=counts[LeaveStatus.APPROVED],
        rejected=counts[LeaveStatus.REJECTED],
    )


def total_hours(records: Iterable) -> float:
    return round(sum(r.total_hours or 0 for r in records), 2)
