from datetime import datetime

from staffdesk.core.timeutils import company_date
from staffdesk.models.attendance import AttendanceRecord
from staffdesk.models.profile import Capability
from staffdesk.schemas.attendance import AttendanceRecordResponse
from staffdesk.schemas.dashboard import DashboardResponse, EmployeeStats, StaffStats
from staffdesk.schemas.leave import LeaveRequestResponse
from staffdesk.services.attendance_service import AttendanceService
from staffdesk.services.base import BaseService
from staffdesk.services.leave_service import LeaveService
from staffdesk.services.profile_service import ProfileService
from staffdesk.services import stats


def _as_record(record):
    return AttendanceRecordResponse.model_validate(record) if record is not None else None


class DashboardService(BaseService):
    """Role-specific landing page data."""

    def build(self, now: datetime) -> DashboardResponse:
        today = company_date(now)
        attendance = AttendanceService(self.db, self.actor)
        leave = LeaveService(self.db, self.actor)

        response = DashboardResponse(
            role=self.actor.role,
            today=_as_record(attendance.get_record(self.actor.user_id, today)),
            recent_attendance=[_as_record(r) for r in attendance.recent(limit=7)],
            recent_leaves=[LeaveRequestResponse.model_validate(r) for r in leave.recent(limit=5)],
        )

        if self.actor.can(Capability.VIEW_ALL_RECORDS):
            response.staff_stats = StaffStats(
                total_employees=ProfileService(self.db, self.actor).count_employees(),
                present_today=attendance.count_checked_in(today),
                pending_leaves=leave.count_pending(),
            )
        else:
            month_start = today.replace(day=1)
            records = self.query_guard(
                "monthly hours",
                lambda: self.db.query(AttendanceRecord).filter(
                    AttendanceRecord.user_id == self.actor.user_id,
                    AttendanceRecord.date >= month_start,
                    AttendanceRecord.total_hours.isnot(None),
                ).all(),
            )
            response.employee_stats = EmployeeStats(total_hours_this_month=stats.total_hours(records))
        return response
