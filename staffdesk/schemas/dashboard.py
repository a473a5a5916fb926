from pydantic import BaseModel
from typing import List, Optional

from staffdesk.models.profile import UserRole
from staffdesk.schemas.attendance import AttendanceRecordResponse
from staffdesk.schemas.leave import LeaveRequestResponse


class StaffStats(BaseModel):
    total_employees: int
    present_today: int
    pending_leaves: int


class EmployeeStats(BaseModel):
    total_hours_this_month: float


class DashboardResponse(BaseModel):
    role: UserRole
    today: Optional[AttendanceRecordResponse] = None
    recent_attendance: List[AttendanceRecordResponse] = []
    recent_leaves: List[LeaveRequestResponse] = []
    staff_stats: Optional[StaffStats] = None
    employee_stats: Optional[EmployeeStats] = None
