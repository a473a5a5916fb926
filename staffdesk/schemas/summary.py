from pydantic import BaseModel


class AttendanceSummary(BaseModel):
    total_days: int = 0
    present_days: int = 0
    late_days: int = 0
    absent_days: int = 0
    total_hours: float = 0.0
    average_hours: float = 0.0


class LeaveSummary(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
