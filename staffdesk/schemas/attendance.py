from pydantic import BaseModel, ConfigDict, field_validator
from datetime import date, datetime
from typing import List, Optional

from staffdesk.core.timeutils import as_utc
from staffdesk.models.attendance import AttendanceStatus
from staffdesk.schemas.summary import AttendanceSummary


class AttendanceRecordResponse(BaseModel):
    id: int
    user_id: int
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus
    total_hours: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("check_in", "check_out")
    @classmethod
    def attach_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None


class MonthlyAttendanceResponse(BaseModel):
    user_id: int
    year: int
    month: int
    records: List[AttendanceRecordResponse]
    summary: AttendanceSummary


class AbsenteeMarkingResponse(BaseModel):
    date: date
    marked: int
    user_ids: List[int]
