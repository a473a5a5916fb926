from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Literal, Optional

from staffdesk.models.leave_request import LeaveStatus, LeaveType
from staffdesk.schemas.summary import LeaveSummary


class LeaveRequestCreate(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str = Field(min_length=1)


class LeaveDecisionRequest(BaseModel):
    status: Literal["approved", "rejected"]
    remarks: Optional[str] = None


class LeaveRemarksUpdate(BaseModel):
    remarks: Optional[str] = None


class RequesterInfo(BaseModel):
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class LeaveRequestResponse(BaseModel):
    id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    approved_by: Optional[int] = None
    remarks: Optional[str] = None
    total_days: int
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    profile: Optional[RequesterInfo] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveListResponse(BaseModel):
    requests: List[LeaveRequestResponse]
    summary: LeaveSummary
    own_summary: LeaveSummary
