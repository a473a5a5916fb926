from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import time
from typing import Optional


class CompanyPolicyResponse(BaseModel):
    office_start_time: time
    office_end_time: time
    grace_minutes: int
    late_mark_after_minutes: int
    updated_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class CompanyPolicyUpdate(BaseModel):
    office_start_time: Optional[time] = None
    office_end_time: Optional[time] = None
    grace_minutes: Optional[int] = Field(default=None, ge=0, le=24 * 60)
    late_mark_after_minutes: Optional[int] = Field(default=None, ge=0, le=24 * 60)

    @field_validator("office_start_time", "office_end_time")
    @classmethod
    def wall_clock_only(cls, value: Optional[time]) -> Optional[time]:
        # Office hours are read in COMPANY_TIMEZONE
        if value is not None and value.tzinfo is not None:
            raise ValueError("office hours must not carry a UTC offset")
        return value

    @model_validator(mode="after")
    def check_office_hours(self):
        if self.office_start_time and self.office_end_time and self.office_start_time >= self.office_end_time:
            raise ValueError("office_start_time must be before office_end_time")
        return self
