from datetime import time
from sqlalchemy import Column, Integer, Time, ForeignKey, DateTime
from sqlalchemy.sql import func
from staffdesk.database import Base

DEFAULT_OFFICE_START = time(9, 0)
DEFAULT_OFFICE_END = time(18, 0)
DEFAULT_GRACE_MINUTES = 15
DEFAULT_LATE_MARK_AFTER_MINUTES = 30


class CompanyPolicy(Base):
    """Singleton row: the office hours every check-in is classified against."""
    __tablename__ = "company_policies"

    id = Column(Integer, primary_key=True, index=True)
    office_start_time = Column(Time, nullable=False, default=DEFAULT_OFFICE_START)
    office_end_time = Column(Time, nullable=False, default=DEFAULT_OFFICE_END)
    grace_minutes = Column(Integer, nullable=False, default=DEFAULT_GRACE_MINUTES)
    late_mark_after_minutes = Column(Integer, nullable=False, default=DEFAULT_LATE_MARK_AFTER_MINUTES)
    updated_by = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
