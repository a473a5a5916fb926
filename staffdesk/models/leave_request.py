from sqlalchemy import Column, Integer, String, Text, Date, Enum, ForeignKey, DateTime, event
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from staffdesk.database import Base
import enum


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, enum.Enum):
    CASUAL = "casual"
    SICK = "sick"
    EARNED = "earned"


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type = Column(
        Enum(LeaveType, name="leave_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(
        Enum(LeaveStatus, name="leave_status", values_callable=lambda e: [m.value for m in e]),
        default=LeaveStatus.PENDING,
        nullable=False,
        index=True,
    )
    approved_by = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    remarks = Column(Text, nullable=True)
    total_days = Column(Integer, nullable=False)
    decided_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    profile = relationship(
        "Profile",
        primaryjoin="LeaveRequest.user_id == foreign(Profile.user_id)",
        viewonly=True,
        uselist=False,
    )

    def __repr__(self):
        return f"<LeaveRequest {self.id} user={self.user_id} {self.start_date}..{self.end_date} {self.status}>"


@event.listens_for(LeaveRequest, "before_insert")
@event.listens_for(LeaveRequest, "before_update")
def _derive_total_days(mapper, connection, target):
    from staffdesk.services.leave_rules import compute_total_days

    target.total_days = compute_total_days(target.start_date, target.end_date)
