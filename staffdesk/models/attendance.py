from sqlalchemy import Column, Integer, Float, Date, DateTime, Enum, ForeignKey, UniqueConstraint, event
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from staffdesk.database import Base
import enum


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class AttendanceRecord(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    check_in = Column(DateTime(timezone=True), nullable=True)
    check_out = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        Enum(AttendanceStatus, name="attendance_status", values_callable=lambda e: [m.value for m in e]),
        default=AttendanceStatus.PRESENT,
        nullable=False,
    )
    total_hours = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    profile = relationship(
        "Profile",
        primaryjoin="AttendanceRecord.user_id == foreign(Profile.user_id)",
        viewonly=True,
        uselist=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uix_attendance_user_date"),
    )

    def __repr__(self):
        return f"<AttendanceRecord user={self.user_id} date={self.date} status={self.status}>"


@event.listens_for(AttendanceRecord, "before_insert")
@event.listens_for(AttendanceRecord, "before_update")
def _derive_total_hours(mapper, connection, target):
    # Derived column: whatever the caller set is overwritten
    from staffdesk.services.attendance_rules import compute_total_hours

    if target.check_in is not None and target.check_out is not None:
        target.total_hours = compute_total_hours(target.check_in, target.check_out)
    else:
        target.total_hours = None
