"""
Attendance service: check-in/check-out against the (user, date) record,
absentee marking and the read paths used by the attendance page and the
dashboard.
"""
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from staffdesk.core.exceptions import StoreError, ValidationFailed
from staffdesk.core.timeutils import as_utc, company_date, month_bounds
from staffdesk.models.attendance import AttendanceRecord, AttendanceStatus
from staffdesk.models.profile import Capability, Profile, ProfileStatus, UserRole
from staffdesk.services.attendance_rules import (
    classify_check_in,
    ensure_can_check_in,
    ensure_can_check_out,
    office_day_over,
)
from staffdesk.services.base import BaseService
from staffdesk.services.policy_service import PolicyService


class AttendanceService(BaseService):

    def get_record(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        return self.query_guard(
            "attendance lookup",
            lambda: self.db.query(AttendanceRecord).filter(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date == day,
            ).first(),
        )

    def check_in(self, timestamp: datetime, day: Optional[date] = None) -> AttendanceRecord:
        """
        Record the actor's check-in.

        Fails with AlreadyCheckedIn when the day already has a check-in. An
        existing check-in-less row (an absent marker) is taken over.
        """
        user_id = self.actor.user_id
        day = day or company_date(timestamp)
        existing = self.get_record(user_id, day)
        ensure_can_check_in(existing)

        policy = PolicyService(self.db).get_policy()
        status = classify_check_in(timestamp, policy)
        record = self._upsert(user_id, day, check_in=as_utc(timestamp), status=status)
        self.log_info("Check-in recorded", user_id=user_id, day=day.isoformat(), status=status.value)
        return record

    def check_out(self, timestamp: datetime, day: Optional[date] = None) -> AttendanceRecord:
        user_id = self.actor.user_id
        day = day or company_date(timestamp)
        record = self.get_record(user_id, day)
        ensure_can_check_out(record, timestamp)

        record.check_out = as_utc(timestamp)
        self.commit("check-out")
        self.db.refresh(record)
        self.log_info("Check-out recorded", user_id=user_id, day=day.isoformat(), total_hours=record.total_hours)
        return record

    def _upsert(self, user_id: int, day: date, **values) -> AttendanceRecord:
        """Insert-or-update keyed by (user_id, date); a lost insert race becomes an update."""
        record = self.get_record(user_id, day)
        if record is None:
            record = AttendanceRecord(user_id=user_id, date=day)
            self.db.add(record)
        for field, value in values.items():
            setattr(record, field, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            self.log_warning("Concurrent attendance write, retrying as update", user_id=user_id, day=day.isoformat())
            record = self.get_record(user_id, day)
            if record is None:
                raise StoreError()
            for field, value in values.items():
                setattr(record, field, value)
            self.commit("attendance upsert")
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Store failure during attendance upsert: {e}", exc_info=True)
            raise StoreError() from e

        self.db.refresh(record)
        return record

    def list_month(self, year: int, month: int, user_id: Optional[int] = None) -> List[AttendanceRecord]:
        if not 1 <= month <= 12:
            raise ValidationFailed("Month must be between 1 and 12")
        user_id = self.actor.scope_user_id(user_id)
        start, end = month_bounds(year, month)
        return self.query_guard(
            "monthly attendance",
            lambda: self.db.query(AttendanceRecord).filter(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.date >= start,
                AttendanceRecord.date <= end,
            ).order_by(AttendanceRecord.date.desc()).all(),
        )

    def recent(self, limit: int = 7, user_id: Optional[int] = None) -> List[AttendanceRecord]:
        user_id = self.actor.scope_user_id(user_id)
        return self.query_guard(
            "recent attendance",
            lambda: self.db.query(AttendanceRecord).filter(
                AttendanceRecord.user_id == user_id
            ).order_by(AttendanceRecord.date.desc()).limit(limit).all(),
        )

    def list_daily(self, day: date) -> List[AttendanceRecord]:
        self.actor.require(Capability.VIEW_ALL_RECORDS)
        return self.query_guard(
            "daily attendance",
            lambda: self.db.query(AttendanceRecord).filter(
                AttendanceRecord.date == day
            ).order_by(AttendanceRecord.user_id).all(),
        )

    def count_checked_in(self, day: date) -> int:
        return self.query_guard(
            "present count",
            lambda: self.db.query(AttendanceRecord).filter(
                AttendanceRecord.date == day,
                AttendanceRecord.check_in.isnot(None),
            ).count(),
        )

    def mark_absentees(self, day: date, now: datetime) -> List[int]:
        """
        Give every active non-admin profile without a check-in on `day` an
        absent record. Only allowed once the office day is over.
        Returns the user ids that were marked.
        """
        self.actor.require(Capability.MARK_ABSENTEES)
        policy = PolicyService(self.db).get_policy()
        if not office_day_over(day, now, policy):
            raise ValidationFailed(
                "Absentees can only be marked after office hours end",
                details={"date": day.isoformat(), "office_end_time": policy.office_end_time.isoformat()},
            )

        profiles = self.query_guard(
            "absentee candidates",
            lambda: self.db.query(Profile).filter(
                Profile.role != UserRole.ADMIN,
                Profile.status == ProfileStatus.ACTIVE.value,
            ).all(),
        )
        existing = {record.user_id: record for record in self.list_daily(day)}

        marked = []
        for profile in profiles:
            if profile.hire_date and profile.hire_date > day:
                continue
            record = existing.get(profile.user_id)
            if record is None:
                self.db.add(AttendanceRecord(user_id=profile.user_id, date=day, status=AttendanceStatus.ABSENT))
            elif record.check_in is None and record.status != AttendanceStatus.ABSENT:
                record.status = AttendanceStatus.ABSENT
            else:
                continue
            marked.append(profile.user_id)

        self.commit("absentee marking")
        self.log_info("Absentees marked", day=day.isoformat(), count=len(marked), marked_by=self.actor.user_id)
        return marked
