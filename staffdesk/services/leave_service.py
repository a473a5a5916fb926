from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import joinedload

from staffdesk.core.config import settings
from staffdesk.core.exceptions import LeaveOverlap, NotFound, ValidationFailed
from staffdesk.core.security import sanitize_optional
from staffdesk.models.leave_request import LeaveRequest, LeaveStatus
from staffdesk.models.profile import Capability
from staffdesk.schemas.leave import LeaveRequestCreate
from staffdesk.services.base import BaseService
from staffdesk.services.leave_rules import ensure_transition, find_overlaps, validate_range


class LeaveService(BaseService):
    """
    Leave workflow: employees submit, HR/admin decide.

    A request moves pending -> approved | rejected exactly once; after the
    decision only the remarks may change.
    """

    def submit(self, payload: LeaveRequestCreate) -> LeaveRequest:
        validate_range(payload.start_date, payload.end_date)
        reason = sanitize_optional(payload.reason)
        if not reason:
            raise ValidationFailed("Please fill in all required fields", details={"missing": ["reason"]})

        if settings.reject_overlapping_leave:
            self._ensure_no_overlap(self.actor.user_id, payload.start_date, payload.end_date)

        leave = LeaveRequest(
            user_id=self.actor.user_id,
            leave_type=payload.leave_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
        )
        self.db.add(leave)
        self.commit("leave submission")
        self.db.refresh(leave)
        self.log_info(
            "Leave request submitted",
            leave_id=leave.id, user_id=leave.user_id, total_days=leave.total_days,
        )
        return leave

    def get(self, request_id: int) -> LeaveRequest:
        leave = self.query_guard(
            "leave lookup",
            lambda: self.db.query(LeaveRequest).filter(LeaveRequest.id == request_id).first(),
        )
        if leave is None or (leave.user_id != self.actor.user_id and not self.actor.can(Capability.VIEW_ALL_RECORDS)):
            raise NotFound("Leave request not found")
        return leave

    def decide(self, request_id: int, status: LeaveStatus, remarks: Optional[str] = None) -> LeaveRequest:
        self.actor.require(Capability.REVIEW_LEAVE)
        leave = self.get(request_id)
        ensure_transition(leave.status, status)

        if LeaveStatus(status) == LeaveStatus.APPROVED and settings.reject_overlapping_leave:
            self._ensure_no_overlap(leave.user_id, leave.start_date, leave.end_date, exclude_id=leave.id)

        leave.status = LeaveStatus(status)
        leave.approved_by = self.actor.user_id
        leave.remarks = sanitize_optional(remarks)
        leave.decided_at = datetime.now(timezone.utc)
        self.commit("leave decision")
        self.db.refresh(leave)
        self.log_info(
            f"Leave request {leave.status.value}",
            leave_id=leave.id, user_id=leave.user_id, decided_by=self.actor.user_id,
        )
        return leave

    def update_remarks(self, request_id: int, remarks: Optional[str]) -> LeaveRequest:
        self.actor.require(Capability.REVIEW_LEAVE)
        leave = self.get(request_id)
        leave.remarks = sanitize_optional(remarks)
        self.commit("leave remarks update")
        self.db.refresh(leave)
        return leave

    def list_requests(self, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> List[LeaveRequest]:
        """Staff see every request unless they filter by user; employees see their own."""
        query = self.db.query(LeaveRequest).options(joinedload(LeaveRequest.profile))
        if user_id is not None or not self.actor.can(Capability.VIEW_ALL_RECORDS):
            query = query.filter(LeaveRequest.user_id == self.actor.scope_user_id(user_id))
        if status is not None:
            query = query.filter(LeaveRequest.status == LeaveStatus(status))
        return self.query_guard(
            "leave listing",
            lambda: query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).all(),
        )

    def recent(self, limit: int = 5) -> List[LeaveRequest]:
        return self.query_guard(
            "recent leave",
            lambda: self.db.query(LeaveRequest).filter(
                LeaveRequest.user_id == self.actor.user_id
            ).order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).limit(limit).all(),
        )

    def count_pending(self) -> int:
        return self.query_guard(
            "pending leave count",
            lambda: self.db.query(LeaveRequest).filter(LeaveRequest.status == LeaveStatus.PENDING).count(),
        )

    def _ensure_no_overlap(self, user_id: int, start_date, end_date, exclude_id: Optional[int] = None):
        query = self.db.query(LeaveRequest).filter(
            LeaveRequest.user_id == user_id,
            LeaveRequest.status == LeaveStatus.APPROVED,
        )
        if exclude_id is not None:
            query = query.filter(LeaveRequest.id != exclude_id)
        conflicts = find_overlaps(start_date, end_date, self.query_guard("overlap check", query.all))
        if conflicts:
            self.log_warning("Overlapping leave refused", user_id=user_id, conflicts=[c.id for c in conflicts])
            raise LeaveOverlap([c.id for c in conflicts])
