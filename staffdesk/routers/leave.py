from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from staffdesk.database import get_db
from staffdesk.models.leave_request import LeaveStatus
from staffdesk.models.profile import Capability
from staffdesk.routers.auth_deps import get_actor, require_capability
from staffdesk.schemas.leave import (
    LeaveDecisionRequest,
    LeaveListResponse,
    LeaveRemarksUpdate,
    LeaveRequestCreate,
    LeaveRequestResponse,
)
from staffdesk.services import stats
from staffdesk.services.base import Actor
from staffdesk.services.leave_service import LeaveService

router = APIRouter(prefix="/leave", tags=["leave"])


@router.post("/requests", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
def submit_leave_request(
    payload: LeaveRequestCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return LeaveService(db, actor).submit(payload)


@router.get("/requests", response_model=LeaveListResponse)
def list_leave_requests(
    user_id: Optional[int] = None,
    leave_status: Optional[LeaveStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    service = LeaveService(db, actor)
    requests = service.list_requests(user_id=user_id, status=leave_status)
    own = service.list_requests(user_id=actor.user_id)
    return LeaveListResponse(
        requests=[LeaveRequestResponse.model_validate(r) for r in requests],
        summary=stats.summarize_leaves(requests),
        own_summary=stats.summarize_leaves(own),
    )


@router.get("/requests/{request_id}", response_model=LeaveRequestResponse)
def get_leave_request(
    request_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return LeaveService(db, actor).get(request_id)


# Approve / reject
@router.post("/requests/{request_id}/decision", response_model=LeaveRequestResponse)
def decide_leave_request(
    request_id: int,
    decision: LeaveDecisionRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capability(Capability.REVIEW_LEAVE)),
):
    return LeaveService(db, actor).decide(request_id, LeaveStatus(decision.status), decision.remarks)


@router.patch("/requests/{request_id}/remarks", response_model=LeaveRequestResponse)
def update_leave_remarks(
    request_id: int,
    update: LeaveRemarksUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capability(Capability.REVIEW_LEAVE)),
):
    return LeaveService(db, actor).update_remarks(request_id, update.remarks)
