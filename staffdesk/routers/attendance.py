from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from staffdesk.core.timeutils import company_date
from staffdesk.database import get_db
from staffdesk.routers.auth_deps import get_actor, get_now
from staffdesk.schemas.attendance import (
    AbsenteeMarkingResponse,
    AttendanceRecordResponse,
    MonthlyAttendanceResponse,
)
from staffdesk.services import stats
from staffdesk.services.attendance_service import AttendanceService
from staffdesk.services.base import Actor

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/check-in", response_model=AttendanceRecordResponse)
def check_in(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    now: datetime = Depends(get_now),
):
    return AttendanceService(db, actor).check_in(now)


@router.post("/check-out", response_model=AttendanceRecordResponse)
def check_out(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    now: datetime = Depends(get_now),
):
    return AttendanceService(db, actor).check_out(now)


@router.get("/today", response_model=Optional[AttendanceRecordResponse])
def today(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    now: datetime = Depends(get_now),
):
    return AttendanceService(db, actor).get_record(actor.user_id, company_date(now))


@router.get("", response_model=MonthlyAttendanceResponse)
def monthly_attendance(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    now: datetime = Depends(get_now),
):
    current = company_date(now)
    year = year or current.year
    month = month or current.month
    records = AttendanceService(db, actor).list_month(year, month, user_id)
    return MonthlyAttendanceResponse(
        user_id=user_id or actor.user_id,
        year=year,
        month=month,
        records=[AttendanceRecordResponse.model_validate(r) for r in records],
        summary=stats.summarize_attendance(records),
    )


@router.get("/recent", response_model=List[AttendanceRecordResponse])
def recent_attendance(
    limit: int = Query(default=7, ge=1, le=31),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return AttendanceService(db, actor).recent(limit=limit)


@router.get("/daily", response_model=List[AttendanceRecordResponse])
def daily_attendance(
    day: date,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return AttendanceService(db, actor).list_daily(day)


@router.post("/absentees", response_model=AbsenteeMarkingResponse)
def mark_absentees(
    day: date,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    now: datetime = Depends(get_now),
):
    marked = AttendanceService(db, actor).mark_absentees(day, now)
    return AbsenteeMarkingResponse(date=day, marked=len(marked), user_ids=marked)
