from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staffdesk.database import get_db
from staffdesk.routers.auth_deps import get_actor, get_now
from staffdesk.schemas.dashboard import DashboardResponse
from staffdesk.services.base import Actor
from staffdesk.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def dashboard(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
    now: datetime = Depends(get_now),
):
    return DashboardService(db, actor).build(now)
