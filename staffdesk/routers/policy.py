from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staffdesk.database import get_db
from staffdesk.models.profile import Capability
from staffdesk.routers.auth_deps import get_actor, require_capability
from staffdesk.schemas.policy import CompanyPolicyResponse, CompanyPolicyUpdate
from staffdesk.services.base import Actor
from staffdesk.services.policy_service import PolicyService

router = APIRouter(prefix="/policy", tags=["policy"])


@router.get("", response_model=CompanyPolicyResponse)
def read_policy(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return PolicyService(db, actor).get_policy()


@router.put("", response_model=CompanyPolicyResponse)
def update_policy(
    update: CompanyPolicyUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_capability(Capability.MANAGE_POLICY)),
):
    return PolicyService(db, actor).update_policy(update)
