from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from staffdesk.database import get_db
from staffdesk.models.profile import Profile, UserRole
from staffdesk.routers.auth_deps import get_actor, get_current_profile
from staffdesk.schemas.auth import ProfileAdminUpdate, ProfileResponse, ProfileSelfUpdate
from staffdesk.services.base import Actor
from staffdesk.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
def read_own_profile(profile: Profile = Depends(get_current_profile)):
    return profile


@router.patch("/me", response_model=ProfileResponse)
def update_own_profile(
    update: ProfileSelfUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return ProfileService(db, actor).update_self(update)


@router.get("", response_model=List[ProfileResponse])
def list_profiles(
    role: Optional[UserRole] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return ProfileService(db, actor).list_profiles(role)


@router.patch("/{user_id}", response_model=ProfileResponse)
def update_profile(
    user_id: int,
    update: ProfileAdminUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return ProfileService(db, actor).update_profile(user_id, update)
