from typing import List, Optional

from staffdesk.core.exceptions import NotFound, ValidationFailed
from staffdesk.core.security import sanitize_optional
from staffdesk.models.profile import Capability, Profile, ProfileStatus, UserRole
from staffdesk.schemas.auth import ProfileAdminUpdate, ProfileSelfUpdate
from staffdesk.services.base import BaseService


class ProfileService(BaseService):

    def get(self, user_id: int) -> Profile:
        profile = self.query_guard(
            "profile lookup",
            lambda: self.db.query(Profile).filter(Profile.user_id == user_id).first(),
        )
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    def list_profiles(self, role: Optional[UserRole] = None) -> List[Profile]:
        self.actor.require(Capability.VIEW_ALL_RECORDS)
        query = self.db.query(Profile)
        if role is not None:
            query = query.filter(Profile.role == role)
        return self.query_guard("profile listing", lambda: query.order_by(Profile.name).all())

    def count_employees(self) -> int:
        """Everyone except admins."""
        return self.query_guard(
            "employee count",
            lambda: self.db.query(Profile).filter(Profile.role != UserRole.ADMIN).count(),
        )

    def update_self(self, update: ProfileSelfUpdate) -> Profile:
        return self._apply(self.get(self.actor.user_id), update.model_dump(exclude_unset=True))

    def update_profile(self, user_id: int, update: ProfileAdminUpdate) -> Profile:
        self.actor.require(Capability.MANAGE_PROFILES)
        changes = update.model_dump(exclude_unset=True)
        if user_id == self.actor.user_id and changes.get("role") not in (None, UserRole.ADMIN):
            raise ValidationFailed("Admins cannot demote themselves")
        return self._apply(self.get(user_id), changes)

    def _apply(self, profile: Profile, changes: dict) -> Profile:
        for field, value in changes.items():
            if field in ("name", "department"):
                value = sanitize_optional(value)
                if field == "name" and not value:
                    raise ValidationFailed("Name cannot be empty")
            elif field == "status":
                value = ProfileStatus(value).value
            setattr(profile, field, value)
        self.commit("profile update")
        self.db.refresh(profile)
        self.log_info("Profile updated", user_id=profile.user_id, fields=sorted(changes))
        return profile
