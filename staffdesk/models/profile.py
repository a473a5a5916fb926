"""
Profile model and the closed set of roles.

A profile is the role/identity record of an account; credentials live on
Account. Role decides access scope through ROLE_CAPABILITIES.
"""
from sqlalchemy import Column, Integer, String, Enum, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from staffdesk.core.timeutils import company_date, utc_now
from staffdesk.database import Base


class UserRole(str, enum.Enum):
    """
    User roles.

    - EMPLOYEE: self-service access to own attendance and leave
    - HR: sees every record, reviews leave, marks absentees
    - ADMIN: everything HR can do plus profile and policy management
    """
    EMPLOYEE = "employee"
    HR = "hr"
    ADMIN = "admin"


class Capability(str, enum.Enum):
    VIEW_ALL_RECORDS = "view_all_records"
    REVIEW_LEAVE = "review_leave"
    MARK_ABSENTEES = "mark_absentees"
    MANAGE_PROFILES = "manage_profiles"
    MANAGE_POLICY = "manage_policy"


_STAFF_CAPABILITIES = frozenset({
    Capability.VIEW_ALL_RECORDS,
    Capability.REVIEW_LEAVE,
    Capability.MARK_ABSENTEES,
})

ROLE_CAPABILITIES = {
    UserRole.EMPLOYEE: frozenset(),
    UserRole.HR: _STAFF_CAPABILITIES,
    UserRole.ADMIN: _STAFF_CAPABILITIES | {Capability.MANAGE_PROFILES, Capability.MANAGE_POLICY},
}

_unmapped = set(UserRole) - set(ROLE_CAPABILITIES)
if _unmapped:
    raise RuntimeError(f"Roles without a capability mapping: {sorted(r.value for r in _unmapped)}")


def role_can(role: UserRole, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES[UserRole(role)]


class ProfileStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _company_today():
    # Same calendar the absentee marking compares hire dates against
    return company_date(utc_now())


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    name = Column(String, nullable=False, default="New User")
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.EMPLOYEE,
        nullable=False,
    )
    department = Column(String, nullable=True)
    status = Column(String, default=ProfileStatus.ACTIVE.value, nullable=False)
    hire_date = Column(Date, default=_company_today)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    account = relationship("Account", back_populates="profile")

    def __repr__(self):
        return f"<Profile {self.email} ({self.role.value})>"

    @property
    def is_active(self) -> bool:
        return self.status == ProfileStatus.ACTIVE.value
