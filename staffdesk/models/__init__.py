# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import account, profile, attendance, leave_request, company_policy

# Explicit class exports for cleaner imports
from .account import Account
from .profile import Profile, UserRole
from .attendance import AttendanceRecord, AttendanceStatus
from .leave_request import LeaveRequest, LeaveStatus, LeaveType
from .company_policy import CompanyPolicy

__all__ = [
    "Account",
    "Profile",
    "UserRole",
    "AttendanceRecord",
    "AttendanceStatus",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "CompanyPolicy",
]
