import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from staffdesk.core.exceptions import AccessDeniedError, StoreError
from staffdesk.models.profile import Capability, UserRole, role_can


@dataclass(frozen=True)
class Actor:
    """The authenticated user a service call acts on behalf of."""
    user_id: int
    role: UserRole

    def can(self, capability: Capability) -> bool:
        return role_can(self.role, capability)

    def require(self, capability: Capability) -> None:
        if not self.can(capability):
            raise AccessDeniedError(f"Role '{UserRole(self.role).value}' may not {capability.value.replace('_', ' ')}")

    def scope_user_id(self, requested: Optional[int]) -> int:
        """Employees only ever see their own rows."""
        if requested is None or requested == self.user_id:
            return self.user_id
        self.require(Capability.VIEW_ALL_RECORDS)
        return requested


class BaseService:
    def __init__(self, db: Session, actor: Optional[Actor] = None):
        self.db = db
        self.actor = actor
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_info(self, message: str, **extra):
        self._logger.info(message, extra=extra or None)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)

    def commit(self, action: str):
        """Commit the unit of work; any store failure is rolled back and surfaced as StoreError."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Store failure during {action}: {e}", exc_info=True)
            raise StoreError() from e

    def query_guard(self, action: str, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Store failure during {action}: {e}", exc_info=True)
            raise StoreError() from e
