"""
Request-scoped dependencies: the current profile, the Actor context handed to
services, and the clock.
"""
import logging
from datetime import datetime
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from staffdesk.core.timeutils import utc_now
from staffdesk.database import get_db
from staffdesk.models.profile import Capability, Profile
from staffdesk.services import auth as auth_service
from staffdesk.services.base import Actor

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_profile(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Profile:
    """
    Extracts and validates the current user from the JWT token.
    """
    payload = auth_service.decode_access_token(token)

    if payload is None:
        logger.warning("Authentication failed: Invalid token")
        raise _unauthorized("Could not validate credentials")

    if payload.get("error") == "TOKEN_EXPIRED":
        logger.info("Authentication failed: Token expired")
        raise _unauthorized("TOKEN_EXPIRED")

    if payload.get("type") != "access":
        logger.warning("Authentication failed: Invalid token type")
        raise _unauthorized("Invalid token type")

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        logger.warning("Authentication failed: Missing subject in token")
        raise _unauthorized("Missing subject in token")

    profile = db.query(Profile).filter(Profile.user_id == int(subject)).first()
    if profile is None:
        logger.warning(f"Authentication failed: Profile for user {subject} not found")
        raise _unauthorized("User not found")
    if not profile.is_active or not profile.account.is_active:
        logger.warning(f"Authentication failed: User {subject} is inactive")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive"
        )
    return profile


def get_actor(profile: Profile = Depends(get_current_profile)) -> Actor:
    # Role is read from the stored profile, never from the token claims
    return Actor(user_id=profile.user_id, role=profile.role)


def require_capability(capability: Capability) -> Callable:
    """
    Dependency factory that checks the actor's role grants `capability`.

    Usage:
        @router.get("/daily")
        def daily(actor: Actor = Depends(require_capability(Capability.VIEW_ALL_RECORDS))):
            ...
    """
    def capability_checker(actor: Actor = Depends(get_actor)) -> Actor:
        if not actor.can(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Your role cannot {capability.value.replace('_', ' ')}",
            )
        return actor
    return capability_checker


def get_now() -> datetime:
    """Wall clock for check-in/out stamps. Overridden in tests."""
    return utc_now()
