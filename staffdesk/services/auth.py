"""
Account registration, credential checks and access tokens.

Registering an account also creates its profile in the same transaction, so
every account always has exactly one profile.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from staffdesk.core.config import settings
from staffdesk.core.exceptions import AppException, AuthenticationError, StoreError
from staffdesk.core.security import sanitize_optional
from staffdesk.models.account import Account
from staffdesk.models.profile import Profile, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Returns the payload, None for an invalid token, or
    {"error": "TOKEN_EXPIRED"} for an expired one.
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        return {"error": "TOKEN_EXPIRED"}
    except JWTError as e:
        logger.info(f"Token rejected: {e}")
        return None


def token_for(profile: Profile) -> str:
    return create_access_token(data={"sub": str(profile.user_id), "role": profile.role.value})


def register_account(db: Session, email: str, password: str, name: Optional[str] = None) -> Profile:
    email = email.strip().lower()
    if db.query(Account).filter(Account.email == email).first():
        raise AppException("An account with this email already exists", status_code=409, error_code="EMAIL_TAKEN")

    role = UserRole.ADMIN if settings.bootstrap_admin_email and email == settings.bootstrap_admin_email else UserRole.EMPLOYEE
    account = Account(email=email, hashed_password=get_password_hash(password))
    account.profile = Profile(
        email=email,
        name=sanitize_optional(name) or "New User",
        role=role,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise AppException("An account with this email already exists", status_code=409, error_code="EMAIL_TAKEN") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Registration failed: {e}", exc_info=True)
        raise StoreError() from e

    db.refresh(account)
    logger.info(f"Registered account {account.id}", extra={"role": role.value})
    return account.profile


def authenticate(db: Session, email: str, password: str) -> Profile:
    account = db.query(Account).filter(Account.email == email.strip().lower()).first()
    if not account or not verify_password(password, account.hashed_password):
        logger.warning("Failed login", extra={"email": email})
        raise AuthenticationError("Incorrect email or password")
    if not account.is_active or account.profile is None or not account.profile.is_active:
        raise AuthenticationError("Account is inactive")
    return account.profile
