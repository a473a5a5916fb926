from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from staffdesk.core.config import settings
from staffdesk.core.limiter import limiter
from staffdesk.database import get_db
from staffdesk.schemas.auth import LoginRequest, ProfileResponse, RegisterRequest, Token
from staffdesk.services import auth as auth_service

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def _token_response(profile) -> dict:
    return {
        "access_token": auth_service.token_for(profile),
        "token_type": "bearer",
        "user_id": profile.user_id,
        "role": profile.role,
    }


@router.post("/register", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.auth_rate_limit)
def register(request: Request, payload: RegisterRequest, db: Session = Depends(get_db)):
    return auth_service.register_account(db, payload.email, payload.password, payload.name)


@router.post("/login", response_model=Token)
@limiter.limit(settings.auth_rate_limit)
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    profile = auth_service.authenticate(db, login_data.email, login_data.password)
    return _token_response(profile)

