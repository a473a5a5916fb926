import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()


class LeaveOverlapPolicy:
    ALLOW = "allow"
    REJECT = "reject"


class Config(BaseModel):
    app_name: str = "StaffDesk"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./staffdesk.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    auth_rate_limit: str = os.getenv("AUTH_RATE_LIMIT", "20/minute")

    # Attendance & leave rules
    company_timezone: str = os.getenv("COMPANY_TIMEZONE", "UTC")
    leave_overlap_policy: str = os.getenv("LEAVE_OVERLAP_POLICY", LeaveOverlapPolicy.ALLOW).lower()

    # Registrations with this email get the admin role (first-admin bootstrap)
    bootstrap_admin_email: str = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "").strip().lower()

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

    @property
    def sqlalchemy_url(self) -> str:
        """Normalise Heroku/Render style postgres:// URLs."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def reject_overlapping_leave(self) -> bool:
        return self.leave_overlap_policy == LeaveOverlapPolicy.REJECT


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.leave_overlap_policy not in (LeaveOverlapPolicy.ALLOW, LeaveOverlapPolicy.REJECT):
    raise RuntimeError(
        f"FATAL: LEAVE_OVERLAP_POLICY must be 'allow' or 'reject', got '{settings.leave_overlap_policy}'."
    )
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
else:
    if "dev-only" in settings.secret_key:
        _logger.warning("Using insecure default SECRET_KEY, only acceptable in development.")
