from fastapi import APIRouter
from staffdesk.routers import attendance, auth, dashboard, leave, policy, profiles

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(profiles.router, tags=["Profiles"])
api_router.include_router(attendance.router, tags=["Attendance"])
api_router.include_router(leave.router, tags=["Leave"])
api_router.include_router(policy.router, tags=["Company Policy"])
api_router.include_router(dashboard.router, tags=["Dashboard"])
