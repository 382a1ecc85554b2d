"""Central API router that aggregates all route modules."""

from fastapi import APIRouter

from mindfulspace.api.crisis import router as crisis_router
from mindfulspace.api.health import router as health_router
from mindfulspace.api.sessions import router as sessions_router
from mindfulspace.api.therapist import router as therapist_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(sessions_router, prefix="/sessions", tags=["sessions"])
api_router.include_router(therapist_router, prefix="/ai-therapist-chat", tags=["chat"])
api_router.include_router(crisis_router, prefix="/crisis-resources", tags=["safety"])
