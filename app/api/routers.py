from fastapi import APIRouter

from app.api.v1.invitations import router as invitations_router
from app.api.v1.jobs import router as jobs_router
from app.api.v1.plans import router as plans_router
from app.api.v1.reminders import router as reminders_router
from app.api.v1.resume import router as resume_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(resume_router)
api_router.include_router(plans_router)
api_router.include_router(invitations_router)
api_router.include_router(jobs_router)
api_router.include_router(reminders_router)
