from fastapi import APIRouter, Depends

from app.api.deps import verify_cron_secret
from app.domain.reminders.service import sweep_reminders

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post("/sweep", dependencies=[Depends(verify_cron_secret)])
async def sweep_session_reminders() -> dict:
    return await sweep_reminders()
