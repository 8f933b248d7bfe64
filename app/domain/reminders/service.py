"""
세션 리마인더 발송

예약 작업이 주기적으로 호출한다. 리마인더 하나가 실패해도 나머지는 계속 처리한다.
"""

from datetime import datetime, timezone

from app.core.config import settings
from app.core.exceptions import ServiceUnavailable
from app.core.logging import get_logger
from app.domain.reminders.emails import format_session_time, session_reminder_email, time_until
from app.infra.email.client import send_email
from app.infra.supabase.client import SupabaseError, insert, select_many, select_one, update

logger = get_logger(__name__)

REMINDERS_TABLE = "session_reminders"
SESSION_COLUMNS = (
    "id, title, scheduled_start, scheduled_end, timezone, meeting_link, "
    "host:host_id(id, full_name, email), attendee:attendee_id(id, full_name, email)"
)


def _display_name(person: dict | None) -> str:
    person = person or {}
    return person.get("full_name") or person.get("email") or "your session partner"


async def _process(reminder: dict) -> bool:
    """리마인더 하나 처리, 발송했으면 True

    세션/사용자가 없으면 False (건너뜀), 발송 실패는 예외로 올린다.
    """
    session = await select_one(
        "mentorship_sessions", {"id": reminder["session_id"]}, columns=SESSION_COLUMNS
    )
    if not session:
        logger.warning("세션 없음, 건너뜀 session_id=%s", reminder["session_id"])
        return False

    user = await select_one("profiles", {"id": reminder["user_id"]}, columns="id, full_name, email")
    if not user or not user.get("email"):
        logger.warning("사용자 없음, 건너뜀 user_id=%s", reminder["user_id"])
        return False

    host = session.get("host") or {}
    other = session.get("attendee") if user["id"] == host.get("id") else host
    other_name = _display_name(other)

    date_text, time_text = format_session_time(session["scheduled_start"], session.get("timezone"))
    subject, html = session_reminder_email(
        recipient_name=user.get("full_name"),
        session_title=session.get("title") or "Mentorship session",
        other_person=other_name,
        reminder_type=reminder.get("reminder_type", ""),
        date_text=date_text,
        time_text=time_text,
        meeting_link=session.get("meeting_link"),
    )

    if not await send_email(user["email"], subject, html):
        raise ServiceUnavailable(detail=f"reminder={reminder['id']}", message="리마인더 메일 발송 실패")

    await update(REMINDERS_TABLE, {"email_sent": True, "in_app_sent": True}, {"id": reminder["id"]})
    await insert(
        "notifications",
        {
            "user_id": reminder["user_id"],
            "type": "session_reminder",
            "title": f"Session reminder: {session.get('title')}",
            "message": f"Your session with {other_name} is {time_until(reminder.get('reminder_type', ''))}",
            "data": {
                "session_id": session["id"],
                "reminder_type": reminder.get("reminder_type"),
            },
        },
    )
    return True


async def sweep_reminders() -> dict:
    """
    발송 시각이 지난 리마인더 일괄 발송

    Returns:
        {"success": True, "processed": 발송 수, "errors": 실패 수, "total": 조회 수}
    """
    now = datetime.now(timezone.utc).isoformat()
    try:
        reminders = await select_many(
            REMINDERS_TABLE,
            {"email_sent": False},
            order_by="reminder_time",
            limit=settings.reminder_batch_size,
            lte={"reminder_time": now},
        )
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e), message="리마인더를 조회하지 못했습니다") from e

    processed = 0
    errors = 0
    for reminder in reminders:
        try:
            if await _process(reminder):
                processed += 1
        except (SupabaseError, ServiceUnavailable, ValueError, KeyError) as e:
            logger.error("리마인더 처리 실패 reminder_id=%s error=%s", reminder.get("id"), e)
            errors += 1

    logger.info("리마인더 발송 완료 processed=%d errors=%d total=%d", processed, errors, len(reminders))
    return {
        "success": True,
        "processed": processed,
        "errors": errors,
        "total": len(reminders),
    }
