from datetime import datetime
from html import escape
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

TIME_UNTIL = {
    "24_hours": "tomorrow",
    "1_hour": "in 1 hour",
}


def time_until(reminder_type: str) -> str:
    return TIME_UNTIL.get(reminder_type, "in 1 hour")


def _zone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("알 수 없는 타임존, UTC 사용 timezone=%s", name)
        return ZoneInfo("UTC")


def format_session_time(scheduled_start: str, timezone_name: str | None) -> tuple[str, str]:
    """세션 시작 시각을 세션 타임존 기준 (날짜, 시각) 문자열로 변환

    예: ("Monday, March 2, 2026", "3:30 PM EST")
    """
    start = datetime.fromisoformat(scheduled_start.replace("Z", "+00:00"))
    local = start.astimezone(_zone(timezone_name))
    hour = local.hour % 12 or 12
    date_text = f"{local:%A}, {local:%B} {local.day}, {local.year}"
    time_text = f"{hour}:{local:%M} {local:%p} {local.tzname()}"
    return date_text, time_text


def session_reminder_email(
    recipient_name: str | None,
    session_title: str,
    other_person: str,
    reminder_type: str,
    date_text: str,
    time_text: str,
    meeting_link: str | None,
) -> tuple[str, str]:
    """세션 리마인더 메일 (제목, HTML)"""
    when = time_until(reminder_type)
    subject = f'Reminder: "{session_title}" {when}'
    app_url = settings.app_url.rstrip("/")

    join = ""
    if meeting_link:
        join = (
            '<p style="margin: 32px 0; text-align: center;">'
            f'<a href="{escape(meeting_link)}" style="background: #2563EB; color: #fff; '
            'padding: 12px 28px; border-radius: 8px; text-decoration: none;">Join Meeting</a></p>'
        )

    html = f"""<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #2563EB;">Career Playbook</h1>
  <h2>Session Reminder</h2>
  <p>Hi {escape(recipient_name or "there")},</p>
  <p>This is a friendly reminder that you have a session {when}:</p>
  <div style="background: #f3f4f6; padding: 24px; border-radius: 12px;">
    <h3>{escape(session_title)}</h3>
    <p><strong>Date:</strong> {escape(date_text)}</p>
    <p><strong>Time:</strong> {escape(time_text)}</p>
    <p><strong>With:</strong> {escape(other_person)}</p>
  </div>
  {join}
  <p style="text-align: center;"><a href="{escape(app_url)}/sessions">View in Career Playbook</a></p>
</div>"""
    return subject, html
