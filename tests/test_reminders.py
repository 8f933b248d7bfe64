"""세션 리마인더 스윕 테스트"""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.exceptions import ServiceUnavailable
from app.domain.reminders.emails import format_session_time, session_reminder_email
from app.domain.reminders.service import sweep_reminders
from app.infra.supabase.client import SupabaseError

SESSION = {
    "id": "session-1",
    "title": "Career check-in",
    "scheduled_start": "2026-01-15T20:30:00Z",
    "timezone": "America/New_York",
    "meeting_link": "https://meet.example.com/abc",
    "host": {"id": "host-1", "full_name": "Maria Mentor", "email": "maria@example.com"},
    "attendee": {"id": "user-1", "full_name": "Sam Seeker", "email": "sam@example.com"},
}
USER = {"id": "user-1", "full_name": "Sam Seeker", "email": "sam@example.com"}


def _reminder(reminder_id: str, reminder_type: str = "24_hours") -> dict:
    return {
        "id": reminder_id,
        "session_id": "session-1",
        "user_id": "user-1",
        "reminder_type": reminder_type,
    }


class TestReminderEmail:
    """리마인더 메일 내용 테스트"""

    def test_format_in_session_timezone(self):
        date_text, time_text = format_session_time("2026-01-15T20:30:00Z", "America/New_York")

        assert date_text == "Thursday, January 15, 2026"
        assert time_text == "3:30 PM EST"

    def test_unknown_timezone_falls_back_to_utc(self):
        _, time_text = format_session_time("2026-01-15T20:30:00+00:00", "Mars/Base")

        assert time_text == "8:30 PM UTC"

    @pytest.mark.parametrize("reminder_type,phrase", [("24_hours", "tomorrow"), ("1_hour", "in 1 hour")])
    def test_subject(self, reminder_type, phrase):
        subject, html = session_reminder_email(
            "Sam", "Career check-in", "Maria", reminder_type, "date", "time", None
        )

        assert subject == f'Reminder: "Career check-in" {phrase}'
        assert "Join Meeting" not in html


class TestSweepReminders:
    """sweep_reminders 함수 테스트"""

    @pytest.mark.asyncio
    async def test_sends_and_marks(self):
        with (
            patch(
                "app.domain.reminders.service.select_many",
                new_callable=AsyncMock,
                return_value=[_reminder("r1")],
            ) as mock_many,
            patch(
                "app.domain.reminders.service.select_one",
                new_callable=AsyncMock,
                side_effect=[SESSION, USER],
            ),
            patch(
                "app.domain.reminders.service.send_email", new_callable=AsyncMock, return_value=True
            ) as mock_send,
            patch("app.domain.reminders.service.update", new_callable=AsyncMock) as mock_update,
            patch("app.domain.reminders.service.insert", new_callable=AsyncMock) as mock_insert,
        ):
            result = await sweep_reminders()

        assert result == {"success": True, "processed": 1, "errors": 0, "total": 1}
        assert mock_many.call_args.kwargs["limit"] == 50
        assert mock_many.call_args.kwargs["order_by"] == "reminder_time"
        to, subject, html = mock_send.call_args.args
        assert to == "sam@example.com"
        assert "tomorrow" in subject
        assert "Maria Mentor" in html
        mock_update.assert_awaited_once_with(
            "session_reminders", {"email_sent": True, "in_app_sent": True}, {"id": "r1"}
        )
        notification = mock_insert.call_args.args[1]
        assert notification["type"] == "session_reminder"
        assert notification["message"] == "Your session with Maria Mentor is tomorrow"

    @pytest.mark.asyncio
    async def test_failed_send_counts_as_error(self):
        with (
            patch(
                "app.domain.reminders.service.select_many",
                new_callable=AsyncMock,
                return_value=[_reminder("r1"), _reminder("r2", "1_hour")],
            ),
            patch(
                "app.domain.reminders.service.select_one",
                new_callable=AsyncMock,
                side_effect=[SESSION, USER, SESSION, USER],
            ),
            patch(
                "app.domain.reminders.service.send_email",
                new_callable=AsyncMock,
                side_effect=[False, True],
            ),
            patch("app.domain.reminders.service.update", new_callable=AsyncMock) as mock_update,
            patch("app.domain.reminders.service.insert", new_callable=AsyncMock),
        ):
            result = await sweep_reminders()

        assert result == {"success": True, "processed": 1, "errors": 1, "total": 2}
        assert mock_update.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_session_is_skipped(self):
        with (
            patch(
                "app.domain.reminders.service.select_many",
                new_callable=AsyncMock,
                return_value=[_reminder("r1")],
            ),
            patch("app.domain.reminders.service.select_one", new_callable=AsyncMock, return_value=None),
            patch("app.domain.reminders.service.send_email", new_callable=AsyncMock) as mock_send,
        ):
            result = await sweep_reminders()

        assert result == {"success": True, "processed": 0, "errors": 0, "total": 1}
        mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_error_continues(self):
        """한 리마인더의 DB 오류는 나머지 처리에 영향 없음"""
        with (
            patch(
                "app.domain.reminders.service.select_many",
                new_callable=AsyncMock,
                return_value=[_reminder("r1"), _reminder("r2")],
            ),
            patch(
                "app.domain.reminders.service.select_one",
                new_callable=AsyncMock,
                side_effect=[SupabaseError("timeout"), SESSION, USER],
            ),
            patch("app.domain.reminders.service.send_email", new_callable=AsyncMock, return_value=True),
            patch("app.domain.reminders.service.update", new_callable=AsyncMock),
            patch("app.domain.reminders.service.insert", new_callable=AsyncMock),
        ):
            result = await sweep_reminders()

        assert result["processed"] == 1
        assert result["errors"] == 1

    @pytest.mark.asyncio
    async def test_listing_failure(self):
        with patch(
            "app.domain.reminders.service.select_many",
            new_callable=AsyncMock,
            side_effect=SupabaseError("down"),
        ):
            with pytest.raises(ServiceUnavailable):
                await sweep_reminders()
