"""협업 초대 테스트 (토큰, 상태 머신, 서비스)"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from app.core.exceptions import Conflict, Expired, Forbidden, InvalidInput, NotFound
from app.domain.invitation import service
from app.domain.invitation.state import (
    Decision,
    InvitationView,
    evaluate_acceptance,
    evaluate_decline,
    is_expired,
)
from app.domain.invitation.tokens import generate_token, hash_token, verify_token
from app.infra.supabase.client import SupabaseError
from tests.factories import OTHER_USER_ID, USER_ID

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
TTL_DAYS = 7


def _view(status="pending", email="jane.doe@example.com", age_days=1, acceptor_id=None):
    return InvitationView(
        status=status,
        email=email,
        created_at=NOW - timedelta(days=age_days),
        acceptor_id=acceptor_id,
    )


class TestTokens:
    """초대 토큰 테스트"""

    def test_generate_token(self):
        token = generate_token()

        assert len(token) == 64
        assert token != generate_token()

    def test_hash_is_keyed(self):
        assert hash_token("abc", secret="one") != hash_token("abc", secret="two")

    def test_verify(self):
        stored = hash_token("abc", secret="s")

        assert verify_token("abc", stored, secret="s") is True
        assert verify_token("abd", stored, secret="s") is False
        assert verify_token("", stored, secret="s") is False

    def test_stored_hash_is_not_a_token(self):
        """저장된 해시를 토큰으로 제시해도 일치하지 않음"""
        stored = hash_token("abc", secret="s")

        assert verify_token(stored, stored, secret="s") is False


class TestStateMachine:
    """초대 상태 머신 테스트"""

    def test_pending_transitions(self, identity):
        assert evaluate_acceptance(_view(), identity, NOW, TTL_DAYS) == Decision.TRANSITION

    def test_email_match_ignores_case(self, identity):
        view = _view(email="JANE.DOE@EXAMPLE.COM")

        assert evaluate_acceptance(view, identity, NOW, TTL_DAYS) == Decision.TRANSITION

    def test_same_user_accepting_again_is_idempotent(self, identity):
        view = _view(status="accepted", acceptor_id=USER_ID)

        assert evaluate_acceptance(view, identity, NOW, TTL_DAYS) == Decision.ALREADY_DONE

    def test_accepted_by_other_user(self, identity):
        view = _view(status="accepted", acceptor_id=OTHER_USER_ID)

        with pytest.raises(Conflict):
            evaluate_acceptance(view, identity, NOW, TTL_DAYS)

    def test_declined_is_terminal(self, identity):
        with pytest.raises(Conflict):
            evaluate_acceptance(_view(status="declined"), identity, NOW, TTL_DAYS)

    def test_email_mismatch(self, identity):
        with pytest.raises(Forbidden):
            evaluate_acceptance(_view(email="other@example.com"), identity, NOW, TTL_DAYS)

    def test_email_checked_before_expiry(self, identity):
        """만료된 초대라도 이메일 불일치가 먼저 보고됨"""
        view = _view(email="other@example.com", age_days=30)

        with pytest.raises(Forbidden):
            evaluate_acceptance(view, identity, NOW, TTL_DAYS)

    def test_expired(self, identity):
        with pytest.raises(Expired) as exc_info:
            evaluate_acceptance(_view(age_days=8), identity, NOW, TTL_DAYS)

        assert exc_info.value.status_code == 410

    def test_is_expired_boundary(self):
        created = NOW - timedelta(days=TTL_DAYS)

        assert is_expired(created, NOW, TTL_DAYS) is False
        assert is_expired(created, NOW + timedelta(seconds=1), TTL_DAYS) is True

    def test_naive_created_at_is_utc(self):
        view = InvitationView(status="pending", email="a@b.c", created_at=datetime(2026, 1, 1))

        assert view.created_at.tzinfo == timezone.utc

    def test_decline(self, identity):
        assert evaluate_decline(_view(), identity) == Decision.TRANSITION
        assert evaluate_decline(_view(status="declined"), identity) == Decision.ALREADY_DONE

    def test_decline_accepted(self, identity):
        with pytest.raises(Conflict):
            evaluate_decline(_view(status="accepted", acceptor_id=USER_ID), identity)


def _plan_row(**overrides):
    row = {
        "id": "inv-1",
        "plan_id": "plan-1",
        "collaborator_email": "jane.doe@example.com",
        "collaborator_id": None,
        "role": "mentor",
        "status": "pending",
        "created_at": datetime.now(timezone.utc).isoformat(),
        "invitation_token_hash": hash_token("raw-token"),
    }
    row.update(overrides)
    return row


def _mentor_row(**overrides):
    row = {
        "id": "inv-2",
        "job_seeker_id": OTHER_USER_ID,
        "mentor_email": "jane.doe@example.com",
        "mentor_id": None,
        "status": "pending",
        "created_at": datetime.now(timezone.utc).isoformat(),
        "invitation_token_hash": hash_token("raw-token"),
    }
    row.update(overrides)
    return row


class TestSendInvitation:
    """초대 발송 테스트"""

    @pytest.mark.asyncio
    async def test_send_plan_invitation(self, identity):
        with (
            patch(
                "app.domain.invitation.service.ensure_plan_owner",
                new_callable=AsyncMock,
                return_value={"id": "plan-1", "user_id": USER_ID, "title": "My Plan"},
            ),
            patch(
                "app.domain.invitation.service.insert",
                new_callable=AsyncMock,
                return_value={"id": "inv-1"},
            ) as mock_insert,
            patch(
                "app.domain.invitation.service.send_email",
                new_callable=AsyncMock,
                return_value=True,
            ) as mock_send,
        ):
            result = await service.send_plan_invitation(
                identity, "plan-1", " Mentor@Example.COM ", "mentor", inviter_name="Jane"
            )

        assert result is None
        row = mock_insert.call_args.args[1]
        assert row["collaborator_email"] == "mentor@example.com"
        assert row["status"] == "pending"
        assert len(row["invitation_token_hash"]) == 64

        to, subject, html = mock_send.call_args.args
        assert to == "mentor@example.com"
        assert "Jane" in subject
        assert "My Plan" in html
        # 메일에는 원문 토큰, DB에는 해시만 저장
        assert row["invitation_token_hash"] not in html

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_request(self, identity):
        with (
            patch("app.domain.invitation.service.insert", new_callable=AsyncMock, return_value={}),
            patch(
                "app.domain.invitation.service.send_email",
                new_callable=AsyncMock,
                return_value=False,
            ),
        ):
            await service.send_mentor_invitation(identity, "mentor@example.com", inviter_name="Jane")

    @pytest.mark.asyncio
    async def test_duplicate_invitation(self, identity):
        with patch(
            "app.domain.invitation.service.insert",
            new_callable=AsyncMock,
            side_effect=SupabaseError("duplicate key", code="23505"),
        ):
            with pytest.raises(Conflict):
                await service.send_mentor_invitation(identity, "mentor@example.com", inviter_name="J")

    @pytest.mark.asyncio
    async def test_cannot_invite_self(self, identity):
        with pytest.raises(InvalidInput):
            await service.send_mentor_invitation(identity, "JANE.DOE@example.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["", "no-at-sign", "@example.com", "user@"])
    async def test_invalid_email(self, identity, email):
        with pytest.raises(InvalidInput):
            await service.send_mentor_invitation(identity, email)

    @pytest.mark.asyncio
    async def test_invalid_role(self, identity):
        with pytest.raises(InvalidInput):
            await service.send_plan_invitation(identity, "plan-1", "a@b.com", "owner")


class TestAcceptPlanInvitation:
    """플랜 초대 수락 테스트"""

    @pytest.mark.asyncio
    async def test_accept(self, identity):
        row = _plan_row()
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                side_effect=[row, {"title": "My Plan"}],
            ) as mock_select,
            patch(
                "app.domain.invitation.service.update",
                new_callable=AsyncMock,
                return_value=[{**row, "status": "accepted"}],
            ) as mock_update,
        ):
            result = await service.accept_plan_invitation(identity, "raw-token", "plan-1")

        assert result == {
            "planId": "plan-1",
            "planTitle": "My Plan",
            "role": "mentor",
            "alreadyAccepted": False,
        }
        lookup_filters = mock_select.call_args_list[0].args[1]
        assert lookup_filters == {"invitation_token_hash": hash_token("raw-token"), "plan_id": "plan-1"}
        values, filters = mock_update.call_args.args[1:]
        assert values["status"] == "accepted"
        assert values["collaborator_id"] == USER_ID
        assert filters == {"id": "inv-1", "status": "pending"}

    @pytest.mark.asyncio
    async def test_already_accepted_by_same_user(self, identity):
        row = _plan_row(status="accepted", collaborator_id=USER_ID)
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                side_effect=[row, None],
            ),
            patch("app.domain.invitation.service.update", new_callable=AsyncMock) as mock_update,
        ):
            result = await service.accept_plan_invitation(identity, "raw-token", "plan-1")

        assert result["alreadyAccepted"] is True
        assert result["planTitle"] == "Career Plan"
        mock_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_race_to_other_user(self, identity):
        """조건부 갱신이 실패하면 다시 읽어 상태 판단"""
        row = _plan_row()
        taken = _plan_row(status="accepted", collaborator_id=OTHER_USER_ID)
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                side_effect=[row, taken],
            ),
            patch("app.domain.invitation.service.update", new_callable=AsyncMock, return_value=[]),
        ):
            with pytest.raises(Conflict):
                await service.accept_plan_invitation(identity, "raw-token", "plan-1")

    @pytest.mark.asyncio
    async def test_lost_race_to_same_user(self, identity):
        """동시 수락 경쟁에서 같은 사용자의 다른 요청이 먼저 반영된 경우"""
        row = _plan_row()
        done = _plan_row(status="accepted", collaborator_id=USER_ID)
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                side_effect=[row, done, {"title": "My Plan"}],
            ),
            patch("app.domain.invitation.service.update", new_callable=AsyncMock, return_value=[]),
        ):
            result = await service.accept_plan_invitation(identity, "raw-token", "plan-1")

        assert result["alreadyAccepted"] is True

    @pytest.mark.asyncio
    async def test_unknown_token(self, identity):
        with patch(
            "app.domain.invitation.service.select_one", new_callable=AsyncMock, return_value=None
        ):
            with pytest.raises(NotFound):
                await service.accept_plan_invitation(identity, "wrong", "plan-1")

    @pytest.mark.asyncio
    async def test_expired(self, identity):
        created = (datetime.now(timezone.utc) - timedelta(days=8)).isoformat()
        with patch(
            "app.domain.invitation.service.select_one",
            new_callable=AsyncMock,
            return_value=_plan_row(created_at=created),
        ):
            with pytest.raises(Expired):
                await service.accept_plan_invitation(identity, "raw-token", "plan-1")


class TestAcceptMentorInvitation:
    """멘토 초대 수락 테스트"""

    @pytest.mark.asyncio
    async def test_accept_via_rpc(self, identity):
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                return_value=_mentor_row(),
            ),
            patch(
                "app.domain.invitation.service.rpc", new_callable=AsyncMock, return_value=True
            ) as mock_rpc,
        ):
            result = await service.accept_mentor_invitation(identity, "raw-token")

        assert result == {"jobSeekerId": OTHER_USER_ID, "alreadyAccepted": False}
        mock_rpc.assert_awaited_once_with(
            "accept_mentor_invitation", {"p_invitation_id": "inv-2", "p_mentor_id": USER_ID}
        )

    @pytest.mark.asyncio
    async def test_lost_race_to_same_user(self, identity):
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                side_effect=[_mentor_row(), _mentor_row(status="accepted", mentor_id=USER_ID)],
            ),
            patch("app.domain.invitation.service.rpc", new_callable=AsyncMock, return_value=False),
        ):
            result = await service.accept_mentor_invitation(identity, "raw-token")

        assert result == {"jobSeekerId": OTHER_USER_ID, "alreadyAccepted": True}

    @pytest.mark.asyncio
    async def test_duplicate_mentor_access(self, identity):
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                return_value=_mentor_row(),
            ),
            patch(
                "app.domain.invitation.service.rpc",
                new_callable=AsyncMock,
                side_effect=SupabaseError("duplicate key", code="23505"),
            ),
        ):
            with pytest.raises(Conflict):
                await service.accept_mentor_invitation(identity, "raw-token")

    @pytest.mark.asyncio
    async def test_wrong_account(self, other_identity):
        with patch(
            "app.domain.invitation.service.select_one",
            new_callable=AsyncMock,
            return_value=_mentor_row(),
        ):
            with pytest.raises(Forbidden):
                await service.accept_mentor_invitation(other_identity, "raw-token")


class TestDeclineInvitation:
    """초대 거절 테스트"""

    @pytest.mark.asyncio
    async def test_decline_plan_invitation(self, identity):
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                return_value=_plan_row(),
            ),
            patch(
                "app.domain.invitation.service.update",
                new_callable=AsyncMock,
                return_value=[{"id": "inv-1"}],
            ) as mock_update,
        ):
            result = await service.decline_plan_invitation(identity, "raw-token", "plan-1")

        assert result == {"planId": "plan-1"}
        assert mock_update.call_args.args[1] == {"status": "declined"}

    @pytest.mark.asyncio
    async def test_decline_twice_is_idempotent(self, identity):
        with (
            patch(
                "app.domain.invitation.service.select_one",
                new_callable=AsyncMock,
                return_value=_mentor_row(status="declined"),
            ),
            patch("app.domain.invitation.service.update", new_callable=AsyncMock) as mock_update,
        ):
            result = await service.decline_mentor_invitation(identity, "raw-token")

        assert result == {"jobSeekerId": OTHER_USER_ID}
        mock_update.assert_not_called()
