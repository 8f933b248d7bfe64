from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.core.config import settings
from app.core.exceptions import Conflict, InvalidInput, NotFound, ServiceUnavailable
from app.core.logging import get_logger
from app.domain.access.ownership import ensure_plan_owner
from app.domain.access.schemas import Identity
from app.domain.invitation.emails import (
    acceptance_link,
    mentor_invitation_email,
    plan_invitation_email,
)
from app.domain.invitation.state import (
    Decision,
    InvitationStatus,
    InvitationView,
    evaluate_acceptance,
    evaluate_decline,
)
from app.domain.invitation.tokens import generate_token, hash_token, verify_token
from app.infra.email.client import send_email
from app.infra.supabase.client import SupabaseError, insert, rpc, select_one, update

logger = get_logger(__name__)

PLAN_ROLES = ("mentor", "accountability_partner")
DEFAULT_PLAN_TITLE = "Career Plan"
ACCEPT_MENTOR_RPC = "accept_mentor_invitation"


@dataclass(frozen=True)
class InvitationTable:
    """초대 테이블별 컬럼 매핑"""

    name: str
    email_column: str
    acceptor_column: str

    def view(self, row: dict) -> InvitationView:
        return InvitationView(
            status=row["status"],
            email=row[self.email_column],
            created_at=row["created_at"],
            acceptor_id=row.get(self.acceptor_column),
        )


MENTOR_INVITATIONS = InvitationTable("mentor_invitations", "mentor_email", "mentor_id")
PLAN_INVITATIONS = InvitationTable("plan_collaborators", "collaborator_email", "collaborator_id")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise InvalidInput(detail=f"email={email}", message="이메일 주소가 올바르지 않습니다")
    return email


async def _inviter_name(identity: Identity, override: str | None) -> str:
    if override:
        return override
    try:
        profile = await select_one("profiles", {"id": identity.id}, columns="full_name")
    except SupabaseError as e:
        logger.warning("프로필 조회 실패, 이메일로 대체 error=%s", e)
        profile = None
    return (profile or {}).get("full_name") or identity.email or "A Career Playbook user"


async def _insert_invitation(table: InvitationTable, row: dict[str, Any]) -> dict:
    try:
        return await insert(table.name, row)
    except SupabaseError as e:
        if e.is_unique_violation:
            raise Conflict(detail=str(e), message="이미 이 이메일로 초대를 보냈습니다") from e
        raise ServiceUnavailable(detail=str(e)) from e


async def _find_by_token(table: InvitationTable, token: str, filters: dict[str, Any]) -> dict:
    if not token:
        raise InvalidInput(detail="토큰 없음", message="초대 토큰이 필요합니다")

    token_hash = hash_token(token)
    try:
        row = await select_one(table.name, {"invitation_token_hash": token_hash, **filters})
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e)) from e

    if row is None or not verify_token(token, row.get("invitation_token_hash", "")):
        raise NotFound(detail=f"table={table.name}", message="유효하지 않은 초대입니다")
    return row


async def _reload(table: InvitationTable, invitation_id: str) -> dict:
    try:
        row = await select_one(table.name, {"id": invitation_id})
    except SupabaseError as e:
        raise ServiceUnavailable(detail=str(e)) from e
    if row is None:
        raise NotFound(detail=f"invitation={invitation_id}", message="유효하지 않은 초대입니다")
    return row


async def send_plan_invitation(
    identity: Identity,
    plan_id: str,
    collaborator_email: str,
    role: str,
    personal_message: str | None = None,
    inviter_name: str | None = None,
    plan_title: str | None = None,
) -> None:
    """플랜 협업 초대 생성 후 메일 발송 (토큰은 응답에 포함하지 않음)"""
    if role not in PLAN_ROLES:
        raise InvalidInput(detail=f"role={role}", message="role은 mentor 또는 accountability_partner여야 합니다")
    email = _normalize_email(collaborator_email)
    plan = await ensure_plan_owner(identity, plan_id, columns="id, user_id, title")

    token = generate_token()
    await _insert_invitation(
        PLAN_INVITATIONS,
        {
            "plan_id": plan_id,
            "collaborator_email": email,
            "role": role,
            "status": InvitationStatus.PENDING.value,
            "personal_message": personal_message,
            "invitation_token_hash": hash_token(token),
        },
    )
    logger.info("플랜 초대 생성 plan_id=%s role=%s", plan_id, role)

    subject, html = plan_invitation_email(
        inviter_name=await _inviter_name(identity, inviter_name),
        inviter_email=identity.email,
        role=role,
        plan_title=plan_title or plan.get("title") or DEFAULT_PLAN_TITLE,
        personal_message=personal_message,
        link=acceptance_link("accept-plan-invitation", token=token, plan=plan_id),
    )
    await send_email(email, subject, html)


async def send_mentor_invitation(
    identity: Identity,
    mentor_email: str,
    personal_message: str | None = None,
    inviter_name: str | None = None,
) -> None:
    """멘토 초대 생성 후 메일 발송"""
    email = _normalize_email(mentor_email)
    if email == identity.normalized_email:
        raise InvalidInput(detail="자기 자신 초대", message="본인을 멘토로 초대할 수 없습니다")

    token = generate_token()
    await _insert_invitation(
        MENTOR_INVITATIONS,
        {
            "job_seeker_id": identity.id,
            "mentor_email": email,
            "status": InvitationStatus.PENDING.value,
            "invitation_token_hash": hash_token(token),
        },
    )
    logger.info("멘토 초대 생성")

    subject, html = mentor_invitation_email(
        inviter_name=await _inviter_name(identity, inviter_name),
        inviter_email=identity.email,
        personal_message=personal_message,
        link=acceptance_link("accept-invitation", token=token),
    )
    await send_email(email, subject, html)


async def accept_plan_invitation(identity: Identity, token: str, plan_id: str) -> dict:
    """
    플랜 협업 초대 수락

    status = 'pending' 조건부 갱신으로 전이하고, 경쟁으로 갱신되지 않았으면
    다시 읽어서 상태 머신을 한 번 더 적용한다.
    """
    table = PLAN_INVITATIONS
    row = await _find_by_token(table, token, {"plan_id": plan_id})
    decision = evaluate_acceptance(table.view(row), identity, _now(), settings.invitation_ttl_days)

    if decision == Decision.TRANSITION:
        try:
            updated = await update(
                table.name,
                {
                    "status": InvitationStatus.ACCEPTED.value,
                    "collaborator_id": identity.id,
                    "accepted_at": _now().isoformat(),
                },
                {"id": row["id"], "status": InvitationStatus.PENDING.value},
            )
        except SupabaseError as e:
            raise ServiceUnavailable(detail=str(e)) from e

        if not updated:
            row = await _reload(table, row["id"])
            decision = evaluate_acceptance(table.view(row), identity, _now(), settings.invitation_ttl_days)
        logger.info("플랜 초대 수락 plan_id=%s", plan_id)
    else:
        logger.info("이미 수락한 플랜 초대 plan_id=%s", plan_id)

    try:
        plan = await select_one("ninety_day_plans", {"id": plan_id}, columns="title")
    except SupabaseError as e:
        logger.warning("플랜 제목 조회 실패 plan_id=%s error=%s", plan_id, e)
        plan = None

    return {
        "planId": row["plan_id"],
        "planTitle": (plan or {}).get("title") or DEFAULT_PLAN_TITLE,
        "role": row.get("role"),
        "alreadyAccepted": decision == Decision.ALREADY_DONE,
    }


async def accept_mentor_invitation(identity: Identity, token: str) -> dict:
    """
    멘토 초대 수락

    상태 갱신과 mentor_access 생성은 accept_mentor_invitation 프로시저 안에서
    하나의 트랜잭션으로 처리된다.
    """
    table = MENTOR_INVITATIONS
    row = await _find_by_token(table, token, {})
    decision = evaluate_acceptance(table.view(row), identity, _now(), settings.invitation_ttl_days)

    if decision == Decision.TRANSITION:
        try:
            transitioned = await rpc(
                ACCEPT_MENTOR_RPC,
                {"p_invitation_id": row["id"], "p_mentor_id": identity.id},
            )
        except SupabaseError as e:
            if e.is_unique_violation:
                raise Conflict(detail=str(e), message="이미 이 사용자의 멘토로 등록되어 있습니다") from e
            raise ServiceUnavailable(detail=str(e)) from e

        if not transitioned:
            row = await _reload(table, row["id"])
            decision = evaluate_acceptance(table.view(row), identity, _now(), settings.invitation_ttl_days)
        logger.info("멘토 초대 수락")

    return {
        "jobSeekerId": row["job_seeker_id"],
        "alreadyAccepted": decision == Decision.ALREADY_DONE,
    }


async def _decline(table: InvitationTable, identity: Identity, token: str, filters: dict) -> dict:
    row = await _find_by_token(table, token, filters)
    decision = evaluate_decline(table.view(row), identity)

    if decision == Decision.TRANSITION:
        try:
            updated = await update(
                table.name,
                {"status": InvitationStatus.DECLINED.value},
                {"id": row["id"], "status": InvitationStatus.PENDING.value},
            )
        except SupabaseError as e:
            raise ServiceUnavailable(detail=str(e)) from e
        if not updated:
            row = await _reload(table, row["id"])
            evaluate_decline(table.view(row), identity)
        logger.info("초대 거절 table=%s", table.name)
    return row


async def decline_plan_invitation(identity: Identity, token: str, plan_id: str) -> dict:
    row = await _decline(PLAN_INVITATIONS, identity, token, {"plan_id": plan_id})
    return {"planId": row["plan_id"]}


async def decline_mentor_invitation(identity: Identity, token: str) -> dict:
    row = await _decline(MENTOR_INVITATIONS, identity, token, {})
    return {"jobSeekerId": row["job_seeker_id"]}
