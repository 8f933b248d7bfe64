"""
초대 상태 머신

pending -> accepted | declined. accepted/declined는 종료 상태다.
만료는 저장된 상태가 아니라 수락 시점에 created_at + TTL로 계산한다.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, field_validator

from app.core.exceptions import Conflict, Expired, Forbidden
from app.domain.access.schemas import Identity


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Decision(str, Enum):
    TRANSITION = "transition"
    ALREADY_DONE = "already_done"


class InvitationView(BaseModel):
    """상태 판단에 필요한 초대 행의 공통 부분"""

    status: InvitationStatus
    email: str
    created_at: datetime
    acceptor_id: str | None = None

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


def is_expired(created_at: datetime, now: datetime, ttl_days: int) -> bool:
    return created_at + timedelta(days=ttl_days) < now


def _ensure_email_match(invitation: InvitationView, identity: Identity) -> None:
    if not identity.normalized_email or identity.normalized_email != invitation.email.strip().lower():
        raise Forbidden(
            detail="초대 이메일 불일치",
            message="초대받은 이메일 계정으로 로그인해주세요",
        )


def evaluate_acceptance(
    invitation: InvitationView,
    identity: Identity,
    now: datetime,
    ttl_days: int,
) -> Decision:
    """
    수락 가능 여부 판단

    - 같은 사용자가 이미 수락: ALREADY_DONE (멱등)
    - 다른 사용자가 수락했거나 거절된 초대: Conflict
    - 이메일 불일치(대소문자 무시): Forbidden
    - 만료: Expired
    """
    if invitation.status == InvitationStatus.ACCEPTED:
        if invitation.acceptor_id == identity.id:
            return Decision.ALREADY_DONE
        raise Conflict(detail="다른 사용자가 수락함", message="이미 다른 사용자가 수락한 초대입니다")

    if invitation.status == InvitationStatus.DECLINED:
        raise Conflict(detail="거절된 초대", message="거절된 초대입니다")

    _ensure_email_match(invitation, identity)

    if is_expired(invitation.created_at, now, ttl_days):
        raise Expired(detail=f"created_at={invitation.created_at.isoformat()}")

    return Decision.TRANSITION


def evaluate_decline(invitation: InvitationView, identity: Identity) -> Decision:
    """거절 가능 여부 판단 - 재거절은 멱등, 수락된 초대는 Conflict"""
    _ensure_email_match(invitation, identity)

    if invitation.status == InvitationStatus.DECLINED:
        return Decision.ALREADY_DONE
    if invitation.status == InvitationStatus.ACCEPTED:
        raise Conflict(detail="이미 수락된 초대", message="이미 수락된 초대입니다")
    return Decision.TRANSITION
