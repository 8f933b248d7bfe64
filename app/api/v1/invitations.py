from fastapi import APIRouter, Depends

from app.api.deps import get_current_identity
from app.api.v1.schemas.invitations import (
    MentorTokenRequest,
    PlanTokenRequest,
    SendInvitationResponse,
    SendMentorInvitationRequest,
    SendPlanInvitationRequest,
)
from app.domain.access.schemas import Identity
from app.domain.invitation import service

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post("/mentor", response_model=SendInvitationResponse)
async def send_mentor_invitation(
    body: SendMentorInvitationRequest,
    identity: Identity = Depends(get_current_identity),
) -> SendInvitationResponse:
    await service.send_mentor_invitation(
        identity,
        mentor_email=body.mentor_email,
        personal_message=body.personal_message,
        inviter_name=body.inviter_name,
    )
    return SendInvitationResponse()


@router.post("/mentor/accept")
async def accept_mentor_invitation(
    body: MentorTokenRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    result = await service.accept_mentor_invitation(identity, body.token)
    return {"success": True, **result}


@router.post("/mentor/decline")
async def decline_mentor_invitation(
    body: MentorTokenRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    result = await service.decline_mentor_invitation(identity, body.token)
    return {"success": True, **result}


@router.post("/plan", response_model=SendInvitationResponse)
async def send_plan_invitation(
    body: SendPlanInvitationRequest,
    identity: Identity = Depends(get_current_identity),
) -> SendInvitationResponse:
    await service.send_plan_invitation(
        identity,
        plan_id=body.plan_id,
        collaborator_email=body.collaborator_email,
        role=body.role,
        personal_message=body.personal_message,
        inviter_name=body.inviter_name,
        plan_title=body.plan_title,
    )
    return SendInvitationResponse()


@router.post("/plan/accept")
async def accept_plan_invitation(
    body: PlanTokenRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    result = await service.accept_plan_invitation(identity, body.token, body.plan_id)
    return {"success": True, **result}


@router.post("/plan/decline")
async def decline_plan_invitation(
    body: PlanTokenRequest,
    identity: Identity = Depends(get_current_identity),
) -> dict:
    result = await service.decline_plan_invitation(identity, body.token, body.plan_id)
    return {"success": True, **result}
