"""협업 초대 API 스키마."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SendMentorInvitationRequest(_ApiModel):
    mentor_email: str = Field(alias="mentorEmail", min_length=3)
    personal_message: str | None = Field(default=None, alias="personalMessage", max_length=2000)
    inviter_name: str | None = Field(default=None, alias="inviterName")


class SendPlanInvitationRequest(_ApiModel):
    plan_id: str = Field(alias="planId", min_length=1)
    collaborator_email: str = Field(alias="collaboratorEmail", min_length=3)
    role: Literal["mentor", "accountability_partner"]
    personal_message: str | None = Field(default=None, alias="personalMessage", max_length=2000)
    inviter_name: str | None = Field(default=None, alias="inviterName")
    plan_title: str | None = Field(default=None, alias="planTitle")


class SendInvitationResponse(_ApiModel):
    success: bool = True
    message: str = "Invitation sent"


class MentorTokenRequest(_ApiModel):
    token: str = Field(min_length=1)


class PlanTokenRequest(_ApiModel):
    token: str = Field(min_length=1)
    plan_id: str = Field(alias="planId", min_length=1)
