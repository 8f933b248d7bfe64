"""플랜 API 스키마."""

from pydantic import BaseModel, ConfigDict, Field

from app.domain.plan.schemas import CanvasData, Milestone


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateMilestonesRequest(_ApiModel):
    plan_id: str = Field(alias="planId", min_length=1)
    canvas_data: CanvasData = Field(alias="canvasData")


class GenerateMilestonesResponse(_ApiModel):
    success: bool = True
    milestones: list[Milestone]


class CanvasSuggestionRequest(_ApiModel):
    question_number: int = Field(alias="questionNumber", ge=1, le=9)
    question_text: str = Field(alias="questionText", min_length=1)
    current_role: str = Field(default="", alias="currentRole")
    target_role: str = Field(default="", alias="targetRole")
    previous_answers: dict[str, str] | None = Field(default=None, alias="previousAnswers")


class CanvasSuggestionResponse(_ApiModel):
    suggestion: str
