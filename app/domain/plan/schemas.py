from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

MILESTONE_WEEKS = 12
MIN_MILESTONES = 10
SUBTASKS_PER_MILESTONE = 3
MAX_TEXT_LENGTH = 200
DEFAULT_SUBTASK = "Set and track goals"
DEFAULT_SUBTASKS = ["Define weekly objectives", "Track progress", "Review and adjust"]

Category = Literal["foundation", "skill_development", "networking", "job_search"]
CATEGORIES: tuple[str, ...] = ("foundation", "skill_development", "networking", "job_search")

CANVAS_SECTIONS: list[tuple[str, str]] = [
    ("section_1_helpers", "Who I Help"),
    ("section_2_activities", "Activities I Do"),
    ("section_3_value", "Value I Provide"),
    ("section_4_interactions", "How I Interact"),
    ("section_5_convince", "How I Convince"),
    ("section_6_skills", "Skills I Need"),
    ("section_7_motivation", "What Motivates Me"),
    ("section_8_sacrifices", "Sacrifices I Will Make"),
    ("section_9_outcomes", "Outcomes I Want"),
]


def category_for_week(week: int) -> str:
    """주차별 기본 카테고리 (1-3, 4-6, 7-9, 10-12)"""
    if week <= 3:
        return "foundation"
    if week <= 6:
        return "skill_development"
    if week <= 9:
        return "networking"
    return "job_search"


class CanvasData(BaseModel):
    """커리어 캔버스 9개 섹션"""

    section_1_helpers: str | None = None
    section_2_activities: str | None = None
    section_3_value: str | None = None
    section_4_interactions: str | None = None
    section_5_convince: str | None = None
    section_6_skills: str | None = None
    section_7_motivation: str | None = None
    section_8_sacrifices: str | None = None
    section_9_outcomes: str | None = None


def build_canvas_context(canvas: CanvasData) -> str:
    """비어 있지 않은 섹션만 "라벨: 값" 형태로 연결"""
    values = canvas.model_dump()
    lines = [
        f"{label}: {values[field].strip()}"
        for field, label in CANVAS_SECTIONS
        if values.get(field) and values[field].strip()
    ]
    return "\n\n".join(lines)


class MilestonePromptInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    canvas_context: str = Field(alias="canvasContext")


class CanvasSuggestionInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_number: int = Field(alias="questionNumber")
    question_text: str = Field(alias="questionText")
    current_role: str = Field(alias="currentRole")
    target_role: str = Field(alias="targetRole")
    previous_answers_context: str = Field(default="", alias="previousAnswersContext")


class Subtask(BaseModel):
    text: str
    completed: bool = False


class Milestone(BaseModel):
    week: int
    title: str
    subtasks: list[Subtask]
    category: Category


def _normalize_milestone(raw, index: int) -> dict:
    raw = raw if isinstance(raw, dict) else {}
    week = raw.get("week")
    if isinstance(week, bool) or not isinstance(week, int) or week < 1:
        week = index + 1

    raw_subtasks = raw.get("subtasks")
    if not isinstance(raw_subtasks, list):
        raw_subtasks = []

    subtasks = []
    for item in raw_subtasks[:SUBTASKS_PER_MILESTONE]:
        text = item.get("text") if isinstance(item, dict) else item
        if text is None or not str(text).strip():
            text = DEFAULT_SUBTASK
        subtasks.append({"text": str(text)[:MAX_TEXT_LENGTH], "completed": False})
    while len(subtasks) < SUBTASKS_PER_MILESTONE:
        subtasks.append({"text": DEFAULT_SUBTASK, "completed": False})

    category = raw.get("category")
    if category not in CATEGORIES:
        category = category_for_week(week)

    title = str(raw.get("title") or f"Week {index + 1}")[:MAX_TEXT_LENGTH]
    return {"week": week, "title": title, "subtasks": subtasks, "category": category}


def _padding_milestone(week: int) -> dict:
    return {
        "week": week,
        "title": f"Week {week} Goals",
        "subtasks": [{"text": text, "completed": False} for text in DEFAULT_SUBTASKS],
        "category": category_for_week(week),
    }


class MilestonePlan(BaseModel):
    """
    12주 마일스톤 계획

    10개 미만이면 실패, 12개 초과분은 버리고 부족분은 기본 마일스톤으로 채운다.
    각 마일스톤은 정확히 3개의 하위 작업을 가진다.
    """

    milestones: list[Milestone]

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data):
        if not isinstance(data, dict):
            raise ValueError("객체가 아닙니다")
        raw = data.get("milestones")
        if not isinstance(raw, list) or len(raw) < MIN_MILESTONES:
            raise ValueError(f"milestones는 최소 {MIN_MILESTONES}개 필요")

        milestones = [_normalize_milestone(m, i) for i, m in enumerate(raw[:MILESTONE_WEEKS])]
        while len(milestones) < MILESTONE_WEEKS:
            milestones.append(_padding_milestone(len(milestones) + 1))
        return {"milestones": milestones}
