from app.domain.resume.prompts import (
    IMPROVE_BULLET_HUMAN,
    IMPROVE_SUMMARY_HUMAN,
    IMPROVE_SYSTEM,
    JOB_MATCH_HUMAN,
    JOB_MATCH_SYSTEM,
    RESUME_ANALYSIS_HUMAN,
    RESUME_ANALYSIS_SYSTEM,
    RESUME_PARSE_HUMAN,
    RESUME_PARSE_SYSTEM,
)
from app.domain.resume.schemas import (
    ImproveSectionInput,
    JobMatchInput,
    JobMatchResult,
    ParsedResume,
    ResumeAnalysisResult,
    ResumeTextInput,
)
from app.domain.tasks.spec import TaskSpec
from app.domain.tasks.templates import PromptTemplate

ANALYSIS_MAX_CHARS = 6000
PARSE_MAX_CHARS = 15000
JOB_MATCH_MAX_CHARS = 8000

RESUME_ANALYSIS_TASK = TaskSpec(
    name="resume_analysis",
    system_prompt=RESUME_ANALYSIS_SYSTEM,
    prompt=PromptTemplate(RESUME_ANALYSIS_HUMAN, ResumeTextInput),
    output_model=ResumeAnalysisResult,
    temperature=0.7,
    max_tokens=1000,
)

RESUME_PARSE_TASK = TaskSpec(
    name="resume_parse",
    system_prompt=RESUME_PARSE_SYSTEM,
    prompt=PromptTemplate(RESUME_PARSE_HUMAN, ResumeTextInput),
    output_model=ParsedResume,
    temperature=0.3,
    max_tokens=4000,
)

JOB_MATCH_TASK = TaskSpec(
    name="resume_job_match",
    system_prompt=JOB_MATCH_SYSTEM,
    prompt=PromptTemplate(JOB_MATCH_HUMAN, JobMatchInput),
    output_model=JobMatchResult,
    temperature=0.4,
    max_tokens=3000,
)

IMPROVE_SUMMARY_TASK = TaskSpec(
    name="improve_summary",
    system_prompt=IMPROVE_SYSTEM,
    prompt=PromptTemplate(IMPROVE_SUMMARY_HUMAN, ImproveSectionInput),
    output_model=None,
    temperature=0.7,
    max_tokens=500,
)

IMPROVE_BULLET_TASK = TaskSpec(
    name="improve_bullet",
    system_prompt=IMPROVE_SYSTEM,
    prompt=PromptTemplate(IMPROVE_BULLET_HUMAN, ImproveSectionInput),
    output_model=None,
    temperature=0.7,
    max_tokens=500,
)

IMPROVE_TASKS = {
    "summary": IMPROVE_SUMMARY_TASK,
    "bullet": IMPROVE_BULLET_TASK,
}
