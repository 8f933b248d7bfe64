MILESTONE_SYSTEM = "You are an expert career coach. Always respond with valid JSON only."

MILESTONE_HUMAN = """You are a career coach helping someone create a 12-week (90-day) action plan based on their Career Canvas.

Career Canvas:
{canvasContext}

Generate exactly 12 weekly milestones. Each milestone must have:
1. A short title (2-4 words) describing the week's focus
2. Exactly 3 specific, actionable subtasks that can be completed that week
3. A category matching the phase of the journey

Category progression:
- Weeks 1-3: "foundation" (research, self-assessment, learning basics)
- Weeks 4-6: "skill_development" (building skills, certifications, practice)
- Weeks 7-9: "networking" (connecting, outreach, building relationships)
- Weeks 10-12: "job_search" (applications, interviews, negotiations)

Respond with JSON only:
{"milestones": [{"week": 1, "title": "...", "subtasks": ["...", "...", "..."], "category": "foundation"}]}"""

CONTINUATION_CONTEXT = """

IMPORTANT: This is a CONTINUATION PLAN (Part {sequence} of the career journey).

The user has ALREADY COMPLETED these milestones in the previous 12-week plan:
{completed}

Do not repeat any of them. Generate new, more advanced milestones that build on the progress
already achieved and assume the foundational work is done.

For a continuation plan, use this progression instead:
- Weeks 1-3: "skill_development" (advanced skills, specializations, certifications)
- Weeks 4-6: "networking" (expanding network, industry events, thought leadership)
- Weeks 7-9: "job_search" (active applications, interview preparation, negotiations)
- Weeks 10-12: "job_search" (final push: interviews, offers, transition planning)
"""

CANVAS_SYSTEM = "You are an expert career coach. Provide helpful, personalized career advice."

CANVAS_HUMAN = """You are an expert career coach helping someone transition from "{currentRole}" to "{targetRole}".

The user needs to answer this career canvas question (#{questionNumber}):
"{questionText}"
{previousAnswersContext}

Write a thoughtful, personalized answer for this person. The answer should:
1. Be written in first person ("I", "my")
2. Be specific to moving from {currentRole} to {targetRole}
3. Be actionable and practical
4. Be 150-250 words
5. Sound natural and authentic, not generic

Respond with just the suggestion text, no preamble or explanation."""
