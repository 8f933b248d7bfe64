RESUME_ANALYSIS_SYSTEM = """You are an expert ATS (Applicant Tracking System) reviewer and career coach.
Always respond with a single valid JSON object and nothing else."""

RESUME_ANALYSIS_HUMAN = """Analyze the following resume for ATS compatibility and overall quality.

Return a JSON object with exactly these fields:
{
  "ats_score": <integer 0-100>,
  "strengths": ["3-5 specific strengths"],
  "gaps": ["3-5 specific weaknesses or missing elements"],
  "recommendations": ["3-5 actionable improvements"]
}

Scoring guidance:
- Formatting and parseability (clear sections, no tables or images)
- Keyword coverage for the candidate's apparent target role
- Quantified achievements and action verbs
- Completeness of contact details, experience, education and skills

Resume:
\"\"\"
{resumeText}
\"\"\""""

RESUME_PARSE_SYSTEM = """You are a precise resume parser. Extract information exactly as written.
Do not invent data. Use null for unknown scalar values and [] for unknown lists.
Always respond with a single valid JSON object."""

RESUME_PARSE_HUMAN = """Extract the structured content of this resume.

Return JSON with this shape:
{
  "personal_info": {
    "fullName": "", "email": "", "phone": "", "location": "", "linkedin": "", "website": ""
  },
  "professional_summary": "",
  "work_experience": [
    {"title": "", "company": "", "location": "", "startDate": "", "endDate": "",
     "current": false, "description": "", "achievements": []}
  ],
  "education": [
    {"degree": "", "institution": "", "fieldOfStudy": "", "graduationDate": "", "gpa": ""}
  ],
  "skills": [],
  "certifications": [{"name": "", "issuer": "", "date": ""}]
}

Resume text:
\"\"\"
{resumeText}
\"\"\""""

JOB_MATCH_SYSTEM = """You are an expert ATS analyzer and career coach.
Always return valid JSON. Be specific and actionable in your feedback."""

JOB_MATCH_HUMAN = """Compare the resume with the job description and evaluate the match.

Job title: {jobTitle}
Company: {company}
Location: {location}

Job description:
{jobDescription}

Requirements: {requirements}
Required skills: {skills}

Resume:
\"\"\"
{resumeText}
\"\"\"

Return JSON with this shape:
{
  "matchScore": <integer 0-100>,
  "keywordAnalysis": {"matched": [], "missing": [], "bonus": []},
  "sectionAnalysis": {
    "experience": {"score": <0-100>, "feedback": ""},
    "skills": {"score": <0-100>, "feedback": ""},
    "education": {"score": <0-100>, "feedback": ""}
  },
  "improvements": [{"section": "", "current": "", "suggested": "", "reason": ""}],
  "tailoredSummary": "A professional summary rewritten for this role",
  "actionItems": ["Concrete next steps"]
}"""

IMPROVE_SYSTEM = """You are an expert resume writer who helps job seekers present their
experience clearly. Reply with the improved text only, without quotes or commentary."""

IMPROVE_SUMMARY_HUMAN = """Rewrite this professional summary to be concise (3-4 sentences),
achievement-oriented and tailored to the context.

Target position: {position}
Company: {company}
Industry: {industry}

Current summary:
{content}"""

IMPROVE_BULLET_HUMAN = """Rewrite this resume bullet point so it starts with a strong action verb,
quantifies impact where plausible, and stays under 30 words.

Target position: {position}
Company: {company}
Industry: {industry}

Current bullet:
{content}"""
