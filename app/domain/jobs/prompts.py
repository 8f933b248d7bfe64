RECOMMENDATION_SYSTEM = """You are a senior career strategist and job-market analyst.
Provide specific, actionable job search recommendations. Respond with JSON only."""

RECOMMENDATION_HUMAN = """Recommend job titles for this job seeker.

Target role: {{target_role}}
Current role: {{current_role}}
Skills: {{skills}}
Preferred locations: {{locations}}
Seniority: {{seniority}}
Industry: {{industry}}
Work type: {{work_type}}

Return JSON with this shape:
{
  "bestMatchTitles": ["5-7 titles that match the target role most closely"],
  "adjacentTitles": ["5-7 related titles worth searching"],
  "titleVariations": ["alternative spellings and seniority variants"],
  "keywordPack": ["10-15 search keywords and boolean-friendly terms"],
  "positioningSummary": "2-3 sentences on how to position for these roles"
}"""

EXTRACT_JD_SYSTEM = """You are a job description parser. Extract structured job details from raw content.
Always return valid JSON. If a field cannot be determined, use an empty string or empty array."""

EXTRACT_JD_HUMAN = """Extract job details from this {{source_type}} content.

Return ONLY valid JSON with this exact structure:
{
  "title": "Job title",
  "company": "Company name",
  "location": "Job location (city, country)",
  "description": "Full job description text",
  "requirements": ["requirement 1", "requirement 2"],
  "skills": ["skill 1", "skill 2"],
  "experience": "Years of experience required (e.g. 3-5 years)"
}

Content to extract from:
{{content}}"""

JOB_SEARCH_SYSTEM = """You are a job market expert. Generate realistic job listings based on actual
market conditions, real companies operating in the requested region and typical compensation.
Quote salaries in the local currency of the region. Respond with JSON only."""

JOB_SEARCH_HUMAN = """Generate a list of realistic job openings for "{{keywords}}" positions in {{location}}.{{filters}}

Create 12-15 job listings that reflect current market demand. Mix well-known regional companies,
startups and multinational corporations with offices there.

Return JSON with this shape:
{
  "jobs": [
    {
      "title": "Specific job title (vary seniority levels)",
      "company": "Real company name that operates in the region",
      "location": "Specific city or area",
      "description": "2-3 sentence description with key requirements",
      "salary": "Salary range in local currency, e.g. AED 28,000 - 40,000/month",
      "workType": "remote, hybrid or onsite",
      "requirements": "2-3 key requirements"
    }
  ]
}"""
