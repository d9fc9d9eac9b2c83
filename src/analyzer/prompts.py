"""
Prompts for LLM resume analysis and comparative ranking.
"""

from shared.models import JobDescription, ResumeAnalysis

MAX_RESUME_CHARS = 12000

ANALYSIS_SYSTEM_PROMPT = """You are an expert technical recruiter screening resumes for a specific job opening. You evaluate the candidate strictly against the job's requirements and the evidence in the resume.

Score each dimension from 0 to 100:
- experienceMatch: years and relevance of experience against the required range
- educationMatch: degree level and field against the requirement
- technicalFit: depth in the technologies this role relies on
- communicationScore: clarity and structure of the resume itself
- leadershipPotential: ownership, mentoring, leading projects or people
- culturalFit: signals of collaboration, initiative and growth

Be concrete: strengths and weaknesses must cite things the resume shows or lacks.

IMPORTANT: Respond ONLY with valid JSON in the exact format specified. No other text."""


RANKING_SYSTEM_PROMPT = """You are a hiring manager comparing several already-screened candidates for the same job. Rank them from best to worst fit, using the job requirements, their scores and their profiles.

IMPORTANT: Respond ONLY with valid JSON in the exact format specified. No other text."""


def _skills_text(skills) -> str:
    if isinstance(skills, str):
        return skills
    return ", ".join(skills)


def format_job(job: JobDescription) -> str:
    experience = ""
    if job.min_experience is not None or job.max_experience is not None:
        low = f"{job.min_experience:g}" if job.min_experience is not None else "0"
        high = f"{job.max_experience:g}" if job.max_experience is not None else "+"
        experience = f"{low}-{high} years"

    return f"""**Title:** {job.title or 'Not specified'}
**Department:** {job.department or 'Not specified'}
**Experience Level:** {job.experience_level or 'Not specified'} {experience}
**Required Skills:** {_skills_text(job.required_skills) or 'Not specified'}
**Preferred Skills:** {_skills_text(job.preferred_skills) or 'None'}
**Education:** {job.education or 'Not specified'}

**Description:**
{job.description or 'Not provided'}

**Responsibilities:**
{job.responsibilities or 'Not provided'}"""


def build_analysis_prompt(
    resume_text: str,
    job: JobDescription,
    local: ResumeAnalysis,
) -> str:
    """User prompt for a single-resume analysis."""
    resume = resume_text[:MAX_RESUME_CHARS]
    return f"""## Job Posting:
{format_job(job)}

## Keyword Screening Result:
Matched skills: {', '.join(local.matched_skills) or 'none'}
Missing skills: {', '.join(local.missing_skills) or 'none'}

## Resume:
{resume}

## Task:
Evaluate this candidate for the job.
Respond in the following JSON format only:

{{"experienceMatch": <0-100>, "educationMatch": <0-100>, "technicalFit": <0-100>,
"communicationScore": <0-100>, "leadershipPotential": <0-100>, "culturalFit": <0-100>,
"strengths": ["<strength>", ...], "weaknesses": ["<weakness>", ...],
"recommendations": ["<next step for the hiring team>", ...],
"improvementAreas": ["<area>", ...],
"aiInsights": "<2-3 sentence overall assessment>"}}"""


def build_ranking_prompt(analyses: list[ResumeAnalysis], job: JobDescription) -> str:
    """User prompt for ranking all candidates of a batch."""
    blocks = []
    for analysis in analyses:
        profile = analysis.profile.to_context_string() if analysis.profile else ""
        blocks.append(
            f"""### {analysis.file_name}
Overall score: {analysis.overall_score} ({analysis.recommendation.value})
Skills {analysis.skills_match}, experience {analysis.experience_match}, technical fit {analysis.technical_fit}, education {analysis.education_match}
Matched skills: {', '.join(analysis.matched_skills) or 'none'}
Missing skills: {', '.join(analysis.missing_skills) or 'none'}
{profile}"""
        )
    candidates = "\n\n".join(blocks)

    return f"""## Job Posting:
{format_job(job)}

## Candidates:
{candidates}

## Task:
Rank every candidate above. Use each candidate's heading as fileName.
Respond in the following JSON format only:

{{"rankings": [{{"fileName": "<heading>", "rank": <1..n>, "overallScore": <0-100>,
"reasoning": "<1-2 sentences>", "keyStrengths": ["..."], "keyConcerns": ["..."],
"recommendation": "<Highly Recommended|Recommended|Consider|Not Recommended>"}}],
"summary": "<2-3 sentence comparison of the pool>"}}"""
