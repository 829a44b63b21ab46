"""Screening agent prompt templates."""

from agents.common.prompts import (
    ANALYTICAL_TONE,
    SCORING_GUIDELINES,
    JSON_OUTPUT,
)


SCREENING_SYSTEM_PROMPT = f"""{ANALYTICAL_TONE}

You are an expert technical recruiter analyzing CVs against job descriptions.

{SCORING_GUIDELINES}

Be fair and unbiased. Focus on qualifications, not demographics.
Consider both hard skills and soft skills.

{JSON_OUTPUT}
"""


CV_MATCH_PROMPT = """Analyze the following CV against the job description and provide a detailed assessment.

Job Description:
{job_description}

Candidate CV:
{cv_text}

Provide a JSON object with:
1. match_score (integer 0-100) - Overall match percentage
2. strengths (array of strings) - Specific qualifications that align well
3. gaps (array of strings) - Missing qualifications or skills
4. recommendation ("Strong Match" | "Moderate Match" | "Weak Match")
5. key_highlights (array of 3-5 short strings summarizing the candidate)"""
