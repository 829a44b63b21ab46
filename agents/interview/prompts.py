"""Interview agent prompt templates."""

from agents.common.prompts import PROFESSIONAL_TONE


INTERVIEW_SYSTEM_PROMPT = f"""{PROFESSIONAL_TONE}

You are a professional HR manager drafting candidate communication.
Write clear, empathetic emails."""


TRANSCRIPTION_PROMPT = """Transcribe this interview feedback recording verbatim in English.
Return only the transcript text, without timestamps, speaker labels or commentary."""


FEEDBACK_EMAIL_PROMPT = """Based on the following interview feedback, draft a professional email to the candidate.

Candidate: {candidate_name}
Position: {position}
Company: {company_name}

Interviewer Feedback (transcribed):
{transcript}

Draft an email that:
- Is warm, professional, and encouraging
- Provides specific, actionable feedback based on the transcript
- Clearly states next steps
- Maintains a positive tone regardless of outcome
- Is 150-250 words

Return only the email body text, no subject line or markdown formatting."""
