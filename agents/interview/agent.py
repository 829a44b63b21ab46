"""Interview agent: transcribes recorded feedback and drafts the reply email."""

from typing import Any, Optional

from google.genai import types

from agents.base import BaseAgent
from agents.common.utils import clip_text
from agents.interview.prompts import (
    FEEDBACK_EMAIL_PROMPT,
    INTERVIEW_SYSTEM_PROMPT,
    TRANSCRIPTION_PROMPT,
)
from core.exceptions import ScoringFailure, TranscriptionFailure


class InterviewAgent(BaseAgent):
    """Agent for interview recordings."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        client: Any = None,
    ):
        super().__init__(
            name="interview",
            instructions=INTERVIEW_SYSTEM_PROMPT,
            model=model,
            api_key=api_key,
            client=client,
            temperature=0.7,
            max_output_tokens=800,
        )

    async def transcribe(self, audio: bytes, mime_type: str = "audio/mpeg") -> str:
        """Transcribe an audio recording.

        Raises:
            TranscriptionFailure: If the model returns no transcript
        """
        transcript = await self.run(
            [types.Part.from_bytes(data=audio, mime_type=mime_type), TRANSCRIPTION_PROMPT]
        )
        transcript = transcript.strip()
        if not transcript:
            raise TranscriptionFailure("Model returned an empty transcript")
        return transcript

    async def draft_feedback_email(
        self,
        transcript: str,
        candidate_name: str,
        position: str,
        company_name: str,
    ) -> str:
        """Draft a feedback email body from an interview transcript."""
        prompt = FEEDBACK_EMAIL_PROMPT.format(
            candidate_name=candidate_name,
            position=position,
            company_name=company_name,
            transcript=clip_text(transcript),
        )
        draft = (await self.run(prompt)).strip()
        if not draft:
            raise ScoringFailure("Model returned an empty email draft")
        return draft
