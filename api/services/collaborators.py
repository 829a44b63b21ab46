"""
Interfaces of the external collaborators the workflows depend on.

Services receive concrete implementations at construction time, so tests and
alternative providers can be swapped in without touching workflow code.
"""

from typing import Any, List, Optional, Protocol

from agents.screening.schemas import MatchAssessment
from core.integrations.email import EmailTemplate
from core.storage import DocumentStore


class ScoringEngine(Protocol):
    """Rates candidate text against a job description."""

    async def score(self, job_description: str, candidate_text: str) -> MatchAssessment: ...


class TextExtractor(Protocol):
    """Turns document bytes into plain text; None for unsupported types."""

    async def __call__(self, content: bytes, content_type: Optional[str]) -> Optional[str]: ...


class Notifier(Protocol):
    """Sends templated messages to a recipient."""

    async def send(
        self,
        to: str,
        subject: str,
        template: EmailTemplate,
        context: dict[str, Any],
        cc: Optional[List[str]] = None,
    ) -> bool: ...


class InterviewAssistant(Protocol):
    """Transcribes recorded feedback and drafts the follow-up email."""

    async def transcribe(self, audio: bytes, mime_type: str = "audio/mpeg") -> str: ...

    async def draft_feedback_email(
        self,
        transcript: str,
        candidate_name: str,
        position: str,
        company_name: str,
    ) -> str: ...


__all__ = [
    "DocumentStore",
    "InterviewAssistant",
    "Notifier",
    "ScoringEngine",
    "TextExtractor",
]
