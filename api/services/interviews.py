"""Candidate review services: detail lookup, interview recordings and direct email."""

import asyncio
from typing import Optional
import logging

from api.schemas.candidates import UploadedDocument
from api.services.collaborators import DocumentStore, InterviewAssistant, Notifier
from api.services.notifications import send_custom_message
from core.exceptions import (
    InvalidInput,
    MissingDocument,
    NotFound,
    ScoringFailure,
    StorageFailure,
    TranscriptionFailure,
)
from core.outcome import attempt
from database.models.candidates import Candidate, InterviewRecording
from database.repository import ApplicationRepository

logger = logging.getLogger(__name__)

RECORDING_CATEGORY = "recordings"
DEFAULT_AUDIO_TYPE = "audio/mpeg"


class CandidateReviewService:
    """Reviewer-side operations on a single candidate."""

    def __init__(
        self,
        repository: ApplicationRepository,
        document_store: DocumentStore,
        assistant: InterviewAssistant,
        notifier: Notifier,
        transcription_timeout: Optional[float] = 120.0,
        drafting_timeout: Optional[float] = 45.0,
        notification_timeout: Optional[float] = 15.0,
    ):
        self.repository = repository
        self.document_store = document_store
        self.assistant = assistant
        self.notifier = notifier
        self.transcription_timeout = transcription_timeout
        self.drafting_timeout = drafting_timeout
        self.notification_timeout = notification_timeout

    async def get_candidate(self, candidate_id: int, company_id: int) -> Candidate:
        """
        Load a candidate with answers and interview history.

        Answers follow the form's question order; recordings are newest first.

        Raises:
            NotFound: Candidate is not visible to the company
        """
        candidate = await self.repository.get_candidate(candidate_id, company_id, with_details=True)
        if candidate is None:
            raise NotFound("Candidate not found")
        candidate.answers.sort(
            key=lambda answer: (
                answer.question.order_index if answer.question else 0,
                answer.question_id,
            )
        )
        return candidate

    async def process_interview_recording(
        self,
        candidate_id: int,
        company_id: int,
        audio: Optional[UploadedDocument],
        recorded_by: Optional[int] = None,
    ) -> InterviewRecording:
        """
        Store, transcribe and answer a recorded interview debrief.

        Transcription and drafting are what the caller asked for, so their
        failures are raised; the uploaded audio is then removed.

        Raises:
            NotFound: Candidate is not visible to the company
            MissingDocument: No audio was uploaded
            StorageFailure: The audio could not be stored
            TranscriptionFailure: The recording could not be transcribed
            ScoringFailure: No email draft could be produced
        """
        candidate = await self.repository.get_candidate(candidate_id, company_id)
        if candidate is None:
            raise NotFound("Candidate not found")
        if audio is None or audio.is_empty:
            raise MissingDocument("Audio file is required")

        try:
            audio_url = await self.document_store.store(
                file_data=audio.content,
                filename_hint=f"{candidate.name}_interview",
                category=RECORDING_CATEGORY,
                original_filename=audio.filename,
                content_type=audio.content_type,
            )
        except StorageFailure:
            raise
        except Exception as e:
            raise StorageFailure(f"Failed to upload recording: {e}") from e

        try:
            transcribed = await attempt(
                self.assistant.transcribe(audio.content, audio.content_type or DEFAULT_AUDIO_TYPE),
                failure=TranscriptionFailure,
                timeout=self.transcription_timeout,
            )
            if not transcribed.ok:
                raise transcribed.error

            drafted = await attempt(
                self.assistant.draft_feedback_email(
                    transcribed.value,
                    candidate_name=candidate.name,
                    position=candidate.job.title,
                    company_name=candidate.job.company.name,
                ),
                failure=ScoringFailure,
                timeout=self.drafting_timeout,
            )
            if not drafted.ok:
                raise drafted.error

            recording = await self.repository.add_interview_recording(
                InterviewRecording(
                    candidate_id=candidate.id,
                    audio_url=audio_url,
                    transcript=transcribed.value,
                    ai_generated_response=drafted.value,
                    recorded_by=recorded_by,
                )
            )
        except (Exception, asyncio.CancelledError):
            if not await self.document_store.delete(audio_url):
                logger.warning(f"Could not remove orphaned recording {audio_url}")
            raise

        logger.info(f"Interview recording {recording.id} processed for candidate {candidate.id}")
        return recording

    async def send_candidate_email(
        self,
        candidate_id: int,
        company_id: int,
        body: str,
        subject: Optional[str] = None,
    ) -> None:
        """
        Send a reviewer-written email to the candidate.

        Raises:
            InvalidInput: Empty body
            NotFound: Candidate is not visible to the company
            NotificationFailure: The message could not be delivered
        """
        if not body or not body.strip():
            raise InvalidInput("Email body is required")

        candidate = await self.repository.get_candidate(candidate_id, company_id)
        if candidate is None:
            raise NotFound("Candidate not found")

        sent = await send_custom_message(
            self.notifier,
            candidate,
            candidate.job,
            body.strip(),
            subject=subject,
            timeout=self.notification_timeout,
        )
        if not sent.ok:
            raise sent.error

        logger.info(f"Custom email sent to candidate {candidate.id}")
