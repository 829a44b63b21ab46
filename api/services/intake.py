"""
Candidate intake pipeline.

Turns a public form submission into a persisted, scored candidate:

    resolve job -> duplicate check -> validate CV and answers -> upload résumé
    -> extract text -> score -> persist candidate and answers -> confirmation email

Only the steps up to the upload can fail the call. A resubmission for the
same job and email is reported as a duplicate whatever else it contains.
Extraction, scoring and the confirmation email are best-effort: they run
under a timeout and their failures are logged, never raised.
"""

import asyncio
import json
from typing import Any, Mapping, Optional
import logging

from agents.screening.schemas import MatchAssessment
from api.schemas.candidates import (
    ApplicationFormResponse,
    CandidateInfo,
    QuestionResponse,
    UploadedDocument,
)
from api.services.collaborators import DocumentStore, Notifier, ScoringEngine, TextExtractor
from api.services.notifications import notify_application_received
from core.exceptions import (
    DuplicateApplication,
    ExtractionFailure,
    InvalidInput,
    JobNotAcceptingApplications,
    MissingDocument,
    NotFound,
    ScoringFailure,
    StorageFailure,
)
from core.outcome import Outcome, attempt
from core.parsers.document_parser import extract_document_text, is_supported_document
from database.models.candidates import Answer, Candidate, CandidateStatus
from database.models.jobs import Job, JobStatus
from database.repository import ApplicationRepository

logger = logging.getLogger(__name__)

RESUME_CATEGORY = "cvs"


class IntakePipeline:
    """Runs public application submissions for one repository and set of collaborators."""

    def __init__(
        self,
        repository: ApplicationRepository,
        document_store: DocumentStore,
        scoring_engine: ScoringEngine,
        notifier: Notifier,
        extractor: TextExtractor = extract_document_text,
        extraction_timeout: Optional[float] = 20.0,
        scoring_timeout: Optional[float] = 45.0,
        notification_timeout: Optional[float] = 15.0,
    ):
        self.repository = repository
        self.document_store = document_store
        self.scoring_engine = scoring_engine
        self.notifier = notifier
        self.extractor = extractor
        self.extraction_timeout = extraction_timeout
        self.scoring_timeout = scoring_timeout
        self.notification_timeout = notification_timeout

    async def get_application_form(self, form_token: str) -> ApplicationFormResponse:
        """
        Public view of a job's form.

        Raises:
            NotFound: If no active job has this token
        """
        job = await self.repository.get_job_by_form_token(form_token)
        if job is None or job.status != JobStatus.ACTIVE:
            raise NotFound("Job not found or no longer accepting applications")

        return ApplicationFormResponse(
            job_id=job.id,
            title=job.title,
            description=job.description,
            status=job.status,
            company_name=job.company.name,
            company_logo_url=job.company.logo_url,
            questions=[QuestionResponse.model_validate(q) for q in job.questions],
        )

    async def submit_application(
        self,
        form_token: str,
        candidate_info: CandidateInfo,
        answers: Optional[Mapping[Any, Any]],
        resume: Optional[UploadedDocument],
    ) -> int:
        """
        Accept an application for the job behind ``form_token``.

        Args:
            form_token: Public token of the job's form
            candidate_info: Validated name, email and phone
            answers: Question id to answer; ids must belong to the job
            resume: Uploaded CV

        Returns:
            Id of the new candidate

        Raises:
            NotFound: Unknown form token
            JobNotAcceptingApplications: Job is not ACTIVE
            DuplicateApplication: This email already applied to this job
            MissingDocument: No CV was uploaded
            InvalidInput: Answers reference foreign questions or miss required ones
            StorageFailure: The CV could not be stored
        """
        job = await self.repository.get_job_by_form_token(form_token)
        if job is None:
            raise NotFound("Job not found")
        if job.status != JobStatus.ACTIVE:
            raise JobNotAcceptingApplications()

        if await self.repository.find_candidate(job.id, candidate_info.email) is not None:
            raise DuplicateApplication()

        if resume is None or resume.is_empty:
            raise MissingDocument("CV is required")

        answer_rows = build_answers(job, answers)

        resume_url = await self._store_resume(candidate_info, resume)

        candidate = None
        try:
            screening = await self._screen(job, resume)
            assessment = screening.value_or(None)

            candidate = Candidate(
                job_id=job.id,
                name=candidate_info.name,
                email=candidate_info.email,
                phone=candidate_info.phone,
                resume_url=resume_url,
                status=CandidateStatus.PENDING,
                ai_match_score=assessment.score if assessment else None,
                ai_analysis=assessment.to_analysis() if assessment else None,
            )
            candidate = await self.repository.create_candidate_with_answers(candidate, answer_rows)
        except (Exception, asyncio.CancelledError):
            # A committed candidate still references the CV
            if candidate is None or not self.repository.is_committed(candidate):
                await self._discard_resume(resume_url)
            raise

        logger.info(
            f"Application {candidate.id} received for job {job.id} "
            f"(score={candidate.ai_match_score})"
        )

        notified = await notify_application_received(
            self.notifier, candidate, job, timeout=self.notification_timeout
        )
        notified.log_failure("application_received_email", candidate_id=candidate.id, job_id=job.id)

        return candidate.id

    async def _store_resume(self, candidate_info: CandidateInfo, resume: UploadedDocument) -> str:
        try:
            return await self.document_store.store(
                file_data=resume.content,
                filename_hint=candidate_info.name,
                category=RESUME_CATEGORY,
                original_filename=resume.filename,
                content_type=resume.content_type,
            )
        except StorageFailure:
            raise
        except Exception as e:
            raise StorageFailure(f"Failed to upload CV: {e}") from e

    async def _discard_resume(self, resume_url: str) -> None:
        if not await self.document_store.delete(resume_url):
            logger.warning(f"Could not remove orphaned CV {resume_url}")

    async def _screen(self, job: Job, resume: UploadedDocument) -> Outcome[MatchAssessment]:
        """Extract the CV text and score it; every failure ends as an Outcome."""
        if not is_supported_document(resume.content_type):
            logger.info(f"Skipping screening for job {job.id}: unsupported type {resume.content_type}")
            return Outcome.skip()

        extracted = await attempt(
            self.extractor(resume.content, resume.content_type),
            failure=ExtractionFailure,
            timeout=self.extraction_timeout,
        )
        extracted.log_failure("text_extraction", job_id=job.id)
        if not extracted.ok:
            return Outcome.failure(extracted.error)

        text = (extracted.value or "").strip()
        if not text:
            logger.info(f"Skipping scoring for job {job.id}: no text extracted")
            return Outcome.skip()

        scored = await attempt(
            self._score(job.description, text),
            failure=ScoringFailure,
            timeout=self.scoring_timeout,
        )
        scored.log_failure("scoring", job_id=job.id)
        return scored

    async def _score(self, job_description: str, text: str) -> MatchAssessment:
        result = await self.scoring_engine.score(job_description, text)
        if isinstance(result, MatchAssessment):
            return result
        return MatchAssessment.model_validate(result)


def build_answers(job: Job, answers: Optional[Mapping[Any, Any]]) -> list[Answer]:
    """
    Validate submitted answers against the job's questions.

    One row is produced per submitted question id. Required questions must
    have a non-blank answer.

    Raises:
        InvalidInput: Unknown or foreign question id, or missing required answer
    """
    questions = {question.id: question for question in job.questions}
    rows = []
    seen = set()
    for raw_id, raw_value in (answers or {}).items():
        try:
            question_id = int(raw_id)
        except (TypeError, ValueError):
            raise InvalidInput(f"Invalid question id: {raw_id!r}")
        if question_id not in questions:
            raise InvalidInput(f"Question {question_id} does not belong to this job")
        if question_id in seen:
            raise InvalidInput(f"Question {question_id} answered more than once")
        seen.add(question_id)
        rows.append(Answer(question_id=question_id, answer_text=answer_to_text(raw_value)))

    answered = {row.question_id for row in rows if row.answer_text.strip() not in ("", "[]")}
    missing = [q.id for q in job.questions if q.required and q.id not in answered]
    if missing:
        raise InvalidInput(f"Missing answers for required questions: {missing}")
    return rows


def answer_to_text(value: Any) -> str:
    """Stored form of an answer; structured values (checkbox lists) are kept as JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)
