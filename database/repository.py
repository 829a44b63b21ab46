"""
Application repository.

Transactional persistence boundary for jobs, candidates and their answers.
Every candidate query is scoped by company through the candidate's job, so a
candidate outside the caller's company is indistinguishable from a missing one.
"""

from typing import Optional, Sequence
import logging

from sqlalchemy import inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from core.exceptions import DuplicateApplication
from database.models.candidates import (
    Answer,
    Candidate,
    CandidateStatus,
    InterviewRecording,
)
from database.models.jobs import Job

logger = logging.getLogger(__name__)

CANDIDATE_EMAIL_CONSTRAINT = "uq_candidate_job_email"


def is_duplicate_application(exc: IntegrityError) -> bool:
    """Whether an insert failed on the (job, email) unique constraint."""
    orig = exc.orig
    # asyncpg reports the constraint name; SQLite only lists the columns
    constraint = getattr(getattr(orig, "__cause__", None), "constraint_name", None)
    if constraint is not None:
        return constraint == CANDIDATE_EMAIL_CONSTRAINT
    message = str(orig)
    return (
        CANDIDATE_EMAIL_CONSTRAINT in message
        or "candidates.job_id, candidates.email" in message
    )


class ApplicationRepository:
    """Persistence operations used by the intake and review workflows."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_job_by_form_token(self, form_token: str) -> Optional[Job]:
        """Load a job with its company, owner and ordered questions."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Job)
                .options(
                    selectinload(Job.company),
                    selectinload(Job.hr),
                    selectinload(Job.questions),
                )
                .where(Job.form_token == form_token)
            )
            return result.scalar_one_or_none()

    async def find_candidate(self, job_id: int, email: str) -> Optional[Candidate]:
        """Find the application of ``email`` to ``job_id``, if any."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Candidate).where(
                    Candidate.job_id == job_id,
                    Candidate.email == email,
                )
            )
            return result.scalar_one_or_none()

    async def create_candidate_with_answers(
        self,
        candidate: Candidate,
        answers: Sequence[Answer],
    ) -> Candidate:
        """
        Insert a candidate and its answers in one transaction.

        Either every row is committed or none is. A violation of the (job, email)
        unique constraint is reported as DuplicateApplication; this is the
        authoritative duplicate check under concurrent submissions.

        Args:
            candidate: Unsaved candidate
            answers: Unsaved answers, attached to the candidate here

        Returns:
            The committed candidate with its id populated
        """
        candidate.answers = list(answers)
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    session.add(candidate)
        except IntegrityError as exc:
            if is_duplicate_application(exc):
                raise DuplicateApplication() from exc
            raise

        logger.info(
            f"Created candidate {candidate.id} for job {candidate.job_id} "
            f"with {len(candidate.answers)} answer(s)"
        )
        return candidate

    @staticmethod
    def is_committed(candidate: Candidate) -> bool:
        """Whether the candidate row survived its transaction.

        A rolled back insert returns the object to the transient state.
        """
        return inspect(candidate).has_identity

    async def get_candidate(
        self,
        candidate_id: int,
        company_id: int,
        with_details: bool = False,
    ) -> Optional[Candidate]:
        """
        Load a candidate visible to ``company_id``.

        Args:
            candidate_id: Candidate to load
            company_id: Caller's company scope
            with_details: Also load answers (with questions) and interview history

        Returns:
            The candidate with job, company and job owner loaded, or None
        """
        options = [selectinload(Candidate.job).selectinload(Job.company),
                   selectinload(Candidate.job).selectinload(Job.hr)]
        if with_details:
            options.append(selectinload(Candidate.answers).selectinload(Answer.question))
            options.append(selectinload(Candidate.interview_recordings))

        async with self.session_factory() as session:
            result = await session.execute(
                select(Candidate)
                .join(Job, Candidate.job_id == Job.id)
                .options(*options)
                .where(Candidate.id == candidate_id, Job.company_id == company_id)
            )
            return result.scalar_one_or_none()

    async def list_candidates(
        self,
        candidate_ids: Sequence[int],
        company_id: int,
    ) -> list[Candidate]:
        """Load the subset of ``candidate_ids`` visible to ``company_id``."""
        if not candidate_ids:
            return []

        async with self.session_factory() as session:
            result = await session.execute(
                select(Candidate)
                .join(Job, Candidate.job_id == Job.id)
                .options(
                    selectinload(Candidate.job).selectinload(Job.company),
                    selectinload(Candidate.job).selectinload(Job.hr),
                )
                .where(Candidate.id.in_(candidate_ids), Job.company_id == company_id)
                .order_by(Candidate.id)
            )
            return list(result.scalars().all())

    async def update_status(
        self,
        candidate_ids: Sequence[int],
        company_id: int,
        status: CandidateStatus,
        rejection_reason: Optional[str],
    ) -> int:
        """
        Set status and rejection reason on every in-scope candidate.

        Ids outside ``company_id`` are never touched.

        Returns:
            Number of rows matched for update
        """
        if not candidate_ids:
            return 0

        in_scope_jobs = select(Job.id).where(Job.company_id == company_id)
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(Candidate)
                    .where(
                        Candidate.id.in_(candidate_ids),
                        Candidate.job_id.in_(in_scope_jobs),
                    )
                    .values(status=status, rejection_reason=rejection_reason)
                    .execution_options(synchronize_session=False)
                )
        return result.rowcount or 0

    async def add_interview_recording(self, recording: InterviewRecording) -> InterviewRecording:
        """Append an interview recording to a candidate's history."""
        async with self.session_factory() as session:
            async with session.begin():
                session.add(recording)
        return recording
