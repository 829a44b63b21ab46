"""
Candidate Models

A candidate is one application to one job. Answers are written together with
the candidate in a single transaction; interview recordings are appended
afterwards. At most one candidate exists per (job, email), enforced by the
database so concurrent duplicate submissions cannot both succeed.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    DateTime,
    Integer,
    func,
    Text,
    JSON,
    Enum as SQLEnum,
    Index,
    UniqueConstraint,
)
from database.engine import Base, BigIntegerId, utcnow
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.jobs import Job, Question
    from database.models.users import User


# ==================== Candidate Enums ===================== #
class CandidateStatus(str, PyEnum):
    """Review state of an application."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# ==================== Candidate Model ===================== #
class Candidate(Base):
    """Application of one person to one job."""

    __tablename__ = "candidates"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    resume_url: Mapped[str] = mapped_column(String(1000), nullable=False)

    status: Mapped[CandidateStatus] = mapped_column(
        SQLEnum(CandidateStatus, native_enum=False, length=20),
        nullable=False,
        default=CandidateStatus.PENDING,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text)

    # Screening results; both stay null when scoring was skipped or failed
    ai_match_score: Mapped[int | None] = mapped_column(Integer)
    ai_analysis: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    job: Mapped["Job"] = relationship("Job", back_populates="candidates")
    answers: Mapped[list["Answer"]] = relationship(
        "Answer", back_populates="candidate", cascade="all, delete-orphan"
    )
    interview_recordings: Mapped[list["InterviewRecording"]] = relationship(
        "InterviewRecording",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="InterviewRecording.recorded_at.desc()",
    )

    __table_args__ = (
        UniqueConstraint("job_id", "email", name="uq_candidate_job_email"),
        Index("idx_candidate_job_status", "job_id", "status"),
    )


class Answer(Base):
    """Answer to one form question. Immutable once written."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    candidate_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)

    candidate: Mapped["Candidate"] = relationship("Candidate", back_populates="answers")
    question: Mapped["Question"] = relationship("Question")

    __table_args__ = (
        UniqueConstraint("candidate_id", "question_id", name="uq_answer_candidate_question"),
    )


class InterviewRecording(Base):
    """Recorded interviewer feedback with its transcript and drafted reply."""

    __tablename__ = "interview_recordings"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    candidate_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    audio_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    transcript: Mapped[str] = mapped_column(Text, nullable=False, default="")
    ai_generated_response: Mapped[str | None] = mapped_column(Text)
    recorded_by: Mapped[int | None] = mapped_column(
        BigIntegerId, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    candidate: Mapped["Candidate"] = relationship("Candidate", back_populates="interview_recordings")
    recorder: Mapped[Optional["User"]] = relationship("User")
