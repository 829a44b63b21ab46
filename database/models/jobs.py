"""
Job Models

Job postings and the custom questions on their public application form.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    DateTime,
    Integer,
    func,
    Text,
    Enum as SQLEnum,
    Index,
)
from database.engine import Base, BigIntegerId, utcnow
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.companies import Company
    from database.models.users import User
    from database.models.candidates import Candidate


# ==================== Job Enums ===================== #
class JobStatus(str, PyEnum):
    """Lifecycle of a posting. Only ACTIVE jobs accept applications."""

    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"


class QuestionType(str, PyEnum):
    """Input type of a form question."""

    TEXT = "TEXT"
    RADIO = "RADIO"
    CHECKBOX = "CHECKBOX"


# ==================== Job Model ===================== #
class Job(Base):
    """Job posting owned by a company."""

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hr_id: Mapped[int | None] = mapped_column(
        BigIntegerId, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, native_enum=False, length=20),
        nullable=False,
        default=JobStatus.ACTIVE,
        index=True,
    )
    # Opaque public identifier of the application form
    form_token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    company: Mapped["Company"] = relationship("Company", back_populates="jobs")
    hr: Mapped[Optional["User"]] = relationship("User")
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Question.order_index",
    )
    candidates: Mapped[list["Candidate"]] = relationship("Candidate", back_populates="job")

    __table_args__ = (Index("idx_job_company_status", "company_id", "status"),)


class Question(Base):
    """Custom question on a job's application form."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(BigIntegerId, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(
        BigIntegerId, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[QuestionType] = mapped_column(
        SQLEnum(QuestionType, native_enum=False, length=20),
        nullable=False,
        default=QuestionType.TEXT,
    )
    options: Mapped[str | None] = mapped_column(Text)  # newline separated choices
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    job: Mapped["Job"] = relationship("Job", back_populates="questions")
