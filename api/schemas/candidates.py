"""Candidate-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from database.models.candidates import CandidateStatus
from database.models.jobs import JobStatus, QuestionType


class CandidateInfo(BaseModel):
    """Applicant identity as submitted on the public form."""

    name: str = Field(min_length=1, max_length=255, description="Candidate's full name")
    email: EmailStr = Field(description="Contact email, unique per job")
    phone: Optional[str] = Field(None, max_length=50, description="Contact phone number")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        """Strip whitespace from the name."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def blank_phone_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lower-case the address so duplicates are detected case-insensitively."""
        return v.strip().lower()


class UploadedDocument(BaseModel):
    """A file received from a client, held in memory."""

    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.content


# ==================== Application form ===================== #
class QuestionResponse(BaseModel):
    """Custom question shown on a job's application form."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    type: QuestionType
    options: list[str] = Field(default_factory=list)
    required: bool
    order_index: int

    @field_validator("options", mode="before")
    @classmethod
    def split_options(cls, v: Any) -> Any:
        """Choices are stored newline separated."""
        if v is None:
            return []
        if isinstance(v, str):
            return [line.strip() for line in v.splitlines() if line.strip()]
        return v


class ApplicationFormResponse(BaseModel):
    """Public view of a job's application form."""

    job_id: int
    title: str
    description: str
    status: JobStatus
    company_name: str
    company_logo_url: Optional[str] = None
    questions: list[QuestionResponse]


class ApplicationSubmittedResponse(BaseModel):
    """Result of a successful submission."""

    success: bool = True
    message: str = "Application submitted successfully"
    candidate_id: int


# ==================== Candidate review ===================== #
class AnswerResponse(BaseModel):
    """Answer with the question it responds to."""

    question_id: int
    question_text: Optional[str] = None
    answer_text: str


class InterviewRecordingResponse(BaseModel):
    """One processed interview recording."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    candidate_id: int
    audio_url: str
    transcript: str
    ai_generated_response: Optional[str] = None
    recorded_by: Optional[int] = None
    recorded_at: datetime


class CandidateResponse(BaseModel):
    """Candidate as seen by a reviewer."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    name: str
    email: str
    phone: Optional[str] = None
    resume_url: str
    status: CandidateStatus
    rejection_reason: Optional[str] = None
    ai_match_score: Optional[int] = None
    ai_analysis: Optional[dict[str, Any]] = None
    applied_at: datetime


class CandidateDetailResponse(CandidateResponse):
    """Candidate with answers and interview history."""

    job_title: str
    answers: list[AnswerResponse] = Field(default_factory=list)
    interview_recordings: list[InterviewRecordingResponse] = Field(default_factory=list)

    @classmethod
    def from_candidate(cls, candidate) -> "CandidateDetailResponse":
        """Build from a candidate loaded with details."""
        base = CandidateResponse.model_validate(candidate).model_dump()
        return cls(
            **base,
            job_title=candidate.job.title,
            answers=[
                AnswerResponse(
                    question_id=answer.question_id,
                    question_text=answer.question.text if answer.question else None,
                    answer_text=answer.answer_text,
                )
                for answer in candidate.answers
            ],
            interview_recordings=[
                InterviewRecordingResponse.model_validate(recording)
                for recording in candidate.interview_recordings
            ],
        )


class StatusUpdateRequest(BaseModel):
    """Request model for changing one candidate's status."""

    status: str = Field(..., description="PENDING, APPROVED or REJECTED")
    rejection_reason: Optional[str] = Field(
        None, max_length=2000, description="Kept only when rejecting"
    )


class BulkStatusUpdateRequest(BaseModel):
    """Request model for deciding many candidates at once."""

    candidate_ids: list[int] = Field(..., min_length=1, description="Candidates to update")
    status: str = Field(..., description="APPROVED or REJECTED")
    rejection_reason: Optional[str] = Field(None, max_length=2000)


class BulkStatusUpdateResponse(BaseModel):
    """Result of a bulk status change."""

    success: bool = True
    updated_count: int = Field(ge=0, description="Candidates in scope that were updated")


class CandidateEmailRequest(BaseModel):
    """Free-form email from a reviewer to a candidate."""

    subject: Optional[str] = Field(None, max_length=255)
    body: str = Field(..., description="Plain text message")


class MessageResponse(BaseModel):
    """Generic success message."""

    success: bool = True
    message: str
