"""ORM models. Importing this package registers every mapper."""

from database.models.companies import Company
from database.models.users import User
from database.models.jobs import Job, JobStatus, Question, QuestionType
from database.models.candidates import (
    Answer,
    Candidate,
    CandidateStatus,
    InterviewRecording,
)

__all__ = [
    "Answer",
    "Candidate",
    "CandidateStatus",
    "Company",
    "InterviewRecording",
    "Job",
    "JobStatus",
    "Question",
    "QuestionType",
    "User",
]
