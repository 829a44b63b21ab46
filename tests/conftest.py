"""Shared fixtures and utilities for tests."""

from io import BytesIO
from types import SimpleNamespace
from typing import Optional
import os

import pytest
import pytest_asyncio
from docx import Document
from docx.shared import Pt

from agents.screening.schemas import MatchAssessment, Recommendation
from core.exceptions import NotificationFailure, StorageFailure
from core.storage import build_object_name
from database.engine import close_db, create_db_engine, create_session_factory, init_db
from database.models import (
    Candidate,
    CandidateStatus,
    Company,
    Job,
    JobStatus,
    Question,
    QuestionType,
    User,
)
from database.repository import ApplicationRepository


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables before running tests."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    os.environ.setdefault("STORAGE_BACKEND", "local")
    os.environ.setdefault("GOOGLE_API_KEY", "test-google-key")
    os.environ.setdefault("SMTP_HOST", "localhost")


# ==================== Documents ===================== #
@pytest.fixture
def minimal_pdf():
    """Fixture providing a minimal valid PDF."""
    return _create_minimal_pdf("Test PDF")


@pytest.fixture
def simple_docx():
    """Fixture providing a simple DOCX document."""
    return _create_test_docx("Test paragraph", "Test cell", paragraphs_only=False)


def _create_minimal_pdf(text: str) -> bytes:
    """Create a minimal valid PDF with embedded text."""
    pdf = (
        b"%PDF-1.4\n"
        b"1 0 obj<</Type/Catalog/Pages 2 0 R>>endobj\n"
        b"2 0 obj<</Type/Pages/Kids[3 0 R]/Count 1>>endobj\n"
        b"3 0 obj<</Type/Page/Parent 2 0 R/MediaBox[0 0 612 792]/Contents 4 0 R/Resources<</Font<</F1 5 0 R>>>>>>endobj\n"
        b"4 0 obj<</Length 44>>stream\nBT /F1 12 Tf 100 700 Td ("
        + text.encode()
        + b") Tj ET\nendstream endobj\n"
        b"5 0 obj<</Type/Font/Subtype/Type1/BaseFont/Helvetica>>endobj\n"
        b"xref\n0 6\n0000000000 65535 f \n0000000009 00000 n \n0000000058 00000 n \n0000000115 00000 n \n0000000214 00000 n \n0000000306 00000 n \n"
        b"trailer<</Size 6/Root 1 0 R>>\nstartxref\n388\n%%EOF"
    )
    return pdf


def _create_test_docx(
    para_text: str, cell_text: str = "", paragraphs_only: bool = True
) -> BytesIO:
    """Create a simple DOCX document for testing."""
    stream = BytesIO()
    doc = Document()

    para1 = doc.add_paragraph(para_text)
    para1.runs[0].font.size = Pt(12)

    if cell_text and paragraphs_only:
        para2 = doc.add_paragraph(cell_text)
        para2.runs[0].font.size = Pt(12)

    if not paragraphs_only:
        table = doc.add_table(rows=1, cols=1)
        cell = table.rows[0].cells[0]
        cell.text = cell_text or "Table Cell"

    doc.save(stream)
    stream.seek(0)
    return stream


# ==================== Collaborator fakes ===================== #
class FakeDocumentStore:
    """In-memory document store."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.stored: dict[str, bytes] = {}
        self.deleted: list[str] = []

    async def store(self, file_data, filename_hint, category, original_filename=None, content_type=None):
        if self.fail:
            raise StorageFailure("bucket unavailable")
        url = f"memory://{category}/{build_object_name(filename_hint, original_filename)}"
        self.stored[url] = file_data
        return url

    async def delete(self, url):
        self.deleted.append(url)
        return self.stored.pop(url, None) is not None


class FakeScoringEngine:
    """Scoring engine returning a fixed result or raising."""

    def __init__(self, result=None, error: Optional[Exception] = None):
        self.result = result if result is not None else strong_assessment()
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def score(self, job_description, candidate_text):
        self.calls.append((job_description, candidate_text))
        if self.error is not None:
            raise self.error
        return self.result


class FakeNotifier:
    """Records sent messages; fails for listed recipients."""

    def __init__(self, fail_for: tuple = (), fail_all: bool = False):
        self.fail_for = set(fail_for)
        self.fail_all = fail_all
        self.sent: list[dict] = []

    async def send(self, to, subject, template, context, cc=None):
        if self.fail_all or to in self.fail_for:
            raise NotificationFailure("SMTP server unavailable")
        self.sent.append(
            {"to": to, "subject": subject, "template": template, "context": context, "cc": cc or []}
        )
        return True


class FakeInterviewAssistant:
    """Interview assistant with canned transcript and draft."""

    def __init__(self, transcript="Strong system design answers.", draft="Dear candidate, thank you.",
                 transcribe_error=None, draft_error=None):
        self.transcript = transcript
        self.draft = draft
        self.transcribe_error = transcribe_error
        self.draft_error = draft_error

    async def transcribe(self, audio, mime_type="audio/mpeg"):
        if self.transcribe_error is not None:
            raise self.transcribe_error
        return self.transcript

    async def draft_feedback_email(self, transcript, candidate_name, position, company_name):
        if self.draft_error is not None:
            raise self.draft_error
        return self.draft


def strong_assessment() -> MatchAssessment:
    return MatchAssessment(
        score=82,
        recommendation=Recommendation.STRONG_MATCH,
        strengths=["Python", "AWS"],
        gaps=["No Kubernetes"],
        highlights=["Led a migration to asyncio"],
    )


async def fake_extractor(content, content_type):
    """Extractor that returns fixed CV text for any document."""
    return "Senior Python developer with AWS experience"


# ==================== Database ===================== #
@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """SQLite database file, created fresh per test."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'ats.db'}")
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def repository(session_factory):
    return ApplicationRepository(session_factory)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two companies with jobs, questions and a few candidates."""
    async with session_factory() as session:
        async with session.begin():
            acme = Company(name="Acme", email="jobs@acme.test")
            globex = Company(name="Globex", email="talent@globex.test")
            hannah = User(company=acme, name="Hannah Reed", email="hannah@acme.test")

            backend = Job(
                company=acme,
                hr=hannah,
                title="Backend Engineer",
                description="Python, AWS and PostgreSQL.",
                status=JobStatus.ACTIVE,
                form_token="acme-backend",
                questions=[
                    Question(
                        text="Years of Python experience?",
                        type=QuestionType.TEXT,
                        required=True,
                        order_index=0,
                    ),
                    Question(
                        text="Preferred work mode",
                        type=QuestionType.RADIO,
                        options="Remote\nHybrid\nOnsite",
                        required=False,
                        order_index=1,
                    ),
                ],
            )
            paused = Job(
                company=acme,
                title="Data Analyst",
                description="SQL.",
                status=JobStatus.PAUSED,
                form_token="acme-paused",
            )
            globex_job = Job(
                company=globex,
                title="Designer",
                description="Figma.",
                status=JobStatus.ACTIVE,
                form_token="globex-design",
            )

            carol = Candidate(
                job=backend, name="Carol Diaz", email="carol@example.com",
                resume_url="memory://cvs/carol.pdf", status=CandidateStatus.PENDING,
            )
            dan = Candidate(
                job=backend, name="Dan Wu", email="dan@example.com",
                resume_url="memory://cvs/dan.pdf", status=CandidateStatus.PENDING,
            )
            gary = Candidate(
                job=globex_job, name="Gary Oak", email="gary@example.com",
                resume_url="memory://cvs/gary.pdf", status=CandidateStatus.PENDING,
            )
            session.add_all([acme, globex, hannah, backend, paused, globex_job, carol, dan, gary])

    return SimpleNamespace(
        acme_id=acme.id,
        globex_id=globex.id,
        hr_id=hannah.id,
        job_id=backend.id,
        paused_job_id=paused.id,
        globex_job_id=globex_job.id,
        required_question_id=backend.questions[0].id,
        optional_question_id=backend.questions[1].id,
        carol_id=carol.id,
        dan_id=dan.id,
        gary_id=gary.id,
    )


@pytest.fixture
def document_store():
    return FakeDocumentStore()


@pytest.fixture
def scoring_engine():
    return FakeScoringEngine()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def interview_assistant():
    return FakeInterviewAssistant()
