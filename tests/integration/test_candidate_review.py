"""Candidate review service tests: details, interview recordings, direct email."""

import pytest
from sqlalchemy import func, select

from api.schemas.candidates import CandidateInfo, UploadedDocument
from api.services.intake import IntakePipeline
from api.services.interviews import CandidateReviewService
from core.exceptions import (
    InvalidInput,
    MissingDocument,
    NotFound,
    NotificationFailure,
    ScoringFailure,
    TranscriptionFailure,
)
from core.integrations.email import EmailTemplate
from database.models import InterviewRecording
from tests.conftest import (
    FakeDocumentStore,
    FakeInterviewAssistant,
    FakeNotifier,
    FakeScoringEngine,
    _create_minimal_pdf,
    fake_extractor,
)

AUDIO = UploadedDocument(content=b"ID3fake-mp3", filename="debrief.mp3", content_type="audio/mpeg")


def _service(repository, store=None, assistant=None, notifier=None):
    return CandidateReviewService(
        repository,
        store or FakeDocumentStore(),
        assistant or FakeInterviewAssistant(),
        notifier or FakeNotifier(),
    )


async def _recording_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(InterviewRecording))).scalar_one()


@pytest.mark.asyncio
async def test_get_candidate_orders_answers_by_question(repository, seeded):
    pipeline = IntakePipeline(
        repository, FakeDocumentStore(), FakeScoringEngine(), FakeNotifier(), extractor=fake_extractor
    )
    candidate_id = await pipeline.submit_application(
        "acme-backend",
        CandidateInfo(name="Alice Smith", email="alice@example.com"),
        {str(seeded.optional_question_id): "Hybrid", str(seeded.required_question_id): "7"},
        UploadedDocument(content=_create_minimal_pdf("cv"), filename="cv.pdf", content_type="application/pdf"),
    )

    candidate = await _service(repository).get_candidate(candidate_id, seeded.acme_id)

    assert [a.answer_text for a in candidate.answers] == ["7", "Hybrid"]
    assert candidate.answers[0].question.text == "Years of Python experience?"
    assert candidate.interview_recordings == []


@pytest.mark.asyncio
async def test_get_candidate_respects_company_scope(repository, seeded):
    with pytest.raises(NotFound):
        await _service(repository).get_candidate(seeded.carol_id, seeded.globex_id)


@pytest.mark.asyncio
async def test_process_interview_recording(repository, seeded):
    store = FakeDocumentStore()
    recording = await _service(repository, store).process_interview_recording(
        seeded.carol_id, seeded.acme_id, AUDIO, recorded_by=seeded.hr_id
    )

    assert recording.id is not None
    assert recording.transcript == "Strong system design answers."
    assert recording.ai_generated_response == "Dear candidate, thank you."
    assert recording.recorded_by == seeded.hr_id
    assert recording.audio_url in store.stored
    assert "/recordings/carol_diaz_interview_" in recording.audio_url

    candidate = await _service(repository).get_candidate(seeded.carol_id, seeded.acme_id)
    assert [r.id for r in candidate.interview_recordings] == [recording.id]


@pytest.mark.asyncio
@pytest.mark.parametrize("assistant, error", [
    (FakeInterviewAssistant(transcribe_error=RuntimeError("audio unreadable")), TranscriptionFailure),
    (FakeInterviewAssistant(draft_error=RuntimeError("model overloaded")), ScoringFailure),
])
async def test_recording_failure_removes_audio(repository, seeded, session_factory, assistant, error):
    store = FakeDocumentStore()
    with pytest.raises(error):
        await _service(repository, store, assistant).process_interview_recording(
            seeded.carol_id, seeded.acme_id, AUDIO
        )

    assert store.stored == {}
    assert len(store.deleted) == 1
    assert await _recording_count(session_factory) == 0


@pytest.mark.asyncio
async def test_recording_requires_audio(repository, seeded):
    with pytest.raises(MissingDocument):
        await _service(repository).process_interview_recording(
            seeded.carol_id, seeded.acme_id, UploadedDocument(content=b"", filename="empty.mp3")
        )


@pytest.mark.asyncio
async def test_recording_for_foreign_candidate(repository, seeded):
    store = FakeDocumentStore()
    with pytest.raises(NotFound):
        await _service(repository, store).process_interview_recording(seeded.gary_id, seeded.acme_id, AUDIO)
    assert store.stored == {}


@pytest.mark.asyncio
async def test_send_candidate_email(repository, seeded):
    notifier = FakeNotifier()
    await _service(repository, notifier=notifier).send_candidate_email(
        seeded.dan_id, seeded.acme_id, "  Can you do Tuesday at 10?\nThanks  ", subject="Interview slot"
    )

    message = notifier.sent[0]
    assert message["to"] == "dan@example.com"
    assert message["subject"] == "Interview slot"
    assert message["template"] is EmailTemplate.CUSTOM
    assert message["context"]["body"] == "Can you do Tuesday at 10?\nThanks"
    assert message["cc"] == ["hannah@acme.test", "jobs@acme.test"]


@pytest.mark.asyncio
async def test_send_candidate_email_default_subject(repository, seeded):
    notifier = FakeNotifier()
    await _service(repository, notifier=notifier).send_candidate_email(seeded.dan_id, seeded.acme_id, "Hello")
    assert notifier.sent[0]["subject"] == "Regarding your application - Backend Engineer"


@pytest.mark.asyncio
async def test_send_candidate_email_requires_body(repository, seeded):
    notifier = FakeNotifier()
    with pytest.raises(InvalidInput):
        await _service(repository, notifier=notifier).send_candidate_email(seeded.dan_id, seeded.acme_id, "   ")
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_send_candidate_email_surfaces_delivery_failure(repository, seeded):
    with pytest.raises(NotificationFailure):
        await _service(repository, notifier=FakeNotifier(fail_all=True)).send_candidate_email(
            seeded.dan_id, seeded.acme_id, "Hello"
        )
