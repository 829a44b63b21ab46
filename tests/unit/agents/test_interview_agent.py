"""Tests for the interview agent."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from agents.interview.agent import InterviewAgent
from core.exceptions import ScoringFailure, TranscriptionFailure


def _client_returning(*texts: str) -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        side_effect=[SimpleNamespace(text=text) for text in texts]
    )
    return client


@pytest.mark.asyncio
async def test_transcribe_sends_audio_part():
    client = _client_returning("  The candidate explained caching well.  ")
    agent = InterviewAgent(client=client)

    transcript = await agent.transcribe(b"ID3audio", "audio/mpeg")

    assert transcript == "The candidate explained caching well."
    contents = client.aio.models.generate_content.call_args.kwargs["contents"]
    assert contents[0].inline_data.data == b"ID3audio"
    assert contents[0].inline_data.mime_type == "audio/mpeg"


@pytest.mark.asyncio
async def test_transcribe_empty_result_fails():
    agent = InterviewAgent(client=_client_returning(""))
    with pytest.raises(TranscriptionFailure):
        await agent.transcribe(b"audio")


@pytest.mark.asyncio
async def test_draft_feedback_email_uses_transcript():
    client = _client_returning("Dear Alice, thank you for your time.")
    agent = InterviewAgent(client=client)

    draft = await agent.draft_feedback_email(
        "Great on APIs", candidate_name="Alice", position="Backend Engineer", company_name="Acme"
    )

    assert draft.startswith("Dear Alice")
    prompt = client.aio.models.generate_content.call_args.kwargs["contents"]
    assert "Great on APIs" in prompt
    assert "Backend Engineer" in prompt


@pytest.mark.asyncio
async def test_draft_feedback_email_empty_result_fails():
    agent = InterviewAgent(client=_client_returning("   "))
    with pytest.raises(ScoringFailure):
        await agent.draft_feedback_email("t", "Alice", "Engineer", "Acme")
