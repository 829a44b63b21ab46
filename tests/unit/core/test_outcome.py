"""Tests for best-effort outcomes."""

import asyncio
import logging

import pytest

from core.exceptions import (
    ExtractionFailure,
    NotificationFailure,
    ScoringFailure,
)
from core.outcome import Outcome, attempt


async def _value(value):
    return value


async def _raise(exc):
    raise exc


async def _slow():
    await asyncio.sleep(5)
    return "late"


@pytest.mark.asyncio
async def test_attempt_success():
    outcome = await attempt(_value(42), failure=ScoringFailure)
    assert outcome.ok
    assert outcome.value == 42
    assert outcome.error is None


@pytest.mark.asyncio
async def test_attempt_wraps_foreign_exception():
    outcome = await attempt(_raise(RuntimeError("provider exploded")), failure=ScoringFailure)
    assert not outcome.ok
    assert isinstance(outcome.error, ScoringFailure)
    assert "provider exploded" in outcome.error.message


@pytest.mark.asyncio
async def test_attempt_keeps_matching_failure():
    original = ScoringFailure("bad json")
    outcome = await attempt(_raise(original), failure=ScoringFailure)
    assert outcome.error is original


@pytest.mark.asyncio
async def test_attempt_rewraps_other_enrichment_failure():
    outcome = await attempt(_raise(ExtractionFailure("corrupt")), failure=NotificationFailure)
    assert isinstance(outcome.error, NotificationFailure)
    assert outcome.error.message == "corrupt"


@pytest.mark.asyncio
async def test_attempt_timeout_is_ordinary_failure():
    outcome = await attempt(_slow(), failure=NotificationFailure, timeout=0.01)
    assert isinstance(outcome.error, NotificationFailure)
    assert "timed out" in outcome.error.message


@pytest.mark.asyncio
async def test_attempt_propagates_cancellation():
    with pytest.raises(asyncio.CancelledError):
        await attempt(_raise(asyncio.CancelledError()), failure=ScoringFailure)


def test_skip_is_not_ok_and_has_no_error():
    outcome = Outcome.skip()
    assert not outcome.ok
    assert outcome.error is None
    assert outcome.value_or("fallback") == "fallback"


def test_value_or():
    assert Outcome.success(3).value_or(0) == 3
    assert Outcome.failure(ScoringFailure("x")).value_or(0) == 0


def test_log_failure_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="core.outcome"):
        Outcome.failure(ScoringFailure("malformed")).log_failure("scoring", job_id=7)

    assert "scoring" in caplog.text
    assert "SCORING_FAILURE" in caplog.text
    assert "job_id=7" in caplog.text


def test_log_failure_silent_on_success(caplog):
    with caplog.at_level(logging.WARNING, logger="core.outcome"):
        Outcome.success(True).log_failure("email")
        Outcome.skip().log_failure("email")
    assert caplog.text == ""
