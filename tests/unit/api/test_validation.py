"""Tests for request validation helpers that run before any I/O."""

import pytest
from pydantic import ValidationError

from api.routes.v1.public import parse_answers
from api.schemas.candidates import CandidateInfo, QuestionResponse
from api.services.intake import answer_to_text, build_answers
from api.services.status import (
    BULK_UPDATE_STATUSES,
    parse_status,
    rejection_reason_for,
)
from core.exceptions import InvalidInput, InvalidStatus
from database.models import CandidateStatus, Job, Question, QuestionType


def _job() -> Job:
    return Job(
        id=1,
        title="Backend Engineer",
        questions=[
            Question(id=10, text="Experience?", type=QuestionType.TEXT, required=True, order_index=0),
            Question(id=11, text="Stack", type=QuestionType.CHECKBOX, required=False, order_index=1),
        ],
    )


class TestBuildAnswers:
    def test_one_row_per_submitted_question(self):
        rows = build_answers(_job(), {"10": "5 years", "11": ["Python", "Go"]})

        assert [(r.question_id, r.answer_text) for r in rows] == [
            (10, "5 years"),
            (11, '["Python", "Go"]'),
        ]

    def test_missing_optional_answer_is_omitted(self):
        rows = build_answers(_job(), {10: "5 years"})
        assert [r.question_id for r in rows] == [10]

    def test_missing_required_answer(self):
        with pytest.raises(InvalidInput, match="required"):
            build_answers(_job(), {"11": ["Python"]})

    def test_blank_required_answer(self):
        with pytest.raises(InvalidInput, match="required"):
            build_answers(_job(), {"10": "   "})

    def test_foreign_question_id(self):
        with pytest.raises(InvalidInput, match="does not belong"):
            build_answers(_job(), {"10": "5", "999": "sneaky"})

    def test_non_numeric_question_id(self):
        with pytest.raises(InvalidInput, match="Invalid question id"):
            build_answers(_job(), {"10": "5", "abc": "x"})

    def test_same_question_twice(self):
        with pytest.raises(InvalidInput, match="more than once"):
            build_answers(_job(), {"10": "5", 10: "6"})

    def test_job_without_questions_accepts_empty_map(self):
        assert build_answers(Job(id=2, title="x", questions=[]), None) == []


@pytest.mark.parametrize("value,expected", [
    ("  text  ", "text"),
    (None, ""),
    (3, "3"),
    (["a", "b"], '["a", "b"]'),
])
def test_answer_to_text(value, expected):
    assert answer_to_text(value) == expected


class TestParseStatus:
    @pytest.mark.parametrize("value", ["APPROVED", "approved", CandidateStatus.APPROVED])
    def test_accepts_known_status(self, value):
        assert parse_status(value) is CandidateStatus.APPROVED

    @pytest.mark.parametrize("value", ["ARCHIVED", "", None, 3])
    def test_rejects_unknown_status(self, value):
        with pytest.raises(InvalidStatus):
            parse_status(value)

    def test_bulk_rejects_pending(self):
        with pytest.raises(InvalidStatus):
            parse_status("PENDING", BULK_UPDATE_STATUSES)


@pytest.mark.parametrize("status,reason,expected", [
    (CandidateStatus.REJECTED, "  Not enough experience ", "Not enough experience"),
    (CandidateStatus.REJECTED, "   ", None),
    (CandidateStatus.REJECTED, None, None),
    (CandidateStatus.APPROVED, "ignored", None),
    (CandidateStatus.PENDING, "ignored", None),
])
def test_rejection_reason_for(status, reason, expected):
    assert rejection_reason_for(status, reason) == expected


class TestCandidateInfo:
    def test_normalizes_fields(self):
        info = CandidateInfo(name="  Alice Smith ", email="Alice@Example.COM", phone="  ")
        assert info.name == "Alice Smith"
        assert info.email == "alice@example.com"
        assert info.phone is None

    @pytest.mark.parametrize("kwargs", [
        {"name": "", "email": "alice@example.com"},
        {"name": "Alice", "email": "not-an-email"},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            CandidateInfo(**kwargs)


def test_question_options_split_from_storage():
    question = Question(
        id=1, text="Mode", type=QuestionType.RADIO, options="Remote\nHybrid\n", required=False, order_index=0
    )
    assert QuestionResponse.model_validate(question).options == ["Remote", "Hybrid"]


class TestParseAnswers:
    def test_empty(self):
        assert parse_answers(None) == {}
        assert parse_answers("  ") == {}

    def test_json_object(self):
        assert parse_answers('{"1": "yes"}') == {"1": "yes"}

    @pytest.mark.parametrize("raw", ["{broken", "[1, 2]"])
    def test_invalid(self, raw):
        with pytest.raises(InvalidInput):
            parse_answers(raw)
