"""
Shared test fixtures.
AI 평가는 FakeGateway 로 대체 (네트워크 호출 없음), 이벤트는 RecordingPublisher 로 수집.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from classroom.adapters.db.django.uow import DjangoUnitOfWork
from classroom.application.ports.evaluation import EvaluationResponse
from classroom.application.services.answer_grader import AnswerGrader
from classroom.application.use_cases.assessment.attempt_manager import AttemptManager

T0 = datetime(2024, 1, 10, 1, 0, 0, tzinfo=timezone.utc)


class FakeGateway:
    """응답 목록을 순서대로 돌려준다. error 가 있으면 매 호출 raise."""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def evaluate(self, request, *, timeout_seconds):
        self.calls.append((request, timeout_seconds))
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return EvaluationResponse.success(
            points_earned=request.max_points,
            percentage=Decimal("100"),
            feedback="Great answer.",
        )


class RecordingPublisher:
    def __init__(self):
        self.grades = []
        self.status_changes = []

    def grade_finalized(self, event):
        self.grades.append(event)

    def submission_status_changed(self, event):
        self.status_changes.append(event)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def manager(gateway, publisher):
    return AttemptManager(
        uow=DjangoUnitOfWork(),
        grader=AnswerGrader(gateway, timeout_seconds=5),
        events=publisher,
    )


@pytest.fixture
def quiz(db):
    from apps.domains.assessments.models import Quiz
    return Quiz.objects.create(
        title="Unit 1 Quiz",
        classlist_id="CL-1",
        attempts_allowed=2,
        total_points=16,
    )


@pytest.fixture
def questions(quiz):
    """mc(3) + multi-select mc(2) + true/false(1) + essay(10) = 16점."""
    from apps.domains.assessments.models import Question

    def make(order, qtype, points, correct, text="", explanation=None, options=None):
        return Question.objects.create(
            assessment_kind="quiz",
            assessment_id=quiz.id,
            order=order,
            type=qtype,
            text=text or f"Question {order}",
            options=options or [],
            correct_answers=correct,
            explanation=explanation,
            points=points,
        )

    return {
        "mc": make(1, "multiple_choice", 3, ["B"], options=["A", "B", "C"]),
        "multi": make(2, "multiple_choice", 2, ["A", "C"], options=["A", "B", "C"]),
        "tf": make(3, "true_false", 1, ["True"]),
        "essay": make(
            4,
            "essay",
            10,
            [],
            text="Explain photosynthesis.",
            explanation="Light energy converted to chemical energy.",
        ),
    }
