"""
Test: AttemptManager - start/resume/limit, 답안 저장, 제출 채점, 롤백, 활동 기록 (Django ORM, SQLite).
"""
from datetime import timedelta
from decimal import Decimal

import pytest

from classroom.adapters.db.django.repositories_assessment import DjangoAttemptRepository
from classroom.adapters.db.django.uow import DjangoUnitOfWork
from classroom.application.ports.evaluation import EvaluationResponse
from classroom.application.services.answer_grader import AnswerGrader
from classroom.application.use_cases.assessment.attempt_manager import AttemptManager
from classroom.domain.assessment.entities import AssessmentKind, Attempt, AttemptStatus
from classroom.domain.assessment.errors import (
    AssessmentNotFound,
    AttemptLimitExceeded,
    AttemptNotActive,
    AttemptNotFound,
    AttemptOwnershipError,
    InProgressAttemptConflict,
    QuestionNotInAssessment,
)
from classroom.domain.assessment.grading import MANUAL_REVIEW_MARKER

from tests.conftest import T0, FakeGateway

pytestmark = pytest.mark.django_db

QUIZ = AssessmentKind.QUIZ
STUDENT = 501


def _answer_all_correct(manager, attempt, questions):
    manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="B")
    manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["multi"].id, raw_answer=["C", "A"])
    manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["tf"].id, raw_answer="true")
    manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["essay"].id, raw_answer="Light to sugar.")


class TestStart:
    def test_creates_first_attempt(self, manager, quiz):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, classlist_id="CL-1", now=T0)
        assert attempt.attempt_id is not None
        assert attempt.attempt_number == 1
        assert attempt.status == AttemptStatus.IN_PROGRESS
        assert attempt.started_at == T0
        assert attempt.classlist_id == "CL-1"

    def test_double_start_resumes_same_attempt(self, manager, quiz):
        first = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        second = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0 + timedelta(seconds=1))
        assert second.attempt_id == first.attempt_id

        from apps.domains.assessments.models import Attempt as AttemptModel
        assert AttemptModel.objects.filter(user_id=STUDENT, status="in_progress").count() == 1

    def test_attempt_numbers_increase_after_submit(self, manager, quiz, questions):
        first = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.submit(attempt_id=first.attempt_id, now=T0 + timedelta(minutes=5))
        second = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0 + timedelta(minutes=6))
        assert second.attempt_number == 2

    def test_limit_exceeded(self, manager, quiz, questions):
        for i in range(quiz.attempts_allowed):
            a = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
            manager.submit(attempt_id=a.attempt_id, now=T0 + timedelta(minutes=i + 1))

        with pytest.raises(AttemptLimitExceeded):
            manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0 + timedelta(hours=1))

    def test_in_progress_attempt_resumes_at_limit(self, manager, quiz):
        quiz.attempts_allowed = 1
        quiz.save()
        first = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        again = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0 + timedelta(minutes=1))
        assert again.attempt_id == first.attempt_id
        assert again.status == AttemptStatus.IN_PROGRESS

    def test_zero_attempts_allowed(self, manager, quiz):
        quiz.attempts_allowed = 0
        quiz.save()
        with pytest.raises(AttemptLimitExceeded):
            manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)

    def test_limit_is_per_user(self, manager, quiz, questions):
        quiz.attempts_allowed = 1
        quiz.save()
        a = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.submit(attempt_id=a.attempt_id, now=T0)
        other = manager.start(user_id=STUDENT + 1, kind=QUIZ, assessment_id=quiz.id, now=T0)
        assert other.attempt_number == 1

    def test_quiz_and_examination_are_separate(self, manager, quiz):
        from apps.domains.assessments.models import Examination
        exam = Examination.objects.create(title="Midterm", classlist_id="CL-1", attempts_allowed=1)
        q_attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        e_attempt = manager.start(user_id=STUDENT, kind=AssessmentKind.EXAMINATION, assessment_id=exam.id, now=T0)
        assert q_attempt.attempt_id != e_attempt.attempt_id

    def test_unknown_assessment(self, manager, db):
        with pytest.raises(AssessmentNotFound):
            manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=999999, now=T0)

    def test_second_in_progress_insert_is_rejected(self, quiz):
        repo = DjangoAttemptRepository()
        attempt = Attempt(kind=QUIZ, assessment_id=quiz.id, user_id=STUDENT, attempt_number=1, started_at=T0)
        repo.create(attempt)
        with pytest.raises(InProgressAttemptConflict):
            repo.create(Attempt(kind=QUIZ, assessment_id=quiz.id, user_id=STUDENT, attempt_number=2, started_at=T0))


class TestSaveAnswer:
    def test_upsert_overwrites_payload(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="A")
        saved = manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="B")
        assert saved.payload == ["B"]

        from apps.domains.assessments.models import Answer as AnswerModel
        assert AnswerModel.objects.filter(attempt_id=attempt.attempt_id).count() == 1

    def test_list_payload_is_kept(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        saved = manager.save_answer(
            attempt_id=attempt.attempt_id, question_id=questions["multi"].id, raw_answer=["A", "C"]
        )
        assert saved.payload == ["A", "C"]

    def test_question_from_other_assessment(self, manager, quiz, questions):
        from apps.domains.assessments.models import Question, Quiz
        other = Quiz.objects.create(title="Other", classlist_id="CL-2")
        foreign = Question.objects.create(
            assessment_kind="quiz", assessment_id=other.id, type="true_false", text="?", correct_answers=["True"]
        )
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        with pytest.raises(QuestionNotInAssessment):
            manager.save_answer(attempt_id=attempt.attempt_id, question_id=foreign.id, raw_answer="True")

    def test_inactive_question_is_rejected(self, manager, quiz, questions):
        questions["tf"].is_active = False
        questions["tf"].save()
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        with pytest.raises(QuestionNotInAssessment):
            manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["tf"].id, raw_answer="True")

    def test_after_submit_is_rejected(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.submit(attempt_id=attempt.attempt_id, now=T0)
        with pytest.raises(AttemptNotActive):
            manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="B")

    def test_wrong_owner(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        with pytest.raises(AttemptOwnershipError):
            manager.save_answer(
                attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="B", user_id=STUDENT + 1
            )

    def test_unknown_attempt(self, manager, db):
        with pytest.raises(AttemptNotFound):
            manager.save_answer(attempt_id=424242, question_id=1, raw_answer="B")


class TestSubmit:
    def test_full_marks(self, manager, quiz, questions, gateway, publisher, django_capture_on_commit_callbacks):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        _answer_all_correct(manager, attempt, questions)

        with django_capture_on_commit_callbacks(execute=True):
            done = manager.submit(attempt_id=attempt.attempt_id, user_id=STUDENT, now=T0 + timedelta(minutes=12))

        assert done.status == AttemptStatus.SUBMITTED
        assert done.score == 16
        assert done.total_points == 16
        assert done.percentage == Decimal("100.00")
        assert done.time_spent_seconds == 720
        assert done.submitted_at == T0 + timedelta(minutes=12)
        assert len(gateway.calls) == 1

        assert len(publisher.grades) == 1
        event = publisher.grades[0]
        assert event.attempt_id == attempt.attempt_id
        assert event.score == 16
        assert event.assessment_kind == "quiz"

    def test_partial_score_and_percentage(self, quiz, questions, publisher):
        gw = FakeGateway(responses=[
            EvaluationResponse.success(points_earned=4, percentage=Decimal("40"), feedback="Too short."),
        ])
        manager = AttemptManager(DjangoUnitOfWork(), AnswerGrader(gw), events=publisher)
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="A")
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["multi"].id, raw_answer=["A"])
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["tf"].id, raw_answer="True")
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["essay"].id, raw_answer="Sun.")

        done = manager.submit(attempt_id=attempt.attempt_id, now=T0 + timedelta(minutes=3))
        assert done.score == 5
        assert done.total_points == 16
        assert done.percentage == Decimal("31.25")

        result = manager.result(attempt_id=attempt.attempt_id)
        by_question = {r.answer.question_id: r.answer for r in result.answers}
        essay = by_question[questions["essay"].id]
        assert essay.points_earned == 4
        assert essay.is_correct is False
        assert essay.feedback == "Too short."
        assert by_question[questions["tf"].id].is_correct is True

    def test_only_answered_questions_count(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="B")
        done = manager.submit(attempt_id=attempt.attempt_id, now=T0)
        assert done.score == 3
        assert done.total_points == 3
        assert done.percentage == Decimal("100.00")

    def test_empty_attempt(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        done = manager.submit(attempt_id=attempt.attempt_id, now=T0)
        assert done.score == 0
        assert done.total_points == 0
        assert done.percentage == Decimal("0.00")

    def test_essay_timeout_still_submits(self, quiz, questions, publisher):
        gw = FakeGateway(error=TimeoutError("timed out"))
        manager = AttemptManager(DjangoUnitOfWork(), AnswerGrader(gw), events=publisher)
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        _answer_all_correct(manager, attempt, questions)

        done = manager.submit(attempt_id=attempt.attempt_id, now=T0 + timedelta(minutes=1))
        assert done.status == AttemptStatus.SUBMITTED
        assert done.score == 6
        assert done.total_points == 16

        result = manager.result(attempt_id=attempt.attempt_id)
        essay = next(r.answer for r in result.answers if r.answer.question_id == questions["essay"].id)
        assert essay.points_earned == 0
        assert essay.feedback.startswith(MANUAL_REVIEW_MARKER)

    def test_orphan_answer_is_ignored(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["mc"].id, raw_answer="B")
        manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["tf"].id, raw_answer="True")
        questions["tf"].delete()

        done = manager.submit(attempt_id=attempt.attempt_id, now=T0)
        assert done.score == 3
        assert done.total_points == 3

    def test_clock_skew_clamps_time_spent(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        done = manager.submit(attempt_id=attempt.attempt_id, now=T0 - timedelta(minutes=2))
        assert done.time_spent_seconds == 0

    def test_double_submit_is_rejected(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.submit(attempt_id=attempt.attempt_id, now=T0)
        with pytest.raises(AttemptNotActive):
            manager.submit(attempt_id=attempt.attempt_id, now=T0)

    def test_submit_wrong_owner(self, manager, quiz, questions):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        with pytest.raises(AttemptOwnershipError):
            manager.submit(attempt_id=attempt.attempt_id, user_id=STUDENT + 7, now=T0)

    def test_failure_rolls_back_everything(self, quiz, questions, gateway, publisher, django_capture_on_commit_callbacks):
        class ExplodingAggregator:
            def aggregate(self, answers, questions):
                raise RuntimeError("db went away")

        broken = AttemptManager(DjangoUnitOfWork(), AnswerGrader(gateway), ExplodingAggregator(), publisher)
        attempt = broken.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        _answer_all_correct(broken, attempt, questions)

        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(RuntimeError):
                broken.submit(attempt_id=attempt.attempt_id, now=T0)

        from apps.domains.assessments.models import Answer as AnswerModel
        from apps.domains.assessments.models import Attempt as AttemptModel
        row = AttemptModel.objects.get(id=attempt.attempt_id)
        assert row.status == "in_progress"
        assert row.score is None
        assert row.submitted_at is None
        assert not AnswerModel.objects.filter(attempt_id=attempt.attempt_id, points_earned__gt=0).exists()
        assert publisher.grades == []

        # 같은 attempt 재제출 가능
        healthy = AttemptManager(DjangoUnitOfWork(), AnswerGrader(gateway), events=publisher)
        done = healthy.submit(attempt_id=attempt.attempt_id, now=T0 + timedelta(minutes=1))
        assert done.score == 16


class TestActivity:
    def test_records_and_lists_activity(self, manager, quiz):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.record_activity(
            attempt_id=attempt.attempt_id,
            user_id=STUDENT,
            activity_type="tab_switch",
            description="Left the exam tab",
            metadata={"count": 1},
            now=T0 + timedelta(seconds=30),
        )
        result = manager.result(attempt_id=attempt.attempt_id)
        assert len(result.activities) == 1
        assert result.activities[0].activity_type == "tab_switch"
        assert result.activities[0].metadata == {"count": 1}

    def test_allowed_after_submit(self, manager, quiz):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        manager.submit(attempt_id=attempt.attempt_id, now=T0)
        activity = manager.record_activity(
            attempt_id=attempt.attempt_id, user_id=STUDENT, activity_type="exam_ended", now=T0
        )
        assert activity.activity_id is not None

    def test_requires_type(self, manager, quiz):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        with pytest.raises(ValueError):
            manager.record_activity(attempt_id=attempt.attempt_id, user_id=STUDENT, activity_type="  ")

    def test_requires_owner(self, manager, quiz):
        attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
        with pytest.raises(AttemptOwnershipError):
            manager.record_activity(attempt_id=attempt.attempt_id, user_id=STUDENT + 1, activity_type="copy_paste")


class TestWiring:
    def test_built_manager_sends_grade_finalized_signal(self, quiz, questions, gateway, django_capture_on_commit_callbacks):
        from apps.domains.assessments.services.attempt_service import build_attempt_manager
        from apps.domains.assessments.signals import grade_finalized

        received = []

        def on_grade(sender, event, **kwargs):
            received.append(event)

        grade_finalized.connect(on_grade)
        try:
            manager = build_attempt_manager(gateway=gateway)
            attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
            manager.save_answer(attempt_id=attempt.attempt_id, question_id=questions["essay"].id, raw_answer="Sunlight.")
            with django_capture_on_commit_callbacks(execute=True):
                manager.submit(attempt_id=attempt.attempt_id, now=T0 + timedelta(minutes=2))
        finally:
            grade_finalized.disconnect(on_grade)

        assert [e.attempt_id for e in received] == [attempt.attempt_id]
        assert received[0].score == 10
        assert received[0].percentage == Decimal("100.00")

    def test_failing_receiver_does_not_break_submit(self, quiz, questions, gateway, django_capture_on_commit_callbacks):
        from apps.domains.assessments.services.attempt_service import build_attempt_manager
        from apps.domains.assessments.signals import grade_finalized

        def broken(sender, event, **kwargs):
            raise RuntimeError("mailer down")

        grade_finalized.connect(broken)
        try:
            manager = build_attempt_manager(gateway=gateway)
            attempt = manager.start(user_id=STUDENT, kind=QUIZ, assessment_id=quiz.id, now=T0)
            with django_capture_on_commit_callbacks(execute=True):
                done = manager.submit(attempt_id=attempt.attempt_id, now=T0)
        finally:
            grade_finalized.disconnect(broken)

        assert done.status == AttemptStatus.SUBMITTED
