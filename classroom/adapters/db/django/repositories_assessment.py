"""
Assessment / Question / Attempt / Answer / AttemptActivity Repository - Django ORM 구현
(메서드 내부에서만 apps.domains.assessments import)
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from classroom.domain.assessment.entities import (
    Answer,
    Assessment,
    AssessmentKind,
    Attempt,
    AttemptActivity,
    AttemptStatus,
    Question,
)
from classroom.domain.assessment.errors import InProgressAttemptConflict


def _assessment_model(kind: AssessmentKind):
    from apps.domains.assessments.models import Examination, Quiz
    return Quiz if AssessmentKind(kind) == AssessmentKind.QUIZ else Examination


def _question_to_entity(m) -> Optional[Question]:
    if m is None:
        return None
    return Question(
        question_id=int(m.id),
        kind=AssessmentKind(m.assessment_kind),
        assessment_id=int(m.assessment_id),
        type=str(m.type or ""),
        points=int(m.points or 0),
        text=m.text or "",
        options=tuple(str(x) for x in (m.options or [])),
        correct_answers=tuple(str(x) for x in (m.correct_answers or [])),
        explanation=m.explanation,
        is_active=bool(m.is_active),
    )


def _attempt_to_entity(m) -> Optional[Attempt]:
    if m is None:
        return None
    return Attempt(
        attempt_id=int(m.id),
        kind=AssessmentKind(m.assessment_kind),
        assessment_id=int(m.assessment_id),
        user_id=int(m.user_id),
        attempt_number=int(m.attempt_number),
        status=AttemptStatus(m.status),
        classlist_id=m.classlist_id,
        score=m.score,
        total_points=int(m.total_points or 0),
        percentage=Decimal(m.percentage or 0).quantize(Decimal("0.01")),
        started_at=m.started_at,
        submitted_at=m.submitted_at,
        time_spent_seconds=m.time_spent_seconds,
    )


def _answer_to_entity(m) -> Answer:
    raw = m.answer
    if raw is None:
        payload = []
    elif isinstance(raw, list):
        payload = [str(x) for x in raw]
    else:
        payload = [str(raw)]
    return Answer(
        answer_id=int(m.id),
        attempt_id=int(m.attempt_id),
        question_id=int(m.question_id),
        payload=payload,
        is_correct=bool(m.is_correct),
        points_earned=int(m.points_earned or 0),
        feedback=m.feedback,
    )


def _activity_to_entity(m) -> AttemptActivity:
    return AttemptActivity(
        activity_id=int(m.id),
        attempt_id=int(m.attempt_id),
        activity_type=m.activity_type,
        description=m.description,
        metadata=dict(m.metadata or {}),
        occurred_at=m.occurred_at,
    )


class DjangoAssessmentRepository:
    def get(self, kind: AssessmentKind, assessment_id: int) -> Optional[Assessment]:
        model = _assessment_model(kind)
        m = model.objects.filter(id=assessment_id).first()
        if m is None:
            return None
        return Assessment(
            kind=AssessmentKind(kind),
            assessment_id=int(m.id),
            title=m.title,
            attempts_allowed=int(m.attempts_allowed or 0),
            total_points=int(m.total_points or 0),
        )


class DjangoQuestionRepository:
    def get(self, question_id: int) -> Optional[Question]:
        from apps.domains.assessments.models import Question as QuestionModel
        return _question_to_entity(QuestionModel.objects.filter(id=question_id).first())

    def get_many(self, question_ids: Iterable[int]) -> dict[int, Question]:
        from apps.domains.assessments.models import Question as QuestionModel
        ids = {int(q) for q in question_ids}
        if not ids:
            return {}
        return {
            int(m.id): _question_to_entity(m)
            for m in QuestionModel.objects.filter(id__in=ids)
        }


class DjangoAttemptRepository:
    """AttemptRepository 구현. select_for_update 계열은 UoW 트랜잭션 안에서만 호출."""

    def get(self, attempt_id: int) -> Optional[Attempt]:
        from apps.domains.assessments.models import Attempt as AttemptModel
        return _attempt_to_entity(AttemptModel.objects.filter(id=attempt_id).first())

    def get_for_update(self, attempt_id: int) -> Optional[Attempt]:
        from apps.domains.assessments.models import Attempt as AttemptModel
        m = AttemptModel.objects.select_for_update().filter(id=attempt_id).first()
        return _attempt_to_entity(m)

    def lock_for_user(self, kind: AssessmentKind, assessment_id: int, user_id: int) -> list[Attempt]:
        from apps.domains.assessments.models import Attempt as AttemptModel
        qs = (
            AttemptModel.objects.select_for_update()
            .filter(
                assessment_kind=AssessmentKind(kind).value,
                assessment_id=assessment_id,
                user_id=user_id,
            )
            .order_by("attempt_number")
        )
        return [_attempt_to_entity(m) for m in qs]

    def find_in_progress(self, kind: AssessmentKind, assessment_id: int, user_id: int) -> Optional[Attempt]:
        from apps.domains.assessments.models import Attempt as AttemptModel
        m = (
            AttemptModel.objects.filter(
                assessment_kind=AssessmentKind(kind).value,
                assessment_id=assessment_id,
                user_id=user_id,
                status=AttemptStatus.IN_PROGRESS.value,
            )
            .order_by("-attempt_number")
            .first()
        )
        return _attempt_to_entity(m)

    def create(self, attempt: Attempt) -> Attempt:
        from django.db import IntegrityError, transaction
        from apps.domains.assessments.models import Attempt as AttemptModel

        try:
            # savepoint: 제약 위반이 바깥 트랜잭션을 깨지 않도록
            with transaction.atomic():
                m = AttemptModel.objects.create(
                    assessment_kind=attempt.kind.value,
                    assessment_id=attempt.assessment_id,
                    user_id=attempt.user_id,
                    classlist_id=attempt.classlist_id,
                    attempt_number=attempt.attempt_number,
                    status=attempt.status.value,
                    total_points=attempt.total_points,
                    percentage=attempt.percentage,
                    started_at=attempt.started_at,
                )
        except IntegrityError as e:
            raise InProgressAttemptConflict(
                f"Concurrent attempt for {attempt.kind.value} {attempt.assessment_id} "
                f"user {attempt.user_id}"
            ) from e
        return _attempt_to_entity(m)

    def save(self, attempt: Attempt) -> None:
        from django.utils import timezone
        from apps.domains.assessments.models import Attempt as AttemptModel
        AttemptModel.objects.filter(id=attempt.attempt_id).update(
            status=attempt.status.value,
            score=attempt.score,
            total_points=attempt.total_points,
            percentage=attempt.percentage,
            submitted_at=attempt.submitted_at,
            time_spent_seconds=attempt.time_spent_seconds,
            updated_at=timezone.now(),
        )


class DjangoAnswerRepository:
    def list_for_attempt(self, attempt_id: int) -> list[Answer]:
        from apps.domains.assessments.models import Answer as AnswerModel
        qs = AnswerModel.objects.filter(attempt_id=attempt_id).order_by("question_id")
        return [_answer_to_entity(m) for m in qs]

    def upsert(self, attempt_id: int, question_id: int, payload: list[str]) -> Answer:
        from apps.domains.assessments.models import Answer as AnswerModel
        m, _ = AnswerModel.objects.update_or_create(
            attempt_id=attempt_id,
            question_id=question_id,
            defaults={"answer": list(payload)},
        )
        return _answer_to_entity(m)

    def save_grades(self, answers: Iterable[Answer]) -> None:
        from django.utils import timezone
        from apps.domains.assessments.models import Answer as AnswerModel
        now = timezone.now()
        for a in answers:
            if a.answer_id is None:
                continue
            AnswerModel.objects.filter(id=a.answer_id).update(
                is_correct=bool(a.is_correct),
                points_earned=int(a.points_earned),
                feedback=a.feedback,
                updated_at=now,
            )


class DjangoAttemptActivityRepository:
    def add(self, activity: AttemptActivity) -> AttemptActivity:
        from apps.domains.assessments.models import AttemptActivity as ActivityModel
        m = ActivityModel.objects.create(
            attempt_id=activity.attempt_id,
            activity_type=activity.activity_type,
            description=activity.description,
            metadata=dict(activity.metadata or {}),
            occurred_at=activity.occurred_at,
        )
        return _activity_to_entity(m)

    def list_for_attempt(self, attempt_id: int) -> list[AttemptActivity]:
        from apps.domains.assessments.models import AttemptActivity as ActivityModel
        qs = ActivityModel.objects.filter(attempt_id=attempt_id).order_by("occurred_at", "id")
        return [_activity_to_entity(m) for m in qs]
