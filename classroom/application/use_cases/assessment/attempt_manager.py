"""
Attempt 상태 머신 Use Case - 도메인/포트만 사용 (Django/openai 미사용)

in_progress -> submitted (terminal).

🔥 제출(submit) 순서
1) 트랜잭션 밖에서 모든 답안 채점 (AI 호출이 트랜잭션을 붙잡지 않도록)
2) 트랜잭션 안에서 attempt lock → 상태 재확인 → 채점 이후 바뀐 답안만 재채점
   → 답안 저장 → 집계 → SUBMITTED 전이
3) commit 이후 grade_finalized 이벤트 발행

어느 단계든 예외가 나면 전부 rollback 되고 attempt는 in_progress로 남는다 (재제출 가능).
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from classroom.application.ports.events import EventPublisher, GradeFinalized, NullEventPublisher
from classroom.application.ports.unit_of_work import AssessmentUnitOfWork
from classroom.application.services.answer_grader import AnswerGrader
from classroom.domain.assessment.entities import (
    Answer,
    AnsweredQuestion,
    AssessmentKind,
    Attempt,
    AttemptActivity,
    AttemptResult,
    AttemptStatus,
    Question,
)
from classroom.domain.assessment.errors import (
    AssessmentDomainError,
    AssessmentNotFound,
    AttemptLimitExceeded,
    AttemptNotFound,
    AttemptOwnershipError,
    InProgressAttemptConflict,
    QuestionNotInAssessment,
)
from classroom.domain.assessment.grading import normalize_payload
from classroom.domain.assessment.scoring import ScoreAggregator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttemptManager:
    def __init__(
        self,
        uow: AssessmentUnitOfWork,
        grader: AnswerGrader,
        aggregator: Optional[ScoreAggregator] = None,
        events: Optional[EventPublisher] = None,
    ) -> None:
        self.uow = uow
        self.grader = grader
        self.aggregator = aggregator or ScoreAggregator()
        self.events = events or NullEventPublisher()

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _load_attempt(self, attempt_id: int, user_id: Optional[int] = None) -> Attempt:
        attempt = self.uow.attempts.get(int(attempt_id))
        if attempt is None:
            raise AttemptNotFound(f"Attempt {attempt_id} not found")
        self._check_owner(attempt, user_id)
        return attempt

    @staticmethod
    def _check_owner(attempt: Attempt, user_id: Optional[int]) -> None:
        if user_id is not None and int(attempt.user_id) != int(user_id):
            raise AttemptOwnershipError(
                f"Attempt {attempt.attempt_id} does not belong to user {user_id}"
            )

    def _grade(self, answer: Answer, question: Optional[Question]) -> Answer:
        return answer.with_outcome(self.grader.grade(question, answer.payload))

    # -----------------------------
    # Public API
    # -----------------------------
    def start(
        self,
        *,
        user_id: int,
        kind: AssessmentKind,
        assessment_id: int,
        classlist_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Attempt:
        """
        진행 중 attempt가 있으면 그대로 반환 (resume).
        없으면 attempts_allowed 검사 후 attempt_number = 기존 횟수 + 1 로 생성.
        """
        kind = AssessmentKind(kind)
        now = now or _utcnow()

        assessment = self.uow.assessments.get(kind, int(assessment_id))
        if assessment is None:
            raise AssessmentNotFound(f"{kind.value} {assessment_id} not found")

        try:
            with self.uow:
                existing = self.uow.attempts.lock_for_user(kind, assessment.assessment_id, int(user_id))

                in_progress = next((a for a in existing if a.is_active()), None)
                if in_progress is not None:
                    return in_progress

                prior = len(existing)
                if prior >= int(assessment.attempts_allowed):
                    raise AttemptLimitExceeded(
                        f"Attempt limit reached for {kind.value} {assessment_id}: "
                        f"{prior}/{assessment.attempts_allowed}"
                    )

                attempt = self.uow.attempts.create(
                    Attempt(
                        kind=kind,
                        assessment_id=assessment.assessment_id,
                        user_id=int(user_id),
                        attempt_number=prior + 1,
                        status=AttemptStatus.IN_PROGRESS,
                        classlist_id=classlist_id,
                        started_at=now,
                    )
                )
        except InProgressAttemptConflict:
            # 동시 start (더블클릭): 먼저 만든 쪽의 attempt를 돌려준다
            winner = self.uow.attempts.find_in_progress(kind, assessment.assessment_id, int(user_id))
            if winner is None:
                raise
            return winner

        logger.info(
            "attempt_started attempt_id=%s kind=%s assessment_id=%s user_id=%s number=%s",
            attempt.attempt_id,
            kind.value,
            assessment_id,
            user_id,
            attempt.attempt_number,
        )
        return attempt

    def save_answer(
        self,
        *,
        attempt_id: int,
        question_id: int,
        raw_answer: Any,
        user_id: Optional[int] = None,
    ) -> Answer:
        with self.uow:
            attempt = self.uow.attempts.get_for_update(int(attempt_id))
            if attempt is None:
                raise AttemptNotFound(f"Attempt {attempt_id} not found")
            self._check_owner(attempt, user_id)
            attempt.ensure_active()

            question = self.uow.questions.get(int(question_id))
            if (
                question is None
                or not question.is_active
                or not question.belongs_to(attempt.kind, attempt.assessment_id)
            ):
                raise QuestionNotInAssessment(
                    f"Question {question_id} is not part of {attempt.kind.value} {attempt.assessment_id}"
                )

            return self.uow.answers.upsert(
                attempt.attempt_id,
                question.question_id,
                normalize_payload(raw_answer),
            )

    def submit(
        self,
        *,
        attempt_id: int,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Attempt:
        attempt = self._load_attempt(attempt_id, user_id)
        attempt.ensure_active()

        # 1) 트랜잭션 밖 채점
        answers = self.uow.answers.list_for_attempt(attempt.attempt_id)
        questions = self.uow.questions.get_many(a.question_id for a in answers)
        pre_graded: dict[int, tuple[tuple[str, ...], Answer]] = {}
        for a in answers:
            pre_graded[int(a.question_id)] = (
                tuple(a.payload),
                self._grade(a, questions.get(int(a.question_id))),
            )

        now = now or _utcnow()

        # 2) 트랜잭션: 저장 + 집계 + 전이
        try:
            with self.uow:
                locked = self.uow.attempts.get_for_update(attempt.attempt_id)
                if locked is None:
                    raise AttemptNotFound(f"Attempt {attempt_id} not found")
                locked.ensure_active()

                current = self.uow.answers.list_for_attempt(locked.attempt_id)
                unseen = [a.question_id for a in current if int(a.question_id) not in questions]
                if unseen:
                    questions.update(self.uow.questions.get_many(unseen))

                final = list(self._reconcile(current, pre_graded, questions))
                self.uow.answers.save_grades(
                    [a for a in final if int(a.question_id) in questions]
                )

                summary = self.aggregator.aggregate(final, questions)
                locked.finalize(summary, now)
                self.uow.attempts.save(locked)

                event = GradeFinalized(
                    attempt_id=int(locked.attempt_id),
                    assessment_kind=locked.kind.value,
                    assessment_id=int(locked.assessment_id),
                    user_id=int(locked.user_id),
                    score=int(locked.score or 0),
                    total_points=int(locked.total_points),
                    percentage=locked.percentage,
                    submitted_at=now,
                )
                self.uow.on_commit(lambda: self.events.grade_finalized(event))
        except AssessmentDomainError:
            raise
        except Exception:
            logger.exception(
                "attempt_submit_failed attempt_id=%s (rolled back, still in_progress)",
                attempt_id,
            )
            raise

        logger.info(
            "attempt_submitted attempt_id=%s score=%s/%s percentage=%s time_spent=%s",
            locked.attempt_id,
            locked.score,
            locked.total_points,
            locked.percentage,
            locked.time_spent_seconds,
        )
        return locked

    def _reconcile(
        self,
        current: Iterable[Answer],
        pre_graded: dict[int, tuple[tuple[str, ...], Answer]],
        questions: dict[int, Question],
    ) -> Iterable[Answer]:
        """트랜잭션 밖 채점 이후 payload가 바뀌었거나 새로 생긴 답안만 다시 채점."""
        for a in current:
            prev = pre_graded.get(int(a.question_id))
            if prev is not None and prev[0] == tuple(a.payload):
                yield replace(prev[1], answer_id=a.answer_id)
            else:
                yield self._grade(a, questions.get(int(a.question_id)))

    def record_activity(
        self,
        *,
        attempt_id: int,
        user_id: int,
        activity_type: str,
        description: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> AttemptActivity:
        """
        응시 무결성 이벤트 기록.
        제출 직전/직후 이벤트(exam_ended 등)도 받아야 하므로 상태와 무관하게 허용.
        """
        activity_type = str(activity_type or "").strip()
        if not activity_type:
            raise ValueError("activity_type is required")

        attempt = self._load_attempt(attempt_id, user_id)
        if not attempt.is_active():
            logger.info(
                "attempt_activity_after_submit attempt_id=%s status=%s activity_type=%s",
                attempt.attempt_id,
                attempt.status.value,
                activity_type,
            )

        with self.uow:
            return self.uow.activities.add(
                AttemptActivity(
                    attempt_id=int(attempt.attempt_id),
                    activity_type=activity_type,
                    description=description,
                    metadata=dict(metadata or {}),
                    occurred_at=now or _utcnow(),
                )
            )

    def result(self, *, attempt_id: int, user_id: Optional[int] = None) -> AttemptResult:
        attempt = self._load_attempt(attempt_id, user_id)
        answers = self.uow.answers.list_for_attempt(attempt.attempt_id)
        questions = self.uow.questions.get_many(a.question_id for a in answers)
        activities = self.uow.activities.list_for_attempt(attempt.attempt_id)

        return AttemptResult(
            attempt=attempt,
            answers=tuple(
                AnsweredQuestion(answer=a, question=questions.get(int(a.question_id)))
                for a in answers
            ),
            activities=tuple(activities),
        )
