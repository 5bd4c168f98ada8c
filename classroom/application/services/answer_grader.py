"""
AnswerGrader - 답안 1개 채점

객관식/OX는 로컬 정답 비교, 주관식/서술형은 AI 평가 게이트웨이에 위임.
게이트웨이가 어떤 식으로 실패해도 예외를 올리지 않고 0점 + 수동 검토 표시로 떨어진다.
(제출 트랜잭션이 채점 실패로 막히면 안 됨)
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from classroom.application.ports.evaluation import (
    EvaluationGateway,
    EvaluationRequest,
    EvaluationResponse,
)
from classroom.domain.assessment.entities import (
    GradeOutcome,
    OBJECTIVE_TYPES,
    Question,
    SUBJECTIVE_TYPES,
)
from classroom.domain.assessment.grading import (
    AI_CORRECT_THRESHOLD,
    clamp_points,
    grade_objective,
    manual_review_outcome,
    normalize_payload,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

_OBJECTIVE = {t.value for t in OBJECTIVE_TYPES}
_SUBJECTIVE = {t.value for t in SUBJECTIVE_TYPES}


class AnswerGrader:
    def __init__(self, gateway: EvaluationGateway, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.gateway = gateway
        self.timeout_seconds = float(timeout_seconds)

    def grade(self, question: Optional[Question], raw_answer: Any) -> GradeOutcome:
        # 문항이 사라진 답안은 no-op
        if question is None:
            return GradeOutcome(is_correct=False, points_earned=0, feedback=None)

        payload = normalize_payload(raw_answer)
        qtype = str(getattr(question.type, "value", question.type) or "").strip().lower()

        if qtype in _OBJECTIVE:
            return grade_objective(
                submitted=payload,
                correct=question.correct_answers,
                max_points=question.points,
            )

        if qtype in _SUBJECTIVE:
            return self._grade_with_ai(question, payload)

        logger.warning(
            "answer_grader unknown question type question_id=%s type=%s",
            question.question_id,
            qtype,
        )
        return manual_review_outcome("unsupported question type")

    # -----------------------------
    # AI 평가
    # -----------------------------
    def _grade_with_ai(self, question: Question, payload: list[str]) -> GradeOutcome:
        request = EvaluationRequest(
            question_text=question.text,
            student_answer=" ".join(payload),
            max_points=int(question.points),
            reference_answer=question.reference_answer,
            explanation=question.explanation,
        )

        try:
            response = self.gateway.evaluate(request, timeout_seconds=self.timeout_seconds)
        except Exception as e:
            logger.warning(
                "ai_grading_failed question_id=%s error=%s",
                question.question_id,
                e,
                extra={"question_id": question.question_id},
            )
            return manual_review_outcome()

        return self._outcome_from_response(question, response)

    def _outcome_from_response(self, question: Question, response: Any) -> GradeOutcome:
        if not isinstance(response, EvaluationResponse) or not response.ok:
            error = getattr(response, "error", None) or "malformed response"
            logger.warning(
                "ai_grading_fallback question_id=%s error=%s",
                question.question_id,
                error,
                extra={"question_id": question.question_id},
            )
            return manual_review_outcome()

        try:
            percentage = Decimal(response.percentage)
            if not percentage.is_finite():
                raise ValueError(percentage)
        except (InvalidOperation, TypeError, ValueError):
            logger.warning(
                "ai_grading_fallback question_id=%s error=invalid percentage %r",
                question.question_id,
                response.percentage,
            )
            return manual_review_outcome()

        return GradeOutcome(
            is_correct=percentage >= AI_CORRECT_THRESHOLD,
            points_earned=clamp_points(response.points_earned, question.points),
            feedback=response.feedback or None,
        )
