"""
시험/퀴즈 응시 도메인 엔티티 - 순수 파이썬 (Django/ORM/openai 미사용)

상태 전이 규칙은 엔티티 메서드로 표현.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from classroom.domain.assessment.errors import AttemptNotActive


class AssessmentKind(str, Enum):
    """Attempt/Question의 다형 부모 (apps.domains.assessments choices와 동기화)."""
    QUIZ = "quiz"
    EXAMINATION = "examination"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"


# 정답 집합 비교로 채점 가능한 유형
OBJECTIVE_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE)
# AI 평가(또는 수동 검토)가 필요한 유형
SUBJECTIVE_TYPES = (QuestionType.SHORT_ANSWER, QuestionType.ESSAY)


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class Assessment:
    """Quiz / Examination 공통 capability."""
    kind: AssessmentKind
    assessment_id: int
    title: str = ""
    attempts_allowed: int = 1
    total_points: int = 0


@dataclass(frozen=True)
class Question:
    """응시 중에는 변하지 않는 문항 스냅샷."""
    question_id: int
    kind: AssessmentKind
    assessment_id: int
    type: str
    points: int
    text: str = ""
    options: Tuple[str, ...] = ()
    correct_answers: Tuple[str, ...] = ()
    explanation: Optional[str] = None
    is_active: bool = True

    @property
    def reference_answer(self) -> Optional[str]:
        """AI 평가용 참고 답안 (essay에서는 권위 없음)."""
        if not self.correct_answers:
            return None
        return ", ".join(self.correct_answers)

    def belongs_to(self, kind: AssessmentKind, assessment_id: int) -> bool:
        return self.kind == kind and int(self.assessment_id) == int(assessment_id)


@dataclass(frozen=True)
class GradeOutcome:
    is_correct: bool
    points_earned: int
    feedback: Optional[str] = None


@dataclass
class Answer:
    """
    문항 1개에 대한 응답. (question, attempt) 키로 upsert.
    payload는 항상 문자열 리스트 (단일/다중 응답 모두).
    """
    attempt_id: int
    question_id: int
    payload: list[str] = field(default_factory=list)
    answer_id: Optional[int] = None
    is_correct: bool = False
    points_earned: int = 0
    feedback: Optional[str] = None

    def with_outcome(self, outcome: GradeOutcome) -> "Answer":
        return replace(
            self,
            is_correct=bool(outcome.is_correct),
            points_earned=int(outcome.points_earned),
            feedback=outcome.feedback,
        )


@dataclass(frozen=True)
class ScoreSummary:
    score: int
    total_points: int
    percentage: Decimal


@dataclass
class Attempt:
    """
    학생 1명의 퀴즈/시험 1회 응시.

    in_progress -> submitted (terminal). 다른 전이는 없다.
    """
    kind: AssessmentKind
    assessment_id: int
    user_id: int
    attempt_number: int
    status: AttemptStatus = AttemptStatus.IN_PROGRESS
    attempt_id: Optional[int] = None
    classlist_id: Optional[str] = None
    score: Optional[int] = None
    total_points: int = 0
    percentage: Decimal = Decimal("0.00")
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    time_spent_seconds: Optional[int] = None

    def is_active(self) -> bool:
        return self.status == AttemptStatus.IN_PROGRESS

    def ensure_active(self) -> None:
        if not self.is_active():
            raise AttemptNotActive(
                f"Attempt {self.attempt_id} is not in progress: status={self.status.value}"
            )

    def finalize(self, summary: ScoreSummary, now: datetime) -> None:
        """
        IN_PROGRESS -> SUBMITTED.
        time_spent는 clock skew를 흡수하도록 0 이상으로 clamp.
        """
        self.ensure_active()
        self.score = int(summary.score)
        self.total_points = int(summary.total_points)
        self.percentage = summary.percentage
        if self.started_at is not None:
            self.time_spent_seconds = max(0, int((now - self.started_at).total_seconds()))
        else:
            self.time_spent_seconds = 0
        self.status = AttemptStatus.SUBMITTED
        self.submitted_at = now


@dataclass(frozen=True)
class AttemptActivity:
    """응시 중 무결성 이벤트 (tab_switch, focus_blur, copy_paste, ...)."""
    attempt_id: int
    activity_type: str
    occurred_at: datetime
    description: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    activity_id: Optional[int] = None


@dataclass(frozen=True)
class AnsweredQuestion:
    answer: Answer
    question: Optional[Question]


@dataclass(frozen=True)
class AttemptResult:
    """제출된 attempt 조회 모델."""
    attempt: Attempt
    answers: Tuple[AnsweredQuestion, ...]
    activities: Tuple[AttemptActivity, ...]
