"""
채점 정책 (순수 함수)

- 객관식/OX: trim + lower 정규화 후 집합 완전 일치 → 만점, 아니면 0점 (부분점 없음)
- 주관식/서술형: AI 평가 결과를 받아 점수 clamp / 정답 여부 판정
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from classroom.domain.assessment.entities import GradeOutcome

# AI 평가 결과를 정답으로 볼 최소 퍼센트
AI_CORRECT_THRESHOLD = Decimal("50")

# 수동 검토 필요 표시 (feedback prefix)
MANUAL_REVIEW_MARKER = "[manual-review]"


def normalize_text(s: Any) -> str:
    return str(s if s is not None else "").strip().lower()


def normalize_payload(raw: Any) -> list[str]:
    """scalar / list 모두 문자열 리스트로."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(x) if x is not None else "" for x in raw]
    return [str(raw)]


def normalized_set(values: Iterable[Any]) -> frozenset[str]:
    return frozenset(normalize_text(v) for v in values)


def grade_objective(
    *,
    submitted: Iterable[Any],
    correct: Iterable[Any],
    max_points: int,
) -> GradeOutcome:
    correct_set = normalized_set(correct)
    if not correct_set:
        return GradeOutcome(is_correct=False, points_earned=0)

    is_correct = normalized_set(submitted) == correct_set
    return GradeOutcome(
        is_correct=is_correct,
        points_earned=int(max_points) if is_correct else 0,
    )


def clamp_points(points: Any, max_points: int) -> int:
    try:
        p = int(points)
    except (TypeError, ValueError):
        return 0
    return max(0, min(int(max_points), p))


def points_from_percentage(percentage: Decimal, max_points: int) -> int:
    """percentage(0~100) → 정수 점수 (half-up)."""
    raw = (Decimal(percentage) / Decimal(100)) * Decimal(int(max_points))
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def manual_review_outcome(reason: Optional[str] = None) -> GradeOutcome:
    feedback = f"{MANUAL_REVIEW_MARKER} Answer requires manual review."
    if reason:
        feedback = f"{feedback} ({reason})"
    return GradeOutcome(is_correct=False, points_earned=0, feedback=feedback)
