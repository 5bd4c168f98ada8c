"""
Attempt 점수 집계 (순수)

percentage = round_half_up(score / total * 100, 2), total == 0 이면 0.00
문항이 없는(orphan) 답안은 분자/분모 모두에서 제외.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping

from classroom.domain.assessment.entities import Answer, Question, ScoreSummary

ZERO_PERCENT = Decimal("0.00")
_TWO_PLACES = Decimal("0.01")


def percentage_of(score: int, total_points: int) -> Decimal:
    if int(total_points) <= 0:
        return ZERO_PERCENT
    raw = Decimal(int(score)) * Decimal(100) / Decimal(int(total_points))
    return raw.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


class ScoreAggregator:
    """
    계산만 한다. 저장 없음.
    같은 입력에 대해 항상 같은 결과 (멱등).
    """

    def aggregate(
        self,
        answers: Iterable[Answer],
        questions: Mapping[int, Question],
    ) -> ScoreSummary:
        score = 0
        total = 0
        seen: set[int] = set()

        for a in answers:
            q = questions.get(int(a.question_id))
            if q is None:
                continue
            # (question, attempt) 당 1개가 원칙이지만 중복 입력은 1회만 반영
            if int(a.question_id) in seen:
                continue
            seen.add(int(a.question_id))

            total += int(q.points)
            score += max(0, min(int(q.points), int(a.points_earned or 0)))

        return ScoreSummary(
            score=score,
            total_points=total,
            percentage=percentage_of(score, total),
        )
