"""
AI 평가 게이트웨이 포트

주관식/서술형 채점용 외부 호출. 반드시 timeout을 명시적으로 넘긴다.
실패는 예외가 아니라 ok=False 응답으로 표현 (어댑터 책임).
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol


@dataclass(frozen=True)
class EvaluationRequest:
    question_text: str
    student_answer: str
    max_points: int
    reference_answer: Optional[str] = None
    explanation: Optional[str] = None


@dataclass(frozen=True)
class EvaluationResponse:
    ok: bool
    points_earned: int = 0
    percentage: Decimal = Decimal("0")
    feedback: str = ""
    error: Optional[str] = None

    @staticmethod
    def success(*, points_earned: int, percentage: Decimal, feedback: str) -> "EvaluationResponse":
        return EvaluationResponse(
            ok=True,
            points_earned=int(points_earned),
            percentage=Decimal(percentage),
            feedback=feedback or "",
        )

    @staticmethod
    def failure(error: str) -> "EvaluationResponse":
        return EvaluationResponse(ok=False, error=str(error or "unknown error")[:2000])


class EvaluationGateway(Protocol):
    def evaluate(self, request: EvaluationRequest, *, timeout_seconds: float) -> EvaluationResponse:
        ...
