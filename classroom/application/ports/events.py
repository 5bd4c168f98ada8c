"""
도메인 이벤트 포트

코어는 알림을 보내지 않는다. "채점 확정" / "제출 상태 변경" 이벤트만 발행하고
외부 notifier가 구독한다.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol


@dataclass(frozen=True)
class GradeFinalized:
    attempt_id: int
    assessment_kind: str
    assessment_id: int
    user_id: int
    score: int
    total_points: int
    percentage: Decimal
    submitted_at: datetime


@dataclass(frozen=True)
class SubmissionStatusChanged:
    assignment_id: int
    student_id: int
    old_status: Optional[str]
    new_status: str
    changed_at: datetime
    source: str  # "sweep" | "turn_in" | "grading"


class EventPublisher(Protocol):
    def grade_finalized(self, event: GradeFinalized) -> None:
        ...

    def submission_status_changed(self, event: SubmissionStatusChanged) -> None:
        ...


class NullEventPublisher:
    """구독자가 없을 때 (스크립트/테스트)."""

    def grade_finalized(self, event: GradeFinalized) -> None:
        return None

    def submission_status_changed(self, event: SubmissionStatusChanged) -> None:
        return None
