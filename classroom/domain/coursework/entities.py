"""
과제 제출 상태 도메인 엔티티 - 순수 파이썬
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class SubmissionStatus(str, Enum):
    """DB에 저장되는 과제 제출 상태 (apps.domains.coursework choices와 동기화)."""
    ASSIGNED = "assigned"      # 아직 기한 전, 미제출
    TURNED_IN = "turned_in"    # 기한 내 제출
    LATE = "late"              # 기한 후 제출
    MISSING = "missing"        # 기한 경과, 미제출
    GRADED = "graded"          # 채점 완료


class StatusLabel(str, Enum):
    """학생 화면용 표시 라벨."""
    GRADED = "Graded"
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    SUBMITTED_LATE = "Submitted Late"
    MISSING = "Missing"
    NOT_SUBMITTED = "Not Submitted"


@dataclass(frozen=True)
class Assignment:
    assignment_id: int
    classlist_id: str
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    title: str = ""


@dataclass(frozen=True)
class SubmissionSnapshot:
    """
    상태 판별 입력.
    status는 자유 문자열 (activity 제출의 draft/submitted/graded 도 허용).
    updated_at은 compare-and-set 버전으로 사용.
    """
    status: str
    submitted_at: Optional[datetime] = None
    score: Optional[int] = None
    returned_to_student: bool = False
    submission_id: Optional[int] = None
    assignment_id: Optional[int] = None
    student_id: Optional[int] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SweepReport:
    run_id: str
    assignments: int = 0
    checked: int = 0
    updated: int = 0
    created_missing: int = 0
    marked_missing: int = 0
    conflicts: int = 0
    failures: int = 0
