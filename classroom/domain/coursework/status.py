"""
제출 상태 판별 (if-else 고정 / 단일 함수)

- resolve()           : 학생 화면 라벨 (Graded / Draft / Submitted / Submitted Late / Missing / Not Submitted)
- resolve_persisted() : DB 저장 상태 5종 (assigned / turned_in / late / missing / graded)

마감 시각 = due_date + due_time, due_time 없으면 해당 날짜 23:59:59.
타임존은 생성자로 1개만 주입받는다. 화면 경로와 스윕 경로가 같은 인스턴스를 쓴다.
naive datetime은 그 타임존 기준으로 해석.
"""
from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from classroom.domain.coursework.entities import (
    StatusLabel,
    SubmissionSnapshot,
    SubmissionStatus,
)

END_OF_DAY = time(23, 59, 59)


def _as_tzinfo(tz: Union[str, tzinfo]) -> tzinfo:
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


class SubmissionStatusResolver:
    def __init__(self, tz: Union[str, tzinfo]) -> None:
        self.tz = _as_tzinfo(tz)

    def localize(self, dt: Optional[datetime]) -> Optional[datetime]:
        if dt is None:
            return None
        if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
            return dt.replace(tzinfo=self.tz)
        return dt

    def deadline(self, due_date: Optional[date], due_time: Optional[time] = None) -> Optional[datetime]:
        if due_date is None:
            return None
        if isinstance(due_date, datetime):
            due_date = due_date.date()
        t = due_time or END_OF_DAY
        return datetime.combine(due_date, t.replace(tzinfo=None), tzinfo=self.tz)

    def resolve(
        self,
        submission: Optional[SubmissionSnapshot],
        due_at: Optional[datetime],
        now: datetime,
    ) -> StatusLabel:
        due_at = self.localize(due_at)
        now = self.localize(now)

        if submission is not None:
            if submission.status == SubmissionStatus.GRADED.value:
                return StatusLabel.GRADED
            if submission.status == "draft":
                return StatusLabel.DRAFT

            submitted_at = self.localize(submission.submitted_at)
            if submitted_at is not None:
                if due_at is not None and submitted_at > due_at:
                    return StatusLabel.SUBMITTED_LATE
                return StatusLabel.SUBMITTED

        if due_at is not None and now > due_at:
            return StatusLabel.MISSING

        return StatusLabel.NOT_SUBMITTED

    def resolve_persisted(
        self,
        submission: Optional[SubmissionSnapshot],
        due_at: Optional[datetime],
        now: datetime,
    ) -> SubmissionStatus:
        due_at = self.localize(due_at)
        now = self.localize(now)

        if submission is not None:
            # graded는 되돌리지 않는다 (returned_to_student 이면 sticky)
            if submission.status == SubmissionStatus.GRADED.value:
                return SubmissionStatus.GRADED
            if submission.score is not None:
                return SubmissionStatus.GRADED

            submitted_at = self.localize(submission.submitted_at)
            if submitted_at is not None:
                if due_at is not None and submitted_at > due_at:
                    return SubmissionStatus.LATE
                return SubmissionStatus.TURNED_IN

        if due_at is not None and now > due_at:
            return SubmissionStatus.MISSING

        return SubmissionStatus.ASSIGNED
