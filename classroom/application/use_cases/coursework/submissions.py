"""
과제 제출 인터랙티브 경로 (요청 단위)

- turn_in       : 학생 제출 → turned_in / late
- grade         : 강사 채점 → graded (+ returned_to_student)
- status_label  : 학생 화면 라벨

스윕과 같은 SubmissionStatusResolver(같은 타임존)를 사용한다.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from classroom.application.ports.events import (
    EventPublisher,
    NullEventPublisher,
    SubmissionStatusChanged,
)
from classroom.application.ports.unit_of_work import CourseworkUnitOfWork
from classroom.domain.coursework.entities import (
    Assignment,
    StatusLabel,
    SubmissionSnapshot,
    SubmissionStatus,
)
from classroom.domain.coursework.errors import AssignmentNotFound, SubmissionAlreadyGraded
from classroom.domain.coursework.status import SubmissionStatusResolver

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CourseworkSubmissionService:
    def __init__(
        self,
        uow: CourseworkUnitOfWork,
        resolver: SubmissionStatusResolver,
        events: Optional[EventPublisher] = None,
    ) -> None:
        self.uow = uow
        self.resolver = resolver
        self.events = events or NullEventPublisher()

    def _assignment(self, assignment_id: int) -> Assignment:
        assignment = self.uow.assignments.get(int(assignment_id))
        if assignment is None:
            raise AssignmentNotFound(f"Assignment {assignment_id} not found")
        return assignment

    def _publish(
        self,
        assignment_id: int,
        student_id: int,
        old_status: Optional[str],
        new_status: str,
        now: datetime,
        source: str,
    ) -> None:
        if old_status == new_status:
            return
        event = SubmissionStatusChanged(
            assignment_id=int(assignment_id),
            student_id=int(student_id),
            old_status=old_status,
            new_status=new_status,
            changed_at=now,
            source=source,
        )
        self.uow.on_commit(lambda: self.events.submission_status_changed(event))

    def turn_in(self, *, assignment_id: int, student_id: int, now: Optional[datetime] = None) -> SubmissionSnapshot:
        now = self.resolver.localize(now or _utcnow())
        assignment = self._assignment(assignment_id)
        due_at = self.resolver.deadline(assignment.due_date, assignment.due_time)

        with self.uow:
            # 스윕과 같은 row를 잠가서 stale missing 덮어쓰기를 막는다
            current = self.uow.submissions.get_for_update(assignment.assignment_id, int(student_id))
            if current is not None and current.status == SubmissionStatus.GRADED.value:
                raise SubmissionAlreadyGraded(
                    f"Submission for assignment {assignment_id} / student {student_id} is already graded"
                )

            status = self.resolver.resolve_persisted(
                SubmissionSnapshot(status=SubmissionStatus.ASSIGNED.value, submitted_at=now),
                due_at,
                now,
            )
            saved = self.uow.submissions.save_turn_in(assignment, int(student_id), status, now)
            self._publish(
                assignment.assignment_id,
                student_id,
                current.status if current is not None else None,
                saved.status,
                now,
                "turn_in",
            )

        logger.info(
            "assignment_turned_in assignment_id=%s student_id=%s status=%s",
            assignment.assignment_id,
            student_id,
            saved.status,
        )
        return saved

    def grade(
        self,
        *,
        assignment_id: int,
        student_id: int,
        score: int,
        feedback: Optional[str] = None,
        return_to_student: bool = True,
        now: Optional[datetime] = None,
    ) -> SubmissionSnapshot:
        if int(score) < 0:
            raise ValueError("score must be >= 0")

        now = self.resolver.localize(now or _utcnow())
        assignment = self._assignment(assignment_id)

        with self.uow:
            current = self.uow.submissions.get_for_update(assignment.assignment_id, int(student_id))
            saved = self.uow.submissions.save_grade(
                assignment,
                int(student_id),
                int(score),
                feedback,
                bool(return_to_student),
                now,
            )
            self._publish(
                assignment.assignment_id,
                student_id,
                current.status if current is not None else None,
                saved.status,
                now,
                "grading",
            )
        return saved

    def status_label(self, *, assignment_id: int, student_id: int, now: Optional[datetime] = None) -> StatusLabel:
        now = self.resolver.localize(now or _utcnow())
        assignment = self._assignment(assignment_id)
        due_at = self.resolver.deadline(assignment.due_date, assignment.due_time)
        current = self.uow.submissions.find(assignment.assignment_id, int(student_id))
        return self.resolver.resolve(current, due_at, now)
