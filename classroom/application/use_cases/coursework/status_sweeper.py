"""
과제 제출 상태 스윕 Use Case (배치)

마감일이 있는 모든 과제 x 해당 반의 active 학생:
- row 있음: 저장 상태 재계산 → 다를 때만 compare-and-set 으로 갱신
- row 없음 + 마감 경과: missing row 생성 (이미 있으면 건드리지 않음)
- row 없음 + 마감 전: 아무것도 안 함

(과제, 학생) 단위 실패는 격리한다. 한 쌍이 실패해도 스윕은 계속되고 요약에 집계.
멱등 + 동시 실행 안전 (CAS / get_or_create).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
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
    SubmissionStatus,
    SweepReport,
)
from classroom.domain.coursework.status import SubmissionStatusResolver
from classroom.domain.shared.ids import generate_run_id

logger = logging.getLogger(__name__)


@dataclass
class _Counters:
    assignments: int = 0
    checked: int = 0
    updated: int = 0
    created_missing: int = 0
    marked_missing: int = 0
    conflicts: int = 0
    failures: int = 0


class AssignmentStatusSweeper:
    def __init__(
        self,
        uow: CourseworkUnitOfWork,
        resolver: SubmissionStatusResolver,
        events: Optional[EventPublisher] = None,
    ) -> None:
        self.uow = uow
        self.resolver = resolver
        self.events = events or NullEventPublisher()

    def run_sweep(self, now: Optional[datetime] = None) -> SweepReport:
        # naive now 는 과제 타임존 기준으로 읽는다
        now = self.resolver.localize(now or datetime.now(timezone.utc))
        run_id = generate_run_id()
        c = _Counters()

        logger.info("assignment_status_sweep_start run_id=%s now=%s", run_id, now.isoformat())

        for assignment in self.uow.assignments.list_with_due_date():
            due_at = self.resolver.deadline(assignment.due_date, assignment.due_time)
            if due_at is None:
                continue
            c.assignments += 1

            try:
                student_ids = self.uow.enrollments.active_student_ids(assignment.classlist_id)
            except Exception:
                logger.exception(
                    "assignment_status_sweep_roster_failed run_id=%s assignment_id=%s",
                    run_id,
                    assignment.assignment_id,
                )
                c.failures += 1
                continue

            for student_id in student_ids:
                c.checked += 1
                try:
                    self._reconcile_pair(assignment, int(student_id), due_at, now, c)
                except Exception:
                    c.failures += 1
                    logger.exception(
                        "assignment_status_sweep_pair_failed run_id=%s assignment_id=%s student_id=%s",
                        run_id,
                        assignment.assignment_id,
                        student_id,
                    )

        report = SweepReport(
            run_id=run_id,
            assignments=c.assignments,
            checked=c.checked,
            updated=c.updated,
            created_missing=c.created_missing,
            marked_missing=c.marked_missing,
            conflicts=c.conflicts,
            failures=c.failures,
        )
        logger.info(
            "assignment_status_sweep_done run_id=%s assignments=%s checked=%s updated=%s "
            "created_missing=%s marked_missing=%s conflicts=%s failures=%s",
            run_id,
            report.assignments,
            report.checked,
            report.updated,
            report.created_missing,
            report.marked_missing,
            report.conflicts,
            report.failures,
            extra={"run_id": run_id, "failures": report.failures},
        )
        return report

    def _reconcile_pair(
        self,
        assignment: Assignment,
        student_id: int,
        due_at: datetime,
        now: datetime,
        c: _Counters,
    ) -> None:
        with self.uow:
            current = self.uow.submissions.find(assignment.assignment_id, student_id)

            if current is None:
                # 마감 전에는 row를 만들지 않는다 (row 부재 = 아직 기한 전)
                if now <= due_at:
                    return
                if self.uow.submissions.create_missing_if_absent(assignment, student_id, now):
                    c.created_missing += 1
                    c.marked_missing += 1
                    self._publish(assignment, student_id, None, SubmissionStatus.MISSING, now)
                return

            new_status = self.resolver.resolve_persisted(current, due_at, now)
            if new_status.value == current.status:
                return

            if not self.uow.submissions.compare_and_set_status(current, new_status, now):
                # 다른 writer(학생 제출 등)가 먼저 바꿈 → 다음 스윕에서 재계산
                c.conflicts += 1
                return

            c.updated += 1
            if new_status == SubmissionStatus.MISSING:
                c.marked_missing += 1
            self._publish(assignment, student_id, current.status, new_status, now)

    def _publish(
        self,
        assignment: Assignment,
        student_id: int,
        old_status: Optional[str],
        new_status: SubmissionStatus,
        now: datetime,
    ) -> None:
        event = SubmissionStatusChanged(
            assignment_id=int(assignment.assignment_id),
            student_id=int(student_id),
            old_status=old_status,
            new_status=new_status.value,
            changed_at=now,
            source="sweep",
        )
        self.uow.on_commit(lambda: self.events.submission_status_changed(event))
