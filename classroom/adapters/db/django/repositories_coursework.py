"""
Assignment / ClassEnrollment / AssignmentSubmission Repository - Django ORM 구현
(메서드 내부에서만 apps.domains.coursework import)
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from classroom.domain.coursework.entities import (
    Assignment,
    SubmissionSnapshot,
    SubmissionStatus,
)


def _assignment_to_entity(m) -> Optional[Assignment]:
    if m is None:
        return None
    return Assignment(
        assignment_id=int(m.id),
        classlist_id=str(m.classlist_id),
        due_date=m.due_date,
        due_time=m.due_time,
        title=m.title or "",
    )


def _submission_to_snapshot(m) -> Optional[SubmissionSnapshot]:
    if m is None:
        return None
    return SubmissionSnapshot(
        submission_id=int(m.id),
        assignment_id=int(m.assignment_id),
        student_id=int(m.student_id),
        status=str(m.status or ""),
        submitted_at=m.submitted_at,
        score=m.score,
        returned_to_student=bool(m.returned_to_student),
        updated_at=m.updated_at,
    )


class DjangoAssignmentRepository:
    def get(self, assignment_id: int) -> Optional[Assignment]:
        from apps.domains.coursework.models import Assignment as AssignmentModel
        return _assignment_to_entity(AssignmentModel.objects.filter(id=assignment_id).first())

    def list_with_due_date(self) -> list[Assignment]:
        from apps.domains.coursework.models import Assignment as AssignmentModel
        qs = AssignmentModel.objects.filter(due_date__isnull=False).order_by("id")
        return [_assignment_to_entity(m) for m in qs]


class DjangoEnrollmentRepository:
    def active_student_ids(self, classlist_id: str) -> list[int]:
        from apps.domains.coursework.models import ClassEnrollment
        qs = (
            ClassEnrollment.objects.filter(classlist_id=classlist_id, status="active")
            .values_list("student_id", flat=True)
            .order_by("student_id")
            .distinct()
        )
        return [int(x) for x in qs]


class DjangoSubmissionRepository:
    """SubmissionRepository 구현. get_for_update 는 UoW 트랜잭션 안에서만 호출."""

    def find(self, assignment_id: int, student_id: int) -> Optional[SubmissionSnapshot]:
        from apps.domains.coursework.models import AssignmentSubmission
        m = AssignmentSubmission.objects.filter(
            assignment_id=assignment_id,
            student_id=student_id,
        ).first()
        return _submission_to_snapshot(m)

    def get_for_update(self, assignment_id: int, student_id: int) -> Optional[SubmissionSnapshot]:
        from apps.domains.coursework.models import AssignmentSubmission
        m = (
            AssignmentSubmission.objects.select_for_update()
            .filter(assignment_id=assignment_id, student_id=student_id)
            .first()
        )
        return _submission_to_snapshot(m)

    def compare_and_set_status(
        self,
        current: SubmissionSnapshot,
        new_status: SubmissionStatus,
        now: datetime,
    ) -> bool:
        from apps.domains.coursework.models import AssignmentSubmission
        if current.submission_id is None:
            return False
        # update() 는 auto_now 를 거치지 않으므로 updated_at 을 직접 넣는다
        updated = AssignmentSubmission.objects.filter(
            id=current.submission_id,
            status=current.status,
            updated_at=current.updated_at,
        ).update(status=SubmissionStatus(new_status).value, updated_at=now)
        return updated == 1

    def create_missing_if_absent(self, assignment: Assignment, student_id: int, now: datetime) -> bool:
        from apps.domains.coursework.models import AssignmentSubmission
        _, created = AssignmentSubmission.objects.get_or_create(
            assignment_id=assignment.assignment_id,
            student_id=student_id,
            defaults={"status": SubmissionStatus.MISSING.value},
        )
        return created

    def save_turn_in(
        self,
        assignment: Assignment,
        student_id: int,
        status: SubmissionStatus,
        submitted_at: datetime,
    ) -> SubmissionSnapshot:
        from apps.domains.coursework.models import AssignmentSubmission
        m, _ = AssignmentSubmission.objects.update_or_create(
            assignment_id=assignment.assignment_id,
            student_id=student_id,
            defaults={
                "status": SubmissionStatus(status).value,
                "submitted_at": submitted_at,
            },
        )
        return _submission_to_snapshot(m)

    def save_grade(
        self,
        assignment: Assignment,
        student_id: int,
        score: int,
        feedback: Optional[str],
        returned_to_student: bool,
        now: datetime,
    ) -> SubmissionSnapshot:
        from apps.domains.coursework.models import AssignmentSubmission
        m, _ = AssignmentSubmission.objects.update_or_create(
            assignment_id=assignment.assignment_id,
            student_id=student_id,
            defaults={
                "status": SubmissionStatus.GRADED.value,
                "score": int(score),
                "feedback": feedback,
                "returned_to_student": bool(returned_to_student),
                "graded_at": now,
            },
        )
        return _submission_to_snapshot(m)
