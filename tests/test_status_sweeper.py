"""
Test: AssignmentStatusSweeper - missing 생성, 상태 재계산, graded 유지, 실패 격리, CAS 충돌.
"""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from classroom.adapters.db.django.repositories_coursework import DjangoSubmissionRepository
from classroom.adapters.db.django.uow import DjangoUnitOfWork
from classroom.application.use_cases.coursework.status_sweeper import AssignmentStatusSweeper
from classroom.domain.coursework.status import SubmissionStatusResolver

pytestmark = pytest.mark.django_db

MANILA = ZoneInfo("Asia/Manila")
JUST_AFTER_DUE = datetime(2024, 1, 11, 0, 0, 1, tzinfo=MANILA)
BEFORE_DUE = datetime(2024, 1, 10, 12, 0, tzinfo=MANILA)
STUDENTS = (11, 12, 13)


@pytest.fixture
def assignment(db):
    from apps.domains.coursework.models import Assignment, ClassEnrollment
    a = Assignment.objects.create(classlist_id="CL-1", title="Essay #1", due_date=date(2024, 1, 10))
    for sid in STUDENTS:
        ClassEnrollment.objects.create(classlist_id="CL-1", student_id=sid)
    ClassEnrollment.objects.create(classlist_id="CL-1", student_id=99, status="removed")
    return a


def _sweeper(uow=None, events=None):
    return AssignmentStatusSweeper(
        uow=uow or DjangoUnitOfWork(),
        resolver=SubmissionStatusResolver("Asia/Manila"),
        events=events,
    )


def _statuses(assignment):
    from apps.domains.coursework.models import AssignmentSubmission
    return dict(
        AssignmentSubmission.objects.filter(assignment=assignment).values_list("student_id", "status")
    )


class TestMissingCreation:
    def test_creates_missing_rows_after_deadline(self, assignment):
        report = _sweeper().run_sweep(now=JUST_AFTER_DUE)
        assert _statuses(assignment) == {11: "missing", 12: "missing", 13: "missing"}
        assert report.assignments == 1
        assert report.checked == 3
        assert report.created_missing == 3
        assert report.marked_missing == 3
        assert report.failures == 0

    def test_nothing_before_deadline(self, assignment):
        report = _sweeper().run_sweep(now=BEFORE_DUE)
        assert _statuses(assignment) == {}
        assert report.created_missing == 0

    def test_exactly_at_deadline_is_not_missing(self, assignment):
        due = datetime(2024, 1, 10, 23, 59, 59, tzinfo=MANILA)
        _sweeper().run_sweep(now=due)
        assert _statuses(assignment) == {}

    def test_utc_now_is_compared_in_manila_time(self, assignment):
        _sweeper().run_sweep(now=datetime(2024, 1, 10, 16, 0, 1, tzinfo=timezone.utc))
        assert set(_statuses(assignment).values()) == {"missing"}

    def test_naive_now_is_read_in_manila_time(self, assignment):
        report = _sweeper().run_sweep(now=datetime(2024, 1, 11, 0, 0, 1))
        assert _statuses(assignment) == {11: "missing", 12: "missing", 13: "missing"}
        assert report.created_missing == 3
        assert report.failures == 0

    def test_naive_now_before_deadline_creates_nothing(self, assignment):
        report = _sweeper().run_sweep(now=datetime(2024, 1, 10, 23, 59, 59))
        assert _statuses(assignment) == {}
        assert report.failures == 0

    def test_assignments_without_due_date_are_skipped(self, assignment):
        from apps.domains.coursework.models import Assignment
        Assignment.objects.create(classlist_id="CL-1", title="Open-ended")
        report = _sweeper().run_sweep(now=JUST_AFTER_DUE)
        assert report.assignments == 1

    def test_removed_students_are_ignored(self, assignment):
        _sweeper().run_sweep(now=JUST_AFTER_DUE)
        assert 99 not in _statuses(assignment)


class TestRecompute:
    def test_idempotent(self, assignment):
        _sweeper().run_sweep(now=JUST_AFTER_DUE)
        second = _sweeper().run_sweep(now=JUST_AFTER_DUE + timedelta(minutes=5))
        assert second.updated == 0
        assert second.created_missing == 0
        assert _statuses(assignment) == {11: "missing", 12: "missing", 13: "missing"}

    def test_late_and_on_time_submissions(self, assignment):
        from apps.domains.coursework.models import AssignmentSubmission
        AssignmentSubmission.objects.create(
            assignment=assignment, student_id=11, status="assigned",
            submitted_at=datetime(2024, 1, 10, 20, 0, tzinfo=MANILA),
        )
        AssignmentSubmission.objects.create(
            assignment=assignment, student_id=12, status="missing",
            submitted_at=datetime(2024, 1, 11, 9, 0, tzinfo=MANILA),
        )

        report = _sweeper().run_sweep(now=datetime(2024, 1, 12, tzinfo=MANILA))
        assert _statuses(assignment) == {11: "turned_in", 12: "late", 13: "missing"}
        assert report.updated == 2
        assert report.created_missing == 1

    def test_missing_reverts_to_assigned_when_deadline_moves(self, assignment):
        _sweeper().run_sweep(now=JUST_AFTER_DUE)
        assignment.due_date = date(2024, 1, 20)
        assignment.save()

        report = _sweeper().run_sweep(now=JUST_AFTER_DUE + timedelta(hours=1))
        assert set(_statuses(assignment).values()) == {"assigned"}
        assert report.updated == 3

    def test_graded_is_sticky(self, assignment):
        from apps.domains.coursework.models import AssignmentSubmission
        AssignmentSubmission.objects.create(
            assignment=assignment, student_id=11, status="graded", score=9, returned_to_student=True,
        )
        AssignmentSubmission.objects.create(
            assignment=assignment, student_id=12, status="graded", returned_to_student=False,
        )
        _sweeper().run_sweep(now=JUST_AFTER_DUE)
        statuses = _statuses(assignment)
        assert statuses[11] == "graded"
        assert statuses[12] == "graded"

    def test_scored_submission_becomes_graded(self, assignment):
        from apps.domains.coursework.models import AssignmentSubmission
        AssignmentSubmission.objects.create(
            assignment=assignment, student_id=11, status="turned_in", score=7,
            submitted_at=datetime(2024, 1, 10, 8, 0, tzinfo=MANILA),
        )
        _sweeper().run_sweep(now=JUST_AFTER_DUE)
        assert _statuses(assignment)[11] == "graded"

    def test_publishes_status_changes_after_commit(self, assignment, publisher, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            _sweeper(events=publisher).run_sweep(now=JUST_AFTER_DUE)
        assert len(publisher.status_changes) == 3
        event = publisher.status_changes[0]
        assert event.old_status is None
        assert event.new_status == "missing"
        assert event.source == "sweep"


class _FlakySubmissions(DjangoSubmissionRepository):
    def __init__(self, bad_student_id):
        self.bad_student_id = bad_student_id

    def find(self, assignment_id, student_id):
        if student_id == self.bad_student_id:
            raise RuntimeError("row is corrupted")
        return super().find(assignment_id, student_id)


class _RacingSubmissions(DjangoSubmissionRepository):
    """find 직후 다른 writer 가 row 를 바꾼 상황."""

    def find(self, assignment_id, student_id):
        from apps.domains.coursework.models import AssignmentSubmission
        snapshot = super().find(assignment_id, student_id)
        if snapshot is not None:
            AssignmentSubmission.objects.filter(id=snapshot.submission_id).update(
                status="turned_in",
                submitted_at=datetime(2024, 1, 10, 23, 0, tzinfo=MANILA),
                updated_at=snapshot.updated_at + timedelta(seconds=5),
            )
        return snapshot


def _uow_with(submissions):
    uow = DjangoUnitOfWork()
    uow._repos["submissions"] = submissions
    return uow


class TestIsolation:
    def test_one_failing_pair_does_not_stop_the_sweep(self, assignment):
        report = _sweeper(_uow_with(_FlakySubmissions(12))).run_sweep(now=JUST_AFTER_DUE)
        assert report.failures == 1
        assert report.created_missing == 2
        assert _statuses(assignment) == {11: "missing", 13: "missing"}

    def test_concurrent_writer_wins(self, assignment):
        from apps.domains.coursework.models import AssignmentSubmission
        AssignmentSubmission.objects.create(assignment=assignment, student_id=11, status="assigned")

        report = _sweeper(_uow_with(_RacingSubmissions())).run_sweep(now=JUST_AFTER_DUE)
        assert report.conflicts == 1
        assert _statuses(assignment)[11] == "turned_in"
