"""
Unit of Work 포트 - 트랜잭션 경계 (Django 미사용)
"""
from __future__ import annotations

from typing import Protocol

from classroom.application.ports.repositories import (
    AnswerRepository,
    AssessmentRepository,
    AssignmentRepository,
    AttemptActivityRepository,
    AttemptRepository,
    EnrollmentRepository,
    QuestionRepository,
    SubmissionRepository,
)


class UnitOfWork(Protocol):
    """트랜잭션 단위. __enter__에서 시작, __exit__에서 commit/rollback."""

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    def on_commit(self, fn) -> None:
        """commit 이후 실행할 콜백 등록 (이벤트 발행 등)."""
        ...


class AssessmentUnitOfWork(UnitOfWork, Protocol):
    @property
    def assessments(self) -> AssessmentRepository:
        ...

    @property
    def questions(self) -> QuestionRepository:
        ...

    @property
    def attempts(self) -> AttemptRepository:
        ...

    @property
    def answers(self) -> AnswerRepository:
        ...

    @property
    def activities(self) -> AttemptActivityRepository:
        ...


class CourseworkUnitOfWork(UnitOfWork, Protocol):
    @property
    def assignments(self) -> AssignmentRepository:
        ...

    @property
    def enrollments(self) -> EnrollmentRepository:
        ...

    @property
    def submissions(self) -> SubmissionRepository:
        ...
