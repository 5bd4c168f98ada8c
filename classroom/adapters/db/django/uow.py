"""
Django Unit of Work - transaction.atomic 래퍼 (lazy import)

응시(assessments) / 과제(coursework) 포트를 하나의 클래스가 모두 구현한다.
with 블록은 중첩 가능 (안쪽은 savepoint).
"""
from __future__ import annotations


class DjangoUnitOfWork:
    """Django transaction.atomic으로 트랜잭션 경계. 메서드 내부에서 Django import."""

    def __init__(self) -> None:
        self._atomics: list = []
        self._repos: dict = {}

    def _repo(self, name: str, factory):
        if name not in self._repos:
            self._repos[name] = factory()
        return self._repos[name]

    # -----------------------------
    # assessments
    # -----------------------------
    @property
    def assessments(self):
        from classroom.adapters.db.django.repositories_assessment import DjangoAssessmentRepository
        return self._repo("assessments", DjangoAssessmentRepository)

    @property
    def questions(self):
        from classroom.adapters.db.django.repositories_assessment import DjangoQuestionRepository
        return self._repo("questions", DjangoQuestionRepository)

    @property
    def attempts(self):
        from classroom.adapters.db.django.repositories_assessment import DjangoAttemptRepository
        return self._repo("attempts", DjangoAttemptRepository)

    @property
    def answers(self):
        from classroom.adapters.db.django.repositories_assessment import DjangoAnswerRepository
        return self._repo("answers", DjangoAnswerRepository)

    @property
    def activities(self):
        from classroom.adapters.db.django.repositories_assessment import DjangoAttemptActivityRepository
        return self._repo("activities", DjangoAttemptActivityRepository)

    # -----------------------------
    # coursework
    # -----------------------------
    @property
    def assignments(self):
        from classroom.adapters.db.django.repositories_coursework import DjangoAssignmentRepository
        return self._repo("assignments", DjangoAssignmentRepository)

    @property
    def enrollments(self):
        from classroom.adapters.db.django.repositories_coursework import DjangoEnrollmentRepository
        return self._repo("enrollments", DjangoEnrollmentRepository)

    @property
    def submissions(self):
        from classroom.adapters.db.django.repositories_coursework import DjangoSubmissionRepository
        return self._repo("submissions", DjangoSubmissionRepository)

    # -----------------------------
    # transaction
    # -----------------------------
    def __enter__(self) -> DjangoUnitOfWork:
        from django.db import transaction
        atomic = transaction.atomic()
        atomic.__enter__()
        self._atomics.append(atomic)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._atomics:
            self._atomics.pop().__exit__(exc_type, exc_val, exc_tb)

    def on_commit(self, fn) -> None:
        # 트랜잭션 밖이면 즉시 실행 (Django 동작)
        from django.db import transaction
        transaction.on_commit(fn)
