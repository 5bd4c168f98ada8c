"""
Repository 포트 - 영속화 추상화 (Django/ORM 미사용)

select_for_update/atomic은 어댑터에서 수행.
"""
from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Iterable, Optional, Protocol

from classroom.domain.assessment.entities import (
    Answer,
    Assessment,
    AssessmentKind,
    Attempt,
    AttemptActivity,
    Question,
)
from classroom.domain.coursework.entities import (
    Assignment,
    SubmissionSnapshot,
    SubmissionStatus,
)


class AssessmentRepository(Protocol):
    @abstractmethod
    def get(self, kind: AssessmentKind, assessment_id: int) -> Optional[Assessment]:
        ...


class QuestionRepository(Protocol):
    @abstractmethod
    def get(self, question_id: int) -> Optional[Question]:
        ...

    @abstractmethod
    def get_many(self, question_ids: Iterable[int]) -> dict[int, Question]:
        """없는 id는 결과에서 빠진다 (orphan 답안 판별용)."""
        ...


class AttemptRepository(Protocol):
    @abstractmethod
    def get(self, attempt_id: int) -> Optional[Attempt]:
        ...

    @abstractmethod
    def get_for_update(self, attempt_id: int) -> Optional[Attempt]:
        """row lock. 호출자가 UoW 트랜잭션 안에 있어야 함."""
        ...

    @abstractmethod
    def lock_for_user(self, kind: AssessmentKind, assessment_id: int, user_id: int) -> list[Attempt]:
        """(assessment, user)의 모든 attempt를 잠그고 attempt_number 순으로 반환."""
        ...

    @abstractmethod
    def find_in_progress(self, kind: AssessmentKind, assessment_id: int, user_id: int) -> Optional[Attempt]:
        ...

    @abstractmethod
    def create(self, attempt: Attempt) -> Attempt:
        """
        insert 후 id가 채워진 엔티티 반환.
        in_progress unique 제약 위반 시 InProgressAttemptConflict.
        """
        ...

    @abstractmethod
    def save(self, attempt: Attempt) -> None:
        ...


class AnswerRepository(Protocol):
    @abstractmethod
    def list_for_attempt(self, attempt_id: int) -> list[Answer]:
        ...

    @abstractmethod
    def upsert(self, attempt_id: int, question_id: int, payload: list[str]) -> Answer:
        """(question, attempt) 키로 payload 덮어쓰기."""
        ...

    @abstractmethod
    def save_grades(self, answers: Iterable[Answer]) -> None:
        ...


class AttemptActivityRepository(Protocol):
    @abstractmethod
    def add(self, activity: AttemptActivity) -> AttemptActivity:
        ...

    @abstractmethod
    def list_for_attempt(self, attempt_id: int) -> list[AttemptActivity]:
        ...


class AssignmentRepository(Protocol):
    @abstractmethod
    def get(self, assignment_id: int) -> Optional[Assignment]:
        ...

    @abstractmethod
    def list_with_due_date(self) -> list[Assignment]:
        ...


class EnrollmentRepository(Protocol):
    @abstractmethod
    def active_student_ids(self, classlist_id: str) -> list[int]:
        ...


class SubmissionRepository(Protocol):
    @abstractmethod
    def find(self, assignment_id: int, student_id: int) -> Optional[SubmissionSnapshot]:
        ...

    @abstractmethod
    def get_for_update(self, assignment_id: int, student_id: int) -> Optional[SubmissionSnapshot]:
        ...

    @abstractmethod
    def compare_and_set_status(
        self,
        current: SubmissionSnapshot,
        new_status: SubmissionStatus,
        now: datetime,
    ) -> bool:
        """
        current의 (id, status, updated_at)이 그대로일 때만 status 갱신.
        다른 writer가 먼저 바꿨으면 False.
        """
        ...

    @abstractmethod
    def create_missing_if_absent(self, assignment: Assignment, student_id: int, now: datetime) -> bool:
        """(assignment, student) row가 없을 때만 missing으로 생성. 생성했으면 True."""
        ...

    @abstractmethod
    def save_turn_in(
        self,
        assignment: Assignment,
        student_id: int,
        status: SubmissionStatus,
        submitted_at: datetime,
    ) -> SubmissionSnapshot:
        ...

    @abstractmethod
    def save_grade(
        self,
        assignment: Assignment,
        student_id: int,
        score: int,
        feedback: Optional[str],
        returned_to_student: bool,
        now: datetime,
    ) -> SubmissionSnapshot:
        ...
