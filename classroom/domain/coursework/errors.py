"""
과제 제출 도메인 오류 - 순수 파이썬
"""
from __future__ import annotations


class CourseworkDomainError(Exception):
    pass


class AssignmentNotFound(CourseworkDomainError):
    pass


class SubmissionAlreadyGraded(CourseworkDomainError):
    """채점 완료된 제출물은 학생이 다시 제출할 수 없음."""
    pass
