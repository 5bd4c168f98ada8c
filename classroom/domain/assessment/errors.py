"""
응시/채점 도메인 오류 - 순수 파이썬
"""
from __future__ import annotations


class AssessmentDomainError(Exception):
    """응시/채점 도메인 규칙 위반 등."""
    pass


class AssessmentNotFound(AssessmentDomainError):
    pass


class AttemptNotFound(AssessmentDomainError):
    pass


class AttemptLimitExceeded(AssessmentDomainError):
    """attempts_allowed 소진. 재시도 대상 아님."""
    pass


class AttemptNotActive(AssessmentDomainError):
    """in_progress가 아닌 attempt에 답안 저장/제출 시도."""
    pass


class AttemptOwnershipError(AssessmentDomainError):
    pass


class QuestionNotInAssessment(AssessmentDomainError):
    pass


class InProgressAttemptConflict(AssessmentDomainError):
    """동시 start()에서 in_progress attempt insert가 unique 제약에 걸림 (어댑터가 변환)."""
    pass
