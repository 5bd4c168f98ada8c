# PATH: apps/domains/coursework/services/status_service.py
"""
과제 상태 use case 조립

스윕 / 제출 / 화면 라벨이 같은 COURSEWORK_TIME_ZONE resolver 를 공유한다.
"""
from __future__ import annotations

from django.conf import settings

from classroom.adapters.db.django.uow import DjangoUnitOfWork
from classroom.adapters.events.django_signals import DjangoSignalEventPublisher
from classroom.application.use_cases.coursework.status_sweeper import AssignmentStatusSweeper
from classroom.application.use_cases.coursework.submissions import CourseworkSubmissionService
from classroom.domain.coursework.status import SubmissionStatusResolver

DEFAULT_TIME_ZONE = "Asia/Manila"


def build_resolver() -> SubmissionStatusResolver:
    return SubmissionStatusResolver(getattr(settings, "COURSEWORK_TIME_ZONE", DEFAULT_TIME_ZONE))


def build_status_sweeper() -> AssignmentStatusSweeper:
    return AssignmentStatusSweeper(
        uow=DjangoUnitOfWork(),
        resolver=build_resolver(),
        events=DjangoSignalEventPublisher(),
    )


def build_submission_service() -> CourseworkSubmissionService:
    return CourseworkSubmissionService(
        uow=DjangoUnitOfWork(),
        resolver=build_resolver(),
        events=DjangoSignalEventPublisher(),
    )
