# PATH: apps/domains/assessments/services/attempt_service.py
"""
AttemptManager 조립 (Django 어댑터 + OpenAI 게이트웨이 + Signal 발행)

views / tasks 는 여기서 만든 manager 만 사용한다.
"""
from __future__ import annotations

from typing import Optional

from django.conf import settings

from classroom.adapters.ai.config import EvaluatorConfig
from classroom.adapters.ai.openai_evaluator import OpenAIEvaluationGateway
from classroom.adapters.db.django.uow import DjangoUnitOfWork
from classroom.adapters.events.django_signals import DjangoSignalEventPublisher
from classroom.application.ports.evaluation import EvaluationGateway
from classroom.application.services.answer_grader import AnswerGrader
from classroom.application.use_cases.assessment.attempt_manager import AttemptManager


def build_attempt_manager(gateway: Optional[EvaluationGateway] = None) -> AttemptManager:
    config = EvaluatorConfig.load()
    grader = AnswerGrader(
        gateway or OpenAIEvaluationGateway(config),
        timeout_seconds=getattr(settings, "AI_EVALUATOR_TIMEOUT_SECONDS", config.TIMEOUT_SECONDS),
    )
    return AttemptManager(
        uow=DjangoUnitOfWork(),
        grader=grader,
        events=DjangoSignalEventPublisher(),
    )
