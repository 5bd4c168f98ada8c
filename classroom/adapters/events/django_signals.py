"""
EventPublisher - Django Signal 구현

UoW.on_commit 으로 호출되므로 commit 이후에만 발송된다.
receiver 하나가 실패해도 나머지 receiver 와 호출자는 영향받지 않는다 (send_robust).
"""
from __future__ import annotations

import logging

from classroom.application.ports.events import GradeFinalized, SubmissionStatusChanged

logger = logging.getLogger(__name__)


def _log_failures(signal_name: str, responses) -> None:
    for receiver, result in responses:
        if isinstance(result, Exception):
            logger.error(
                "event_receiver_failed signal=%s receiver=%r error=%s",
                signal_name,
                receiver,
                result,
                exc_info=(type(result), result, result.__traceback__),
            )


class DjangoSignalEventPublisher:
    def grade_finalized(self, event: GradeFinalized) -> None:
        from apps.domains.assessments.signals import grade_finalized
        _log_failures("grade_finalized", grade_finalized.send_robust(sender=self.__class__, event=event))

    def submission_status_changed(self, event: SubmissionStatusChanged) -> None:
        from apps.domains.coursework.signals import submission_status_changed
        _log_failures(
            "submission_status_changed",
            submission_status_changed.send_robust(sender=self.__class__, event=event),
        )
