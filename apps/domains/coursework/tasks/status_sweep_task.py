# PATH: apps/domains/coursework/tasks/status_sweep_task.py
import logging

from celery import shared_task

from apps.domains.coursework.services.status_service import build_status_sweeper

logger = logging.getLogger(__name__)


@shared_task(name="coursework.run_assignment_status_sweep", ignore_result=False)
def run_assignment_status_sweep() -> dict:
    """
    주기 실행 (CELERY_BEAT_SCHEDULE).
    (과제, 학생) 단위 실패는 sweeper 안에서 격리되므로 task 재시도는 하지 않는다.
    """
    report = build_status_sweeper().run_sweep()
    if report.failures:
        logger.warning(
            "assignment_status_sweep_partial run_id=%s failures=%s",
            report.run_id,
            report.failures,
        )
    return {
        "run_id": report.run_id,
        "assignments": report.assignments,
        "checked": report.checked,
        "updated": report.updated,
        "created_missing": report.created_missing,
        "marked_missing": report.marked_missing,
        "conflicts": report.conflicts,
        "failures": report.failures,
    }
