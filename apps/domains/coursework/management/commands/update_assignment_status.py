# PATH: apps/domains/coursework/management/commands/update_assignment_status.py
"""
과제 제출 상태 일괄 갱신 (assigned / missing / turned_in / late / graded).

- 마감일이 있는 모든 과제 x 반 active 학생 대상
- 마감 경과 + 미제출 → missing (row 없으면 생성)
- 멱등: 여러 번 실행해도 결과 동일
- 주기 실행은 celery beat(coursework.run_assignment_status_sweep)가 담당

사용:
  python manage.py update_assignment_status
  python manage.py update_assignment_status --now 2024-01-11T00:00:01+08:00
"""
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.domains.coursework.services.status_service import build_resolver, build_status_sweeper


class Command(BaseCommand):
    help = "마감일 기준으로 과제 제출 상태를 갱신합니다."

    def add_arguments(self, parser):
        parser.add_argument(
            "--now",
            type=str,
            default=None,
            help="기준 시각 (ISO8601). 타임존 없으면 COURSEWORK_TIME_ZONE 기준",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        raw = options.get("now")
        if raw:
            parsed = parse_datetime(raw)
            if parsed is None:
                raise CommandError(f"--now 형식 오류: {raw}")
            now = build_resolver().localize(parsed)

        self.stdout.write(f"과제 상태 갱신 시작 (now={now.isoformat()})")

        report = build_status_sweeper().run_sweep(now=now)

        self.stdout.write(
            f"run_id={report.run_id} 과제 {report.assignments}개 / 확인 {report.checked}건"
        )
        self.stdout.write(
            f"  갱신 {report.updated}건, missing 생성 {report.created_missing}건, "
            f"missing 처리 {report.marked_missing}건, 충돌 {report.conflicts}건"
        )

        if report.failures:
            self.stdout.write(self.style.WARNING(f"실패 {report.failures}건 (로그 확인)"))
        else:
            self.stdout.write(self.style.SUCCESS("과제 상태 갱신 완료"))
