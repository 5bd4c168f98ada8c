# PATH: apps/domains/assessments/signals.py
# 채점 확정 이벤트. 알림 발송은 구독자(receiver) 책임.
# kwargs: event=classroom.application.ports.events.GradeFinalized

from django.dispatch import Signal

grade_finalized = Signal()
