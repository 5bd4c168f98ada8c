# PATH: apps/domains/coursework/signals.py
# 제출 상태 변경 이벤트. 알림 발송은 구독자(receiver) 책임.
# kwargs: event=classroom.application.ports.events.SubmissionStatusChanged

from django.dispatch import Signal

submission_status_changed = Signal()
