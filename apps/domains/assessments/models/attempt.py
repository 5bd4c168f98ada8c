# apps/domains/assessments/models/attempt.py
from django.db import models
from apps.api.common.models import BaseModel


class Attempt(BaseModel):
    """
    학생의 퀴즈/시험 1회 응시

    ✅ 불변 조건 (DB 레벨)
    - (kind, assessment, user, attempt_number) 유일
    - (kind, assessment, user) 당 in_progress 는 최대 1개 (부분 unique)
    """

    STATUS_CHOICES = [
        ("in_progress", "In progress"),
        ("submitted", "Submitted"),
    ]

    assessment_kind = models.CharField(max_length=20, choices=[("quiz", "Quiz"), ("examination", "Examination")])
    assessment_id = models.PositiveIntegerField()
    user_id = models.PositiveIntegerField(db_index=True)
    classlist_id = models.CharField(max_length=64, null=True, blank=True)

    # 1부터 시작
    attempt_number = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="in_progress")

    score = models.IntegerField(null=True, blank=True)
    total_points = models.PositiveIntegerField(default=0)
    percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    started_at = models.DateTimeField()
    submitted_at = models.DateTimeField(null=True, blank=True)
    time_spent_seconds = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = "assessments_attempt"
        ordering = ["assessment_kind", "assessment_id", "user_id", "attempt_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["assessment_kind", "assessment_id", "user_id", "attempt_number"],
                name="uniq_attempt_number_per_user",
            ),
            models.UniqueConstraint(
                fields=["assessment_kind", "assessment_id", "user_id"],
                condition=models.Q(status="in_progress"),
                name="uniq_in_progress_attempt_per_user",
            ),
        ]

    def __str__(self):
        return (
            f"Attempt {self.assessment_kind}:{self.assessment_id} "
            f"user={self.user_id} #{self.attempt_number} ({self.status})"
        )


class Answer(BaseModel):
    """
    문항 1개 응답. (attempt, question_id) 로 upsert.

    question_id 는 FK 가 아니다. 응시 후 문항이 삭제돼도 답안은 남는다 (orphan → 채점 제외).
    """

    attempt = models.ForeignKey(Attempt, on_delete=models.CASCADE, related_name="answers")
    question_id = models.PositiveIntegerField()

    # 항상 문자열 리스트
    answer = models.JSONField(default=list, blank=True)

    is_correct = models.BooleanField(default=False)
    points_earned = models.IntegerField(default=0)
    feedback = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "assessments_answer"
        unique_together = ("attempt", "question_id")
        ordering = ["attempt_id", "question_id"]

    def __str__(self):
        return f"Answer attempt={self.attempt_id} question={self.question_id}"


class AttemptActivity(models.Model):
    """응시 중 무결성 이벤트 (append-only)."""

    attempt = models.ForeignKey(Attempt, on_delete=models.CASCADE, related_name="activities")
    activity_type = models.CharField(max_length=50)
    description = models.TextField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    occurred_at = models.DateTimeField()

    class Meta:
        db_table = "assessments_attempt_activity"
        ordering = ["occurred_at", "id"]

    def __str__(self):
        return f"AttemptActivity attempt={self.attempt_id} {self.activity_type}"
