# apps/domains/assessments/models/question.py
from django.db import models
from apps.api.common.models import BaseModel


class Question(BaseModel):
    """
    퀴즈/시험 문항

    부모는 (assessment_kind, assessment_id) 다형 참조.
    correct_answers 는 문자열 리스트 (다중 정답 허용).
    """

    KIND_CHOICES = [
        ("quiz", "Quiz"),
        ("examination", "Examination"),
    ]
    TYPE_CHOICES = [
        ("multiple_choice", "Multiple choice"),
        ("true_false", "True / False"),
        ("short_answer", "Short answer"),
        ("essay", "Essay"),
    ]

    assessment_kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    assessment_id = models.PositiveIntegerField()

    order = models.PositiveIntegerField(default=1)
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    text = models.TextField()
    options = models.JSONField(default=list, blank=True)
    correct_answers = models.JSONField(default=list, blank=True)
    explanation = models.TextField(null=True, blank=True)
    points = models.PositiveIntegerField(default=1)

    # 비활성 문항은 새 답안을 받지 않는다 (기존 답안은 그대로 채점)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "assessments_question"
        ordering = ["assessment_kind", "assessment_id", "order", "id"]
        indexes = [
            models.Index(fields=["assessment_kind", "assessment_id"], name="assessments_question_parent"),
        ]

    def __str__(self):
        return f"{self.assessment_kind}:{self.assessment_id} Q{self.order}"
