# apps/domains/assessments/models/assessment.py
from django.db import models
from apps.api.common.models import BaseModel


class AssessmentBase(BaseModel):
    """
    Quiz / Examination 공통 필드

    응시 엔진은 두 모델을 (kind, id) 로만 구분한다.
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # 반(classlist) 식별자. 다른 도메인 참조는 FK 대신 값으로 보관
    classlist_id = models.CharField(max_length=64, db_index=True)

    attempts_allowed = models.PositiveIntegerField(default=1)
    total_points = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class Quiz(AssessmentBase):
    class Meta(AssessmentBase.Meta):
        db_table = "assessments_quiz"


class Examination(AssessmentBase):
    # 시험 응시 가능 시간 (분). 응시 엔진은 강제하지 않음
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)

    class Meta(AssessmentBase.Meta):
        db_table = "assessments_examination"
