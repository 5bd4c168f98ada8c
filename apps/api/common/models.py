# PATH: apps/api/common/models.py
from django.db import models


class TimestampModel(models.Model):
    """
    생성 / 수정 시간 자동 기록 추상 모델

    updated_at 은 제출 상태 compare-and-set 의 버전으로도 쓰인다.
    QuerySet.update() 는 auto_now 를 거치지 않으므로 호출자가 직접 넣는다.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(TimestampModel):
    """assessments / coursework 모델 공통 베이스."""
    class Meta:
        abstract = True
