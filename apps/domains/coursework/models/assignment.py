# apps/domains/coursework/models/assignment.py
from django.db import models
from apps.api.common.models import BaseModel


class Assignment(BaseModel):
    """
    과제 정의

    due_time 이 없으면 due_date 당일 23:59:59 (COURSEWORK_TIME_ZONE) 가 마감.
    due_date 가 없으면 상태 스윕 대상이 아니다.
    """

    classlist_id = models.CharField(max_length=64, db_index=True)
    title = models.CharField(max_length=255)
    instructions = models.TextField(blank=True)

    due_date = models.DateField(null=True, blank=True)
    due_time = models.TimeField(null=True, blank=True)

    points = models.PositiveIntegerField(default=100)

    class Meta:
        db_table = "coursework_assignment"
        ordering = ["due_date", "id"]

    def __str__(self):
        return self.title
