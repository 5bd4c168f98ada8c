# apps/domains/coursework/models/class_enrollment.py
from django.db import models
from apps.api.common.models import BaseModel


class ClassEnrollment(BaseModel):
    """반(classlist) 수강 학생. 스윕은 status=active 학생만 본다."""

    STATUS_CHOICES = [
        ("active", "Active"),
        ("inactive", "Inactive"),
        ("removed", "Removed"),
    ]

    classlist_id = models.CharField(max_length=64)
    student_id = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")

    class Meta:
        db_table = "coursework_class_enrollment"
        unique_together = ("classlist_id", "student_id")
        ordering = ["classlist_id", "student_id"]

    def __str__(self):
        return f"{self.classlist_id}:{self.student_id} ({self.status})"
