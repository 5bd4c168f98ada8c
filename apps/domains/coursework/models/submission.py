# apps/domains/coursework/models/submission.py
from django.db import models
from apps.api.common.models import BaseModel


class AssignmentSubmission(BaseModel):
    """
    (과제, 학생) 당 제출 row 1개

    🔥 status 쓰기 주체
    - 학생 제출 (turned_in / late)
    - 강사 채점 (graded)
    - 상태 스윕 (assigned / missing / 재계산)

    스윕은 updated_at 을 버전으로 compare-and-set 한다.
    graded 는 어떤 경로로도 되돌리지 않는다.
    """

    STATUS_CHOICES = [
        ("assigned", "Assigned"),
        ("turned_in", "Turned in"),
        ("late", "Late"),
        ("missing", "Missing"),
        ("graded", "Graded"),
    ]

    assignment = models.ForeignKey(
        "coursework.Assignment",
        on_delete=models.CASCADE,
        related_name="submissions",
    )
    student_id = models.PositiveIntegerField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="assigned")
    submitted_at = models.DateTimeField(null=True, blank=True)

    score = models.IntegerField(null=True, blank=True)
    feedback = models.TextField(null=True, blank=True)
    returned_to_student = models.BooleanField(default=False)
    graded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "coursework_assignment_submission"
        unique_together = ("assignment", "student_id")
        ordering = ["assignment_id", "student_id"]

    def __str__(self):
        return f"Submission assignment={self.assignment_id} student={self.student_id} ({self.status})"
