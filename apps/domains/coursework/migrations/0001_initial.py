# apps/domains/coursework/migrations/0001_initial.py
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Assignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("classlist_id", models.CharField(db_index=True, max_length=64)),
                ("title", models.CharField(max_length=255)),
                ("instructions", models.TextField(blank=True)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("due_time", models.TimeField(blank=True, null=True)),
                ("points", models.PositiveIntegerField(default=100)),
            ],
            options={
                "db_table": "coursework_assignment",
                "ordering": ["due_date", "id"],
            },
        ),
        migrations.CreateModel(
            name="ClassEnrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("classlist_id", models.CharField(max_length=64)),
                ("student_id", models.PositiveIntegerField()),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("removed", "Removed")], default="active", max_length=20)),
            ],
            options={
                "db_table": "coursework_class_enrollment",
                "ordering": ["classlist_id", "student_id"],
                "unique_together": {("classlist_id", "student_id")},
            },
        ),
        migrations.CreateModel(
            name="AssignmentSubmission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("student_id", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("assigned", "Assigned"),
                            ("turned_in", "Turned in"),
                            ("late", "Late"),
                            ("missing", "Missing"),
                            ("graded", "Graded"),
                        ],
                        default="assigned",
                        max_length=20,
                    ),
                ),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("score", models.IntegerField(blank=True, null=True)),
                ("feedback", models.TextField(blank=True, null=True)),
                ("returned_to_student", models.BooleanField(default=False)),
                ("graded_at", models.DateTimeField(blank=True, null=True)),
                (
                    "assignment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="submissions",
                        to="coursework.assignment",
                    ),
                ),
            ],
            options={
                "db_table": "coursework_assignment_submission",
                "ordering": ["assignment_id", "student_id"],
                "unique_together": {("assignment", "student_id")},
            },
        ),
    ]
