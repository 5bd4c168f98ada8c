# apps/domains/assessments/migrations/0001_initial.py
import django.db.models.deletion
from django.db import migrations, models


def _assessment_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("title", models.CharField(max_length=255)),
        ("description", models.TextField(blank=True)),
        ("classlist_id", models.CharField(db_index=True, max_length=64)),
        ("attempts_allowed", models.PositiveIntegerField(default=1)),
        ("total_points", models.PositiveIntegerField(default=0)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Quiz",
            fields=_assessment_fields(),
            options={
                "db_table": "assessments_quiz",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Examination",
            fields=_assessment_fields() + [
                ("duration_minutes", models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                "db_table": "assessments_examination",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assessment_kind", models.CharField(choices=[("quiz", "Quiz"), ("examination", "Examination")], max_length=20)),
                ("assessment_id", models.PositiveIntegerField()),
                ("order", models.PositiveIntegerField(default=1)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("multiple_choice", "Multiple choice"),
                            ("true_false", "True / False"),
                            ("short_answer", "Short answer"),
                            ("essay", "Essay"),
                        ],
                        max_length=30,
                    ),
                ),
                ("text", models.TextField()),
                ("options", models.JSONField(blank=True, default=list)),
                ("correct_answers", models.JSONField(blank=True, default=list)),
                ("explanation", models.TextField(blank=True, null=True)),
                ("points", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "assessments_question",
                "ordering": ["assessment_kind", "assessment_id", "order", "id"],
                "indexes": [
                    models.Index(fields=["assessment_kind", "assessment_id"], name="assessments_question_parent"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Attempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assessment_kind", models.CharField(choices=[("quiz", "Quiz"), ("examination", "Examination")], max_length=20)),
                ("assessment_id", models.PositiveIntegerField()),
                ("user_id", models.PositiveIntegerField(db_index=True)),
                ("classlist_id", models.CharField(blank=True, max_length=64, null=True)),
                ("attempt_number", models.PositiveIntegerField()),
                ("status", models.CharField(choices=[("in_progress", "In progress"), ("submitted", "Submitted")], default="in_progress", max_length=20)),
                ("score", models.IntegerField(blank=True, null=True)),
                ("total_points", models.PositiveIntegerField(default=0)),
                ("percentage", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("started_at", models.DateTimeField()),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("time_spent_seconds", models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                "db_table": "assessments_attempt",
                "ordering": ["assessment_kind", "assessment_id", "user_id", "attempt_number"],
            },
        ),
        migrations.AddConstraint(
            model_name="attempt",
            constraint=models.UniqueConstraint(
                fields=("assessment_kind", "assessment_id", "user_id", "attempt_number"),
                name="uniq_attempt_number_per_user",
            ),
        ),
        migrations.AddConstraint(
            model_name="attempt",
            constraint=models.UniqueConstraint(
                condition=models.Q(("status", "in_progress")),
                fields=("assessment_kind", "assessment_id", "user_id"),
                name="uniq_in_progress_attempt_per_user",
            ),
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("question_id", models.PositiveIntegerField()),
                ("answer", models.JSONField(blank=True, default=list)),
                ("is_correct", models.BooleanField(default=False)),
                ("points_earned", models.IntegerField(default=0)),
                ("feedback", models.TextField(blank=True, null=True)),
                (
                    "attempt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="assessments.attempt",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_answer",
                "ordering": ["attempt_id", "question_id"],
                "unique_together": {("attempt", "question_id")},
            },
        ),
        migrations.CreateModel(
            name="AttemptActivity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("activity_type", models.CharField(max_length=50)),
                ("description", models.TextField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("occurred_at", models.DateTimeField()),
                (
                    "attempt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activities",
                        to="assessments.attempt",
                    ),
                ),
            ],
            options={
                "db_table": "assessments_attempt_activity",
                "ordering": ["occurred_at", "id"],
            },
        ),
    ]
