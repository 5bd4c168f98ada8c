# PATH: apps/domains/assessments/apps.py
# 역할: 퀴즈/시험 응시 도메인 앱 설정(AppConfig)

from django.apps import AppConfig


class AssessmentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.domains.assessments"
    label = "assessments"
