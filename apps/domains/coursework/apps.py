# PATH: apps/domains/coursework/apps.py
# 역할: 과제/제출 상태 도메인 앱 설정(AppConfig)

from django.apps import AppConfig


class CourseworkConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.domains.coursework"
    label = "coursework"
