# celery app 을 Django 기동 시 로드 (shared_task 바인딩)
from .celery import app as celery_app

__all__ = ["celery_app"]
