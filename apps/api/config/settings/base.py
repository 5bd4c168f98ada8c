# apps/api/config/settings/base.py

from pathlib import Path
import os

# ==================================================
# BASE
# ==================================================

BASE_DIR = Path(__file__).resolve().parents[4]

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-key")
DEBUG = False
ALLOWED_HOSTS = ["*"]


# ==================================================
# INSTALLED APPS
# ==================================================

INSTALLED_APPS = [
    # Django
    "django.contrib.auth",
    "django.contrib.contenttypes",

    # Domain Apps
    "apps.domains.assessments",
    "apps.domains.coursework",
]

# ==================================================
# DATABASE
# ==================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME"),
        "USER": os.getenv("DB_USER"),
        "PASSWORD": os.getenv("DB_PASSWORD"),
        "HOST": os.getenv("DB_HOST"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

# ==================================================
# GLOBAL
# ==================================================

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Manila"

USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ==================================================
# COURSEWORK
# ==================================================
# 마감 판정 타임존. 화면 라벨 / 제출 / 스윕 모두 이 값 하나만 사용

COURSEWORK_TIME_ZONE = os.getenv("COURSEWORK_TIME_ZONE", "Asia/Manila")

ASSIGNMENT_STATUS_SWEEP_INTERVAL_SECONDS = int(
    os.getenv("ASSIGNMENT_STATUS_SWEEP_INTERVAL_SECONDS", "300")
)

# ==================================================
# AI EVALUATOR (주관식/서술형 채점)
# ==================================================
# 키/모델/재시도는 classroom.adapters.ai.config.EvaluatorConfig 가 env 에서 직접 읽는다

AI_EVALUATOR_TIMEOUT_SECONDS = float(os.getenv("AI_EVALUATOR_TIMEOUT_SECONDS", "30"))

# ==================================================
# CELERY / REDIS
# ==================================================

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"

CELERY_TASK_DEFAULT_QUEUE = "default"

CELERY_TIMEZONE = TIME_ZONE

CELERY_TASK_ACKS_LATE = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1

CELERY_BEAT_SCHEDULE = {
    "assignment-status-sweep": {
        "task": "coursework.run_assignment_status_sweep",
        "schedule": float(ASSIGNMENT_STATUS_SWEEP_INTERVAL_SECONDS),
    },
}

# ==================================================
# LOGGING
# ==================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[{levelname}] {asctime} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.getenv("LOG_LEVEL", "INFO"),
    },
    "loggers": {
        # 외부 SDK 요청 로그는 WARNING 이상만
        "openai": {"level": "WARNING"},
        "httpx": {"level": "WARNING"},
    },
}
