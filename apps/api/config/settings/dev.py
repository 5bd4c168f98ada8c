from .base import *

DEBUG = True

# 로컬: DB_ENGINE=sqlite 면 파일 DB 사용
if os.getenv("DB_ENGINE", "").lower() == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

LOGGING["root"]["level"] = "DEBUG"
