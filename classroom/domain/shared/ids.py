"""
도메인 공통: 실행 ID 생성 (외부 라이브러리 없음)
"""
from __future__ import annotations

import uuid


def generate_run_id() -> str:
    """스윕/제출 로그 상관관계용 짧은 ID."""
    return uuid.uuid4().hex[:8]
