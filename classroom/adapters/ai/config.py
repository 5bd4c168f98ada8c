# PATH: classroom/adapters/ai/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


@dataclass(frozen=True)
class EvaluatorConfig:
    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # 호출 정책
    TIMEOUT_SECONDS: float = 30.0
    MAX_RETRIES: int = 1  # 0 = 재시도 없음
    TEMPERATURE: float = 0.3
    MAX_TOKENS: int = 500

    @staticmethod
    def load() -> "EvaluatorConfig":
        return EvaluatorConfig(
            OPENAI_API_KEY=_env("OPENAI_API_KEY"),
            OPENAI_MODEL=_env("OPENAI_MODEL", "gpt-4o-mini") or "gpt-4o-mini",
            TIMEOUT_SECONDS=float(_env("AI_EVALUATOR_TIMEOUT_SECONDS", "30") or "30"),
            MAX_RETRIES=max(0, int(_env("AI_EVALUATOR_MAX_RETRIES", "1") or "1")),
            TEMPERATURE=float(_env("AI_EVALUATOR_TEMPERATURE", "0.3") or "0.3"),
            MAX_TOKENS=int(_env("AI_EVALUATOR_MAX_TOKENS", "500") or "500"),
        )
