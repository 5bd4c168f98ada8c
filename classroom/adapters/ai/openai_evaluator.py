# PATH: classroom/adapters/ai/openai_evaluator.py
"""
OpenAI 기반 주관식/서술형 평가 게이트웨이

- chat.completions + JSON mode
- 요청마다 timeout 명시 (with_options), 재시도는 SDK max_retries 로 1회 제한
- 어떤 실패든 예외 대신 EvaluationResponse.failure 로 돌려준다
"""
from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from openai import OpenAI

from classroom.adapters.ai.config import EvaluatorConfig
from classroom.adapters.ai.prompt import SYSTEM_PROMPT, build_user_prompt
from classroom.application.ports.evaluation import EvaluationRequest, EvaluationResponse
from classroom.domain.assessment.grading import points_from_percentage

logger = logging.getLogger(__name__)

_MIN_PCT = Decimal("0")
_MAX_PCT = Decimal("100")


class OpenAIEvaluationGateway:
    def __init__(self, config: Optional[EvaluatorConfig] = None, client: Any = None) -> None:
        self.config = config or EvaluatorConfig.load()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client

        if not self.config.OPENAI_API_KEY:
            raise RuntimeError("OPENAI_API_KEY not set")

        self._client = OpenAI(
            api_key=self.config.OPENAI_API_KEY,
            max_retries=self.config.MAX_RETRIES,
        )
        return self._client

    def evaluate(self, request: EvaluationRequest, *, timeout_seconds: float) -> EvaluationResponse:
        logger.info(
            "ai_evaluation_request model=%s answer_length=%s max_points=%s",
            self.config.OPENAI_MODEL,
            len(request.student_answer or ""),
            request.max_points,
        )

        try:
            client = self._get_client().with_options(
                timeout=float(timeout_seconds),
                max_retries=self.config.MAX_RETRIES,
            )
            response = client.chat.completions.create(
                model=self.config.OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": build_user_prompt(
                            question_text=request.question_text,
                            student_answer=request.student_answer,
                            max_points=request.max_points,
                            reference_answer=request.reference_answer,
                            explanation=request.explanation,
                        ),
                    },
                ],
                temperature=self.config.TEMPERATURE,
                max_tokens=self.config.MAX_TOKENS,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.warning("ai_evaluation_error model=%s error=%s", self.config.OPENAI_MODEL, e)
            return EvaluationResponse.failure(str(e) or e.__class__.__name__)

        return parse_evaluation(content, request.max_points)


def parse_evaluation(content: Optional[str], max_points: int) -> EvaluationResponse:
    """모델 응답 JSON → EvaluationResponse. score_percentage 없거나 숫자가 아니면 failure."""
    try:
        data = json.loads(content or "{}")
    except (TypeError, ValueError):
        logger.warning("ai_evaluation_invalid_json content=%r", (content or "")[:200])
        return EvaluationResponse.failure("Invalid JSON from AI")

    if not isinstance(data, dict) or "score_percentage" not in data:
        logger.warning("ai_evaluation_invalid_response content=%r", (content or "")[:200])
        return EvaluationResponse.failure("Invalid response from AI")

    raw = data.get("score_percentage")
    if isinstance(raw, bool):
        return EvaluationResponse.failure("Invalid score_percentage from AI")
    try:
        pct = Decimal(str(raw).strip().rstrip("%"))
    except (InvalidOperation, ValueError):
        return EvaluationResponse.failure("Invalid score_percentage from AI")
    if not pct.is_finite():
        return EvaluationResponse.failure("Invalid score_percentage from AI")

    pct = max(_MIN_PCT, min(_MAX_PCT, pct))
    feedback = data.get("feedback")
    if not isinstance(feedback, str) or not feedback.strip():
        feedback = "No feedback provided."

    return EvaluationResponse.success(
        points_earned=points_from_percentage(pct, max_points),
        percentage=pct,
        feedback=feedback.strip(),
    )
