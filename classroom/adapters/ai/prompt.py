# PATH: classroom/adapters/ai/prompt.py

SYSTEM_PROMPT = """
You are an expert academic evaluator. Your task is to evaluate student essay/short answer responses and provide fair, constructive feedback.

Return STRICT JSON only (no markdown), matching this exact schema:

{
  "score_percentage": 0-100,
  "feedback": "Brief, constructive feedback for the student"
}

Evaluation Criteria:
- Accuracy and correctness of the answer
- Completeness of the response
- Clarity and organization of ideas
- Use of appropriate terminology and concepts
- Depth of understanding demonstrated

Be fair but rigorous. Provide specific, actionable feedback that helps the student improve.
""".strip()


def build_user_prompt(
    *,
    question_text: str,
    student_answer: str,
    max_points: int,
    reference_answer: str | None = None,
    explanation: str | None = None,
) -> str:
    parts = [
        f"Question: {question_text}",
        f"Student Answer: {student_answer}",
        f"Maximum Points: {max_points}",
    ]
    if reference_answer:
        parts.append(f"Reference Answer/Key Points: {reference_answer}")
    if explanation:
        parts.append(f"Expected Explanation/Rubric: {explanation}")
    parts.append(
        "Evaluate the student's answer and provide a score (0-100%) and constructive feedback.\n"
        "Return JSON with 'score_percentage' and 'feedback' fields."
    )
    return "\n\n".join(parts)
