# apps/domains/assessments/models/__init__.py
from .assessment import Quiz, Examination
from .question import Question
from .attempt import Attempt, Answer, AttemptActivity

__all__ = [
    "Quiz",
    "Examination",
    "Question",
    "Attempt",
    "Answer",
    "AttemptActivity",
]
