# apps/domains/coursework/models/__init__.py
from .assignment import Assignment
from .class_enrollment import ClassEnrollment
from .submission import AssignmentSubmission

__all__ = [
    "Assignment",
    "ClassEnrollment",
    "AssignmentSubmission",
]
