from classroom.application.ports.unit_of_work import (
    AssessmentUnitOfWork,
    CourseworkUnitOfWork,
    UnitOfWork,
)
from classroom.application.ports.repositories import (
    AnswerRepository,
    AssessmentRepository,
    AssignmentRepository,
    AttemptActivityRepository,
    AttemptRepository,
    EnrollmentRepository,
    QuestionRepository,
    SubmissionRepository,
)
from classroom.application.ports.evaluation import (
    EvaluationGateway,
    EvaluationRequest,
    EvaluationResponse,
)
from classroom.application.ports.events import EventPublisher

__all__ = [
    "UnitOfWork",
    "AssessmentUnitOfWork",
    "CourseworkUnitOfWork",
    "AnswerRepository",
    "AssessmentRepository",
    "AssignmentRepository",
    "AttemptActivityRepository",
    "AttemptRepository",
    "EnrollmentRepository",
    "QuestionRepository",
    "SubmissionRepository",
    "EvaluationGateway",
    "EvaluationRequest",
    "EvaluationResponse",
    "EventPublisher",
]
