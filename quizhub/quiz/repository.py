"""
Data access used by the attempt grader.

The grader never touches ``db`` directly: it is handed an object with the
three operations below, so tests can substitute an in-memory fake.
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Protocol

from quizhub import db
from quizhub.quiz import services
from quizhub.quiz.models import Quiz, Question, QuizAttempt


@dataclass(frozen=True)
class GradedAnswer:
    question_id: int
    selected_option_id: str
    is_correct: bool
    marks_awarded: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AttemptRecord:
    quiz_id: int
    student_id: int
    answers: list[GradedAnswer]
    score: int
    total_marks: int
    is_passed: bool
    started_at: datetime
    submitted_at: datetime
    time_spent: int


class QuizRepository(Protocol):
    def get_quiz_by_id(self, quiz_id: int) -> Quiz:
        """Return the quiz or raise NotFoundError."""

    def get_all_questions_by_quiz_id(self, quiz_id: int) -> list[Question]:
        """Return the quiz's questions ordered by ``order``; NotFoundError if the quiz is absent."""

    def create_attempt(self, record: AttemptRecord) -> QuizAttempt:
        """Persist the attempt and return it."""


class SqlAlchemyQuizRepository:
    """QuizRepository backed by the application database."""

    def get_quiz_by_id(self, quiz_id: int) -> Quiz:
        return services.get_quiz_by_id(quiz_id)

    def get_all_questions_by_quiz_id(self, quiz_id: int) -> list[Question]:
        return services.get_all_questions_by_quiz_id(quiz_id)

    def create_attempt(self, record: AttemptRecord) -> QuizAttempt:
        attempt = QuizAttempt(
            quiz_id=record.quiz_id,
            student_id=record.student_id,
            answers=[answer.to_dict() for answer in record.answers],
            score=record.score,
            total_marks=record.total_marks,
            is_passed=record.is_passed,
            started_at=record.started_at,
            submitted_at=record.submitted_at,
            time_spent=record.time_spent,
        )
        db.session.add(attempt)
        db.session.commit()
        return attempt
