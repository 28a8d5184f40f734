"""
Attempt grading.

A submission is checked completely before anything is written: the quiz
must exist and have questions, every question must be answered exactly
once, and every selected option must belong to its question. Grading is
all-or-nothing per question. ``total_marks`` is summed from the questions
as they are at submission time.
"""
import logging
import math
from datetime import datetime
from typing import Callable, Sequence

from flask import current_app

from quizhub.errors import BadRequestError
from quizhub.quiz.models import QuizAttempt
from quizhub.quiz.repository import AttemptRecord, GradedAnswer, QuizRepository, SqlAlchemyQuizRepository
from quizhub.quiz.schemas import AnswerSubmission, QuizSubmission
from quizhub.utils import utcnow

logger = logging.getLogger(__name__)


def is_passing(score: int, passing_marks: int) -> bool:
    return score >= passing_marks


class AttemptGrader:
    """
    Grades a complete quiz submission and persists one attempt.

    Args:
        repository: data access for quizzes, questions and attempts
        start_skew_seconds: how far ``started_at`` may lie in the future
            (client clock drift) before the submission is rejected
        clock: returns the current naive UTC time
    """

    def __init__(self, repository: QuizRepository, start_skew_seconds: int = 5,
                 clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.start_skew_seconds = start_skew_seconds
        self.clock = clock

    def grade(self, quiz_id: int, student_id: int, started_at: datetime,
              answers: Sequence[AnswerSubmission]) -> QuizAttempt:
        quiz = self.repository.get_quiz_by_id(quiz_id)
        questions = self.repository.get_all_questions_by_quiz_id(quiz_id)

        if not questions:
            raise BadRequestError("Quiz has no questions")

        if len(answers) != len(questions):
            raise BadRequestError(
                f"Expected {len(questions)} answers, received {len(answers)}",
                details={'expected': len(questions), 'received': len(answers)},
            )

        answers_by_question = {}
        for answer in answers:
            answers_by_question.setdefault(answer.question_id, answer)

        for question in questions:
            if question.id not in answers_by_question:
                raise BadRequestError(
                    f"Answer for question {question.id} is missing",
                    details={'question_id': question.id},
                )

        selected = {}
        for question in questions:
            answer = answers_by_question[question.id]
            option = question.find_option(answer.selected_option_id)
            if option is None:
                raise BadRequestError(
                    f"Invalid option '{answer.selected_option_id}' selected for question {question.id}",
                    details={'question_id': question.id, 'selected_option_id': answer.selected_option_id},
                )
            selected[question.id] = option

        submitted_at = self.clock()
        elapsed = (submitted_at - started_at).total_seconds()
        if elapsed < -self.start_skew_seconds:
            raise BadRequestError("started_at cannot be in the future")

        total_score = 0
        total_marks = 0
        graded = []
        for question in questions:
            option = selected[question.id]
            total_marks += question.marks
            marks_awarded = question.marks if option.is_correct else 0
            total_score += marks_awarded
            graded.append(GradedAnswer(
                question_id=question.id,
                selected_option_id=option.id,
                is_correct=option.is_correct,
                marks_awarded=marks_awarded,
            ))

        record = AttemptRecord(
            quiz_id=quiz_id,
            student_id=student_id,
            answers=graded,
            score=total_score,
            total_marks=total_marks,
            is_passed=is_passing(total_score, quiz.passing_marks),
            started_at=started_at,
            submitted_at=submitted_at,
            time_spent=max(0, math.floor(elapsed)),
        )
        attempt = self.repository.create_attempt(record)

        logger.info(
            f"Graded attempt {attempt.id}: quiz={quiz_id} student={student_id} "
            f"score={total_score}/{total_marks} passed={record.is_passed}"
        )
        return attempt


def submit_quiz(quiz_id: int, student_id: int, submission: QuizSubmission) -> QuizAttempt:
    """Grade a submission against the application database."""
    grader = AttemptGrader(
        SqlAlchemyQuizRepository(),
        start_skew_seconds=current_app.config.get('START_TIME_SKEW_SECONDS', 5),
    )
    return grader.grade(quiz_id, student_id, submission.started_at, submission.answers)
