"""
Test cases for attempt grading, against the in-memory repository.
"""
from datetime import datetime, timedelta

import pytest

from quizhub.errors import BadRequestError, NotFoundError
from quizhub.quiz.grading import AttemptGrader, is_passing
from quizhub.quiz.schemas import AnswerSubmission

NOW = datetime(2025, 1, 1, 12, 0, 0)
STARTED = NOW - timedelta(minutes=5)


def answer(question_id, option_id):
    return AnswerSubmission(question_id=question_id, selected_option_id=option_id)


@pytest.fixture
def two_question_quiz(repository):
    """Quiz 1: question 10 worth 5 (correct "a"), question 20 worth 10 (correct "b"), passing 10."""
    repository.add_quiz(1, passing_marks=10)
    repository.add_question(1, 10, marks=5, correct='a')
    repository.add_question(1, 20, marks=10, correct='b')
    return repository


@pytest.fixture
def grader(repository):
    return AttemptGrader(repository, start_skew_seconds=5, clock=lambda: NOW)


class TestAttemptGrader:
    """Scoring of valid submissions."""

    def test_one_wrong_answer_fails(self, grader, two_question_quiz):
        attempt = grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'c')])

        assert attempt.score == 5
        assert attempt.total_marks == 15
        assert attempt.is_passed is False
        assert attempt.answers == [
            {'question_id': 10, 'selected_option_id': 'a', 'is_correct': True, 'marks_awarded': 5},
            {'question_id': 20, 'selected_option_id': 'c', 'is_correct': False, 'marks_awarded': 0},
        ]

    def test_all_correct_passes(self, grader, two_question_quiz):
        attempt = grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b')])

        assert attempt.score == 15
        assert attempt.total_marks == 15
        assert attempt.is_passed is True

    def test_score_equal_to_passing_marks_passes(self, grader, two_question_quiz):
        attempt = grader.grade(1, 7, STARTED, [answer(10, 'd'), answer(20, 'b')])

        assert attempt.score == 10
        assert attempt.is_passed is True

    def test_score_is_sum_of_marks_awarded(self, grader, two_question_quiz):
        attempt = grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'd')])

        assert attempt.score == sum(a['marks_awarded'] for a in attempt.answers)

    def test_answers_in_any_order_are_graded_in_question_order(self, grader, two_question_quiz):
        attempt = grader.grade(1, 7, STARTED, [answer(20, 'b'), answer(10, 'a')])

        assert [a['question_id'] for a in attempt.answers] == [10, 20]
        assert attempt.score == 15

    def test_attempt_records_submission_details(self, grader, two_question_quiz):
        attempt = grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b')])

        assert attempt.quiz_id == 1
        assert attempt.student_id == 7
        assert attempt.started_at == STARTED
        assert attempt.submitted_at == NOW
        assert attempt.time_spent == 300
        assert len(two_question_quiz.attempts) == 1

    def test_total_marks_uses_current_questions(self, grader, two_question_quiz):
        first = grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b')])
        two_question_quiz.questions[1][1].marks = 20
        second = grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b')])

        assert first.total_marks == 15
        assert second.total_marks == 25
        assert second.score == 25

    def test_duplicate_submissions_create_separate_attempts(self, grader, two_question_quiz):
        grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b')])
        grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b')])

        assert len(two_question_quiz.attempts) == 2

    def test_grading_leaves_quiz_and_questions_untouched(self, grader, two_question_quiz):
        quiz = two_question_quiz.quizzes[1]
        questions = two_question_quiz.questions[1]
        quiz_before = (quiz.passing_marks, quiz.total_questions)
        questions_before = [(q.id, q.marks, q.order, [dict(opt) for opt in q.options]) for q in questions]

        grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'c')])

        assert (quiz.passing_marks, quiz.total_questions) == quiz_before
        assert [(q.id, q.marks, q.order, q.options) for q in questions] == questions_before

    def test_is_passing_is_inclusive(self):
        assert is_passing(10, 10) is True
        assert is_passing(9, 10) is False
        assert is_passing(0, 0) is True


class TestGradingPreconditions:
    """Rejected submissions never produce an attempt."""

    def test_unknown_quiz(self, grader, repository):
        with pytest.raises(NotFoundError):
            grader.grade(99, 7, STARTED, [])
        assert repository.attempts == []

    def test_quiz_without_questions(self, grader, repository):
        repository.add_quiz(2, passing_marks=0)

        with pytest.raises(BadRequestError, match="no questions"):
            grader.grade(2, 7, STARTED, [])
        assert repository.attempts == []

    def test_too_few_answers(self, grader, two_question_quiz):
        with pytest.raises(BadRequestError, match="Expected 2 answers, received 1") as exc_info:
            grader.grade(1, 7, STARTED, [answer(10, 'a')])
        assert exc_info.value.details == {'expected': 2, 'received': 1}
        assert two_question_quiz.attempts == []

    def test_too_many_answers(self, grader, two_question_quiz):
        with pytest.raises(BadRequestError, match="Expected 2 answers, received 3"):
            grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'b'), answer(20, 'c')])
        assert two_question_quiz.attempts == []

    def test_missing_answer_for_question(self, grader, two_question_quiz):
        with pytest.raises(BadRequestError, match="Answer for question 20 is missing"):
            grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(10, 'b')])
        assert two_question_quiz.attempts == []

    def test_answer_for_foreign_question(self, grader, two_question_quiz):
        with pytest.raises(BadRequestError, match="question 20 is missing"):
            grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(999, 'b')])
        assert two_question_quiz.attempts == []

    def test_option_not_in_question(self, grader, two_question_quiz):
        with pytest.raises(BadRequestError, match="Invalid option 'z'") as exc_info:
            grader.grade(1, 7, STARTED, [answer(10, 'a'), answer(20, 'z')])
        assert exc_info.value.details == {'question_id': 20, 'selected_option_id': 'z'}
        assert two_question_quiz.attempts == []


class TestTimeSpent:
    """time_spent is whole seconds and never negative."""

    def test_fractional_seconds_are_floored(self, grader, two_question_quiz):
        started = NOW - timedelta(seconds=90, milliseconds=700)
        attempt = grader.grade(1, 7, started, [answer(10, 'a'), answer(20, 'b')])

        assert attempt.time_spent == 90

    def test_small_clock_skew_is_clamped_to_zero(self, grader, two_question_quiz):
        started = NOW + timedelta(seconds=3)
        attempt = grader.grade(1, 7, started, [answer(10, 'a'), answer(20, 'b')])

        assert attempt.time_spent == 0

    def test_started_at_far_in_future_is_rejected(self, grader, two_question_quiz):
        started = NOW + timedelta(minutes=10)

        with pytest.raises(BadRequestError, match="in the future"):
            grader.grade(1, 7, started, [answer(10, 'a'), answer(20, 'b')])
        assert two_question_quiz.attempts == []
