"""
Student routes for quiz functionality.

Students can:
- List active quizzes and view their details
- Fetch questions page by page (correct answers hidden)
- Submit answers and review their graded attempts
"""
from flask import request, current_app
from flask_login import current_user

from quizhub.common.decorators import student_required
from quizhub.common.pagination import get_page_args
from quizhub.common.responses import success_response, paginated_response
from quizhub.errors import ForbiddenError, NotFoundError
from quizhub.quiz import student_quiz_bp, services
from quizhub.quiz.grading import submit_quiz
from quizhub.quiz.schemas import parse_submission
from quizhub.security import SecurityLogger


def _get_active_quiz(quiz_id):
    """Inactive quizzes do not exist as far as students are concerned."""
    quiz = services.get_quiz_by_id(quiz_id)
    if not quiz.is_active:
        raise NotFoundError("Quiz not found")
    return quiz


@student_quiz_bp.route('', methods=['GET'])
@student_required
def list_active_quizzes():
    quizzes = services.get_active_quizzes()
    return success_response(
        [q.to_dict(include_admin_fields=False) for q in quizzes],
        "Active quizzes fetched successfully",
    )


@student_quiz_bp.route('/<int:quiz_id>', methods=['GET'])
@student_required
def get_quiz_details(quiz_id):
    """Basic quiz information, without questions."""
    quiz = _get_active_quiz(quiz_id)
    return success_response(quiz.to_dict(include_admin_fields=False), "Quiz details fetched successfully")


@student_quiz_bp.route('/<int:quiz_id>/questions', methods=['GET'])
@student_required
def get_quiz_questions(quiz_id):
    """
    Questions for a quiz, page by page.
    Only returns questions, not answers (to prevent cheating).

    Query parameters: page (default 1), limit (default DEFAULT_PAGE_SIZE).
    """
    _get_active_quiz(quiz_id)
    page, limit = get_page_args()
    questions, total = services.get_questions_by_quiz_id(quiz_id, page, limit)
    return paginated_response(
        [q.to_dict(include_answers=False) for q in questions],
        page, limit, total,
        "Questions fetched successfully",
    )


@student_quiz_bp.route('/<int:quiz_id>/submit', methods=['POST'])
@student_required
def submit_quiz_attempt(quiz_id):
    """
    Submit answers to every question of a quiz; the attempt is graded immediately.

    Request body:
    {
        "started_at": "2025-01-01T10:00:00Z",
        "answers": [{"question_id": 1, "selected_option_id": "b"}, ...]
    }
    """
    _get_active_quiz(quiz_id)
    submission = parse_submission(request.get_json(silent=True))
    attempt = submit_quiz(quiz_id, current_user.id, submission)
    current_app.logger.info(
        f"Student {current_user.id} submitted quiz {quiz_id}: attempt {attempt.id}, "
        f"score {attempt.score}/{attempt.total_marks}"
    )
    return success_response(attempt.to_dict(), "Quiz submitted successfully", status=201)


@student_quiz_bp.route('/my-attempts', methods=['GET'])
@student_required
def list_my_attempts():
    """The student's attempts, optionally narrowed with ``?quiz_id=``."""
    quiz_id = request.args.get('quiz_id', type=int)
    if quiz_id is not None:
        attempts = services.get_student_attempts_for_quiz(quiz_id, current_user.id)
    else:
        attempts = services.get_attempts_by_student_id(current_user.id)
    return success_response([a.to_dict() for a in attempts], "Your quiz attempts fetched successfully")


@student_quiz_bp.route('/my-attempts/<int:attempt_id>', methods=['GET'])
@student_required
def get_my_attempt(attempt_id):
    """Score and per-question results of one of the student's own attempts."""
    attempt = services.get_attempt_by_id(attempt_id)
    if attempt.student_id != current_user.id:
        SecurityLogger.log_unauthorized_access(request.path, current_user.id)
        raise ForbiddenError("Unauthorized access to attempt")
    return success_response(attempt.to_dict(), "Attempt details fetched successfully")
