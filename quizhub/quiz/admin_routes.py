"""
Admin routes for quiz management.

Admins can:
- Create, update and delete quizzes
- Add, edit and remove questions (answers included in responses)
- Review every student's attempts
"""
from flask import request, current_app
from flask_login import current_user

from quizhub.common.decorators import admin_required
from quizhub.common.responses import success_response
from quizhub.errors import NotFoundError
from quizhub.quiz import admin_quiz_bp, services
from quizhub.quiz.schemas import (
    parse_quiz_create, parse_quiz_update, parse_question_create, parse_question_update,
)


@admin_quiz_bp.route('/quizzes', methods=['POST'])
@admin_required
def create_quiz():
    """
    Create a new quiz. Questions are added separately.

    Request body:
    {
        "title": "Quiz Title",
        "description": "Markdown description",
        "duration": 30,          // minutes
        "passing_marks": 10,
        "is_active": false       // optional
    }
    """
    data = parse_quiz_create(request.get_json(silent=True))
    quiz = services.create_quiz(data, created_by=current_user.id)
    current_app.logger.info(f"Admin {current_user.id} created quiz {quiz.id}")
    return success_response(quiz.to_dict(), "Quiz created successfully", status=201)


@admin_quiz_bp.route('/quizzes', methods=['GET'])
@admin_required
def list_quizzes():
    """List all quizzes, active and inactive."""
    quizzes = services.get_all_quizzes()
    return success_response([q.to_dict() for q in quizzes], "Quizzes fetched successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>', methods=['GET'])
@admin_required
def get_quiz(quiz_id):
    quiz = services.get_quiz_by_id(quiz_id)
    return success_response(quiz.to_dict(), "Quiz fetched successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>', methods=['PUT'])
@admin_required
def update_quiz(quiz_id):
    """Update any subset of title, description, duration, passing_marks, is_active."""
    data = parse_quiz_update(request.get_json(silent=True))
    quiz = services.update_quiz(quiz_id, data)
    return success_response(quiz.to_dict(), "Quiz updated successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>', methods=['DELETE'])
@admin_required
def delete_quiz(quiz_id):
    """Delete a quiz together with its questions and attempts."""
    services.delete_quiz(quiz_id)
    current_app.logger.info(f"Admin {current_user.id} deleted quiz {quiz_id}")
    return success_response(message="Quiz deleted successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>/questions', methods=['POST'])
@admin_required
def create_question(quiz_id):
    """
    Add a question to a quiz.

    Request body:
    {
        "question_text": "What is 2 + 2?",
        "marks": 5,
        "order": 1,
        "options": [
            {"id": "a", "text": "3", "is_correct": false},
            {"id": "b", "text": "4", "is_correct": true}
        ]
    }
    """
    data = parse_question_create(request.get_json(silent=True))
    question = services.create_question(quiz_id, data)
    return success_response(question.to_dict(), "Question created successfully", status=201)


@admin_quiz_bp.route('/quizzes/<int:quiz_id>/questions', methods=['GET'])
@admin_required
def list_questions(quiz_id):
    """All questions of a quiz, with the correct answers."""
    questions = services.get_all_questions_by_quiz_id(quiz_id)
    return success_response([q.to_dict() for q in questions], "Questions fetched successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>/questions/<int:question_id>', methods=['PUT'])
@admin_required
def update_question(quiz_id, question_id):
    data = parse_question_update(request.get_json(silent=True))
    question = services.update_question(question_id, data, quiz_id=quiz_id)
    return success_response(question.to_dict(), "Question updated successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>/questions/<int:question_id>', methods=['DELETE'])
@admin_required
def delete_question(quiz_id, question_id):
    services.delete_question(question_id, quiz_id=quiz_id)
    return success_response(message="Question deleted successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>/attempts', methods=['GET'])
@admin_required
def list_quiz_attempts(quiz_id):
    """Every student's attempts for a quiz, oldest first."""
    attempts = services.get_attempts_by_quiz_id(quiz_id)
    return success_response([a.to_dict() for a in attempts], "Quiz attempts fetched successfully")


@admin_quiz_bp.route('/quizzes/<int:quiz_id>/attempts/<int:attempt_id>', methods=['GET'])
@admin_required
def get_quiz_attempt(quiz_id, attempt_id):
    attempt = services.get_attempt_by_id(attempt_id)
    if attempt.quiz_id != quiz_id:
        raise NotFoundError("Quiz attempt not found")
    return success_response(attempt.to_dict(), "Attempt details fetched successfully")
