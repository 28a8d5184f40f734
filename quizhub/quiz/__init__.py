"""
Quiz module.

Admins author quizzes and multiple choice questions; students take them
and review their graded attempts.
"""
from flask import Blueprint
from quizhub.config import config

admin_quiz_bp = Blueprint('quiz_admin', __name__, url_prefix=f'{config.API_PREFIX}/admin')
student_quiz_bp = Blueprint('quiz_student', __name__, url_prefix=f'{config.API_PREFIX}/quizzes')

from quizhub.quiz import admin_routes, student_routes  # noqa: E402,F401
