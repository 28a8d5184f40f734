"""
Pytest configuration and fixtures for testing.

Every test gets a fresh application bound to an in-memory SQLite database.
"""
import os

import pytest

os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from quizhub import create_app, db  # noqa: E402
from quizhub.auth.models import User  # noqa: E402
from quizhub.auth.utils import hash_password  # noqa: E402
from quizhub.errors import NotFoundError  # noqa: E402
from quizhub.quiz.models import Quiz, Question, QuizAttempt  # noqa: E402
from quizhub.quiz.schemas import Option  # noqa: E402

PASSWORD = 'password123'
ADMIN_EMAIL = 'admin@test.com'
STUDENT_EMAIL = 'student@test.com'
OTHER_STUDENT_EMAIL = 'other@test.com'


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


def create_user(app, email, user_type, full_name='Test User'):
    with app.app_context():
        user = User(
            email=email,
            full_name=full_name,
            user_type=user_type,
            password_hash=hash_password(PASSWORD),
        )
        db.session.add(user)
        db.session.commit()
        return user.id


def login(client, email):
    response = client.post('/api/auth/login', json={'email': email, 'password': PASSWORD})
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def admin_id(app):
    return create_user(app, ADMIN_EMAIL, 'admin', 'Admin User')


@pytest.fixture
def student_id(app):
    return create_user(app, STUDENT_EMAIL, 'student', 'Student User')


@pytest.fixture
def other_student_id(app):
    return create_user(app, OTHER_STUDENT_EMAIL, 'student', 'Other Student')


@pytest.fixture
def admin_client(app, admin_id):
    return login(app.test_client(), ADMIN_EMAIL)


@pytest.fixture
def student_client(app, student_id):
    return login(app.test_client(), STUDENT_EMAIL)


@pytest.fixture
def other_student_client(app, other_student_id):
    return login(app.test_client(), OTHER_STUDENT_EMAIL)


def make_options(correct, ids=('a', 'b', 'c', 'd')):
    return [
        {'id': option_id, 'text': f'Option {option_id}', 'is_correct': option_id == correct}
        for option_id in ids
    ]


@pytest.fixture
def sample_quiz(admin_client):
    """
    An active quiz with two questions created through the admin API:
    question 1 is worth 5 marks (correct option "a"), question 2 is worth
    10 marks (correct option "b"); passing marks are 10.
    """
    response = admin_client.post('/api/admin/quizzes', json={
        'title': 'Sample Quiz',
        'description': 'A **sample** quiz',
        'duration': 30,
        'passing_marks': 10,
        'is_active': True,
    })
    assert response.status_code == 201, response.get_json()
    quiz_id = response.get_json()['data']['id']

    question_ids = []
    for order, (marks, correct) in enumerate([(5, 'a'), (10, 'b')], start=1):
        response = admin_client.post(f'/api/admin/quizzes/{quiz_id}/questions', json={
            'question_text': f'Question {order}',
            'marks': marks,
            'order': order,
            'options': make_options(correct),
        })
        assert response.status_code == 201, response.get_json()
        question_ids.append(response.get_json()['data']['id'])

    return {'quiz_id': quiz_id, 'question_ids': question_ids}


class InMemoryQuizRepository:
    """Grader repository that keeps everything in dictionaries."""

    def __init__(self):
        self.quizzes = {}
        self.questions = {}
        self.attempts = []

    def add_quiz(self, quiz_id, passing_marks):
        quiz = Quiz(id=quiz_id, title=f'Quiz {quiz_id}', description='', duration=10,
                    passing_marks=passing_marks, is_active=True)
        self.quizzes[quiz_id] = quiz
        self.questions[quiz_id] = []
        return quiz

    def add_question(self, quiz_id, question_id, marks, correct, order=None, ids=('a', 'b', 'c', 'd')):
        question = Question(
            id=question_id,
            quiz_id=quiz_id,
            question_text=f'Question {question_id}',
            marks=marks,
            order=order if order is not None else len(self.questions[quiz_id]) + 1,
        )
        question.set_options([Option(id=i, text=f'Option {i}', is_correct=(i == correct)) for i in ids])
        self.questions[quiz_id].append(question)
        return question

    def get_quiz_by_id(self, quiz_id):
        if quiz_id not in self.quizzes:
            raise NotFoundError("Quiz not found")
        return self.quizzes[quiz_id]

    def get_all_questions_by_quiz_id(self, quiz_id):
        self.get_quiz_by_id(quiz_id)
        return sorted(self.questions[quiz_id], key=lambda q: q.order)

    def create_attempt(self, record):
        attempt = QuizAttempt(
            id=len(self.attempts) + 1,
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
        self.attempts.append(attempt)
        return attempt


@pytest.fixture
def repository():
    return InMemoryQuizRepository()
