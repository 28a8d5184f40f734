"""
Quiz, question and attempt services.

Routes call these functions; they raise ``quizhub.errors`` exceptions
instead of building responses.
"""
import logging

from quizhub import db
from quizhub.errors import ConflictError, NotFoundError, ValidationError
from quizhub.quiz.models import Quiz, Question, QuizAttempt
from quizhub.quiz.schemas import QuizCreate, QuizUpdate, QuestionCreate, QuestionUpdate, Option
from quizhub.security import sanitize_string, sanitize_markdown
from quizhub.utils import utcnow

logger = logging.getLogger(__name__)


def _clean_text(value: str, name: str) -> str:
    """Sanitize a required plain-text field; it must still have content afterwards."""
    cleaned = sanitize_string(value)
    if not cleaned:
        raise ValidationError(f'{name} is required')
    return cleaned


# --- Quizzes ---------------------------------------------------------------

def create_quiz(data: QuizCreate, created_by: int | None = None) -> Quiz:
    quiz = Quiz(
        title=_clean_text(data.title, 'title'),
        description=sanitize_markdown(data.description),
        duration=data.duration,
        passing_marks=data.passing_marks,
        is_active=data.is_active,
        created_by=created_by,
    )
    db.session.add(quiz)
    db.session.commit()
    logger.info(f"Created quiz {quiz.id} '{quiz.title}'")
    return quiz


def get_all_quizzes() -> list[Quiz]:
    return Quiz.query.order_by(Quiz.created_at, Quiz.id).all()


def get_active_quizzes() -> list[Quiz]:
    return Quiz.query.filter_by(is_active=True).order_by(Quiz.created_at, Quiz.id).all()


def get_quiz_by_id(quiz_id: int) -> Quiz:
    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        raise NotFoundError("Quiz not found")
    return quiz


def update_quiz(quiz_id: int, data: QuizUpdate) -> Quiz:
    """Apply the fields present in ``data``; text fields are sanitized."""
    quiz = get_quiz_by_id(quiz_id)

    fields = data.provided()
    if 'title' in fields:
        fields['title'] = _clean_text(fields['title'], 'title')
    if 'description' in fields:
        fields['description'] = sanitize_markdown(fields['description'])

    for name, value in fields.items():
        setattr(quiz, name, value)
    quiz.updated_at = utcnow()

    db.session.commit()
    return quiz


def delete_quiz(quiz_id: int) -> Quiz:
    quiz = get_quiz_by_id(quiz_id)
    db.session.delete(quiz)
    db.session.commit()
    logger.info(f"Deleted quiz {quiz_id}")
    return quiz


def update_total_questions(quiz_id: int) -> Quiz:
    """Recount the quiz's questions into ``total_questions``."""
    quiz = get_quiz_by_id(quiz_id)
    quiz.total_questions = Question.query.filter_by(quiz_id=quiz_id).count()
    quiz.updated_at = utcnow()
    db.session.commit()
    return quiz


# --- Questions -------------------------------------------------------------

def _sanitize_options(options: list[Option]) -> list[Option]:
    return [
        Option(id=opt.id, text=_clean_text(opt.text, f'options[{index}].text'), is_correct=opt.is_correct)
        for index, opt in enumerate(options)
    ]


def _ensure_order_free(quiz_id: int, order: int, exclude_question_id: int | None = None) -> None:
    query = Question.query.filter_by(quiz_id=quiz_id, order=order)
    if exclude_question_id is not None:
        query = query.filter(Question.id != exclude_question_id)
    if query.first():
        raise ConflictError(f"Quiz {quiz_id} already has a question at order {order}")


def create_question(quiz_id: int, data: QuestionCreate) -> Question:
    get_quiz_by_id(quiz_id)
    _ensure_order_free(quiz_id, data.order)

    question = Question(
        quiz_id=quiz_id,
        question_text=_clean_text(data.question_text, 'question_text'),
        marks=data.marks,
        order=data.order,
    )
    question.set_options(_sanitize_options(data.options))
    db.session.add(question)
    db.session.commit()

    update_total_questions(quiz_id)
    return question


def get_questions_by_quiz_id(quiz_id: int, page: int = 1, limit: int = 10) -> tuple[list[Question], int]:
    """One page of the quiz's questions in order, plus the total count."""
    get_quiz_by_id(quiz_id)

    query = Question.query.filter_by(quiz_id=quiz_id)
    total = query.count()
    questions = query.order_by(Question.order).offset((page - 1) * limit).limit(limit).all()
    return questions, total


def get_all_questions_by_quiz_id(quiz_id: int) -> list[Question]:
    get_quiz_by_id(quiz_id)
    return Question.query.filter_by(quiz_id=quiz_id).order_by(Question.order).all()


def get_question_by_id(question_id: int, quiz_id: int | None = None) -> Question:
    """
    Fetch a question, optionally requiring it to belong to ``quiz_id``.
    """
    question = db.session.get(Question, question_id)
    if not question or (quiz_id is not None and question.quiz_id != quiz_id):
        raise NotFoundError("Question not found")
    return question


def update_question(question_id: int, data: QuestionUpdate, quiz_id: int | None = None) -> Question:
    question = get_question_by_id(question_id, quiz_id)

    if data.question_text is not None:
        question.question_text = _clean_text(data.question_text, 'question_text')
    if data.marks is not None:
        question.marks = data.marks
    if data.order is not None and data.order != question.order:
        _ensure_order_free(question.quiz_id, data.order, exclude_question_id=question.id)
        question.order = data.order
    if data.options is not None:
        question.set_options(_sanitize_options(data.options))

    db.session.commit()
    return question


def delete_question(question_id: int, quiz_id: int | None = None) -> Question:
    question = get_question_by_id(question_id, quiz_id)
    owner_id = question.quiz_id

    db.session.delete(question)
    db.session.commit()

    update_total_questions(owner_id)
    return question


# --- Attempts --------------------------------------------------------------

def get_attempt_by_id(attempt_id: int) -> QuizAttempt:
    attempt = db.session.get(QuizAttempt, attempt_id)
    if not attempt:
        raise NotFoundError("Quiz attempt not found")
    return attempt


def get_attempts_by_quiz_id(quiz_id: int) -> list[QuizAttempt]:
    get_quiz_by_id(quiz_id)
    return QuizAttempt.query.filter_by(quiz_id=quiz_id).order_by(QuizAttempt.submitted_at, QuizAttempt.id).all()


def get_attempts_by_student_id(student_id: int) -> list[QuizAttempt]:
    return QuizAttempt.query.filter_by(student_id=student_id).order_by(
        QuizAttempt.submitted_at, QuizAttempt.id
    ).all()


def get_student_attempts_for_quiz(quiz_id: int, student_id: int) -> list[QuizAttempt]:
    return QuizAttempt.query.filter_by(quiz_id=quiz_id, student_id=student_id).order_by(
        QuizAttempt.submitted_at, QuizAttempt.id
    ).all()
