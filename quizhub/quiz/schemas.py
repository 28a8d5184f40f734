"""
Typed request records for the quiz module.

Request bodies are parsed into these records at the route boundary, so the
services and the grader only ever see validated data. Partial updates use
explicit optional fields: ``None`` means "not provided".
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Optional

from quizhub.errors import ValidationError
from quizhub.utils import parse_iso_datetime

MIN_OPTIONS = 2
MAX_OPTIONS = 10
MAX_TITLE_LENGTH = 255


@dataclass(frozen=True)
class Option:
    """One selectable answer choice of a question."""
    id: str
    text: str
    is_correct: bool

    def to_dict(self, include_answers: bool = True) -> dict:
        data = {'id': self.id, 'text': self.text}
        if include_answers:
            data['is_correct'] = self.is_correct
        return data


@dataclass
class QuizCreate:
    title: str
    description: str
    duration: int
    passing_marks: int
    is_active: bool = False


@dataclass
class QuizUpdate:
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    passing_marks: Optional[int] = None
    is_active: Optional[bool] = None

    def provided(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class QuestionCreate:
    question_text: str
    marks: int
    order: int
    options: list[Option]


@dataclass
class QuestionUpdate:
    question_text: Optional[str] = None
    marks: Optional[int] = None
    order: Optional[int] = None
    options: Optional[list[Option]] = None


@dataclass(frozen=True)
class AnswerSubmission:
    question_id: int
    selected_option_id: str


@dataclass
class QuizSubmission:
    started_at: datetime
    answers: list[AnswerSubmission] = field(default_factory=list)


def _require_object(data: Any) -> dict:
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _string(data: dict, name: str, required: bool, allow_blank: bool = False,
            max_length: Optional[int] = None) -> Optional[str]:
    value = data.get(name)
    if value is None:
        if required:
            raise ValidationError(f'{name} is required')
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{name} must be a string')
    if not allow_blank and not value.strip():
        raise ValidationError(f'{name} must not be empty')
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f'{name} must be at most {max_length} characters')
    return value


def _integer(data: dict, name: str, required: bool, minimum: int) -> Optional[int]:
    value = data.get(name)
    if value is None:
        if required:
            raise ValidationError(f'{name} is required')
        return None
    # bool is an int subclass, and 3.0 is accepted as 3
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'{name} must be an integer')
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f'{name} must be an integer')
    if value < minimum:
        raise ValidationError(f'{name} must be at least {minimum}')
    return int(value)


def _boolean(data: dict, name: str) -> Optional[bool]:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValidationError(f'{name} must be a boolean')
    return value


def parse_options(raw: Any) -> list[Option]:
    """
    Validate an option list.

    Rules: between MIN_OPTIONS and MAX_OPTIONS entries, non-empty unique ids,
    non-empty text, exactly one option marked correct.
    """
    if not isinstance(raw, list):
        raise ValidationError('options must be a list')
    if not MIN_OPTIONS <= len(raw) <= MAX_OPTIONS:
        raise ValidationError(f'options must contain between {MIN_OPTIONS} and {MAX_OPTIONS} entries')

    options = []
    seen_ids = set()
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f'options[{index}] must be an object')
        option_id = item.get('id')
        if isinstance(option_id, int) and not isinstance(option_id, bool):
            option_id = str(option_id)
        if not isinstance(option_id, str) or not option_id.strip():
            raise ValidationError(f'options[{index}].id is required')
        option_id = option_id.strip()
        if option_id in seen_ids:
            raise ValidationError(f'Duplicate option id: {option_id}')
        seen_ids.add(option_id)

        text = item.get('text')
        if not isinstance(text, str) or not text.strip():
            raise ValidationError(f'options[{index}].text is required')

        is_correct = item.get('is_correct')
        if not isinstance(is_correct, bool):
            raise ValidationError(f'options[{index}].is_correct must be a boolean')

        options.append(Option(id=option_id, text=text, is_correct=is_correct))

    correct_count = sum(1 for opt in options if opt.is_correct)
    if correct_count != 1:
        raise ValidationError(f'Exactly one option must be correct, got {correct_count}')
    return options


def parse_quiz_create(data: Any) -> QuizCreate:
    data = _require_object(data)
    return QuizCreate(
        title=_string(data, 'title', True, max_length=MAX_TITLE_LENGTH),
        description=_string(data, 'description', True, allow_blank=True),
        duration=_integer(data, 'duration', True, minimum=1),
        passing_marks=_integer(data, 'passing_marks', True, minimum=0),
        is_active=bool(_boolean(data, 'is_active')),
    )


def parse_quiz_update(data: Any) -> QuizUpdate:
    data = _require_object(data)
    return QuizUpdate(
        title=_string(data, 'title', False, max_length=MAX_TITLE_LENGTH),
        description=_string(data, 'description', False, allow_blank=True),
        duration=_integer(data, 'duration', False, minimum=1),
        passing_marks=_integer(data, 'passing_marks', False, minimum=0),
        is_active=_boolean(data, 'is_active'),
    )


def parse_question_create(data: Any) -> QuestionCreate:
    data = _require_object(data)
    if 'options' not in data:
        raise ValidationError('options is required')
    return QuestionCreate(
        question_text=_string(data, 'question_text', True),
        marks=_integer(data, 'marks', True, minimum=1),
        order=_integer(data, 'order', True, minimum=1),
        options=parse_options(data['options']),
    )


def parse_question_update(data: Any) -> QuestionUpdate:
    data = _require_object(data)
    options = data.get('options')
    return QuestionUpdate(
        question_text=_string(data, 'question_text', False),
        marks=_integer(data, 'marks', False, minimum=1),
        order=_integer(data, 'order', False, minimum=1),
        options=parse_options(options) if options is not None else None,
    )


def parse_submission(data: Any) -> QuizSubmission:
    """Parse ``{"started_at": ISO-8601, "answers": [{question_id, selected_option_id}]}``."""
    data = _require_object(data)
    try:
        started_at = parse_iso_datetime(data.get('started_at'))
    except ValueError:
        raise ValidationError('started_at must be an ISO 8601 timestamp')

    raw_answers = data.get('answers')
    if not isinstance(raw_answers, list):
        raise ValidationError('answers must be a list')

    answers = []
    for index, item in enumerate(raw_answers):
        if not isinstance(item, dict):
            raise ValidationError(f'answers[{index}] must be an object')
        question_id = item.get('question_id')
        if isinstance(question_id, bool) or not isinstance(question_id, int):
            raise ValidationError(f'answers[{index}].question_id must be an integer')
        selected = item.get('selected_option_id')
        if isinstance(selected, int) and not isinstance(selected, bool):
            selected = str(selected)
        if not isinstance(selected, str) or not selected.strip():
            raise ValidationError(f'answers[{index}].selected_option_id is required')
        answers.append(AnswerSubmission(question_id=question_id, selected_option_id=selected.strip()))

    return QuizSubmission(started_at=started_at, answers=answers)
