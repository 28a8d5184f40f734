"""
Database models for quiz functionality.

- Quiz: authored by an admin, carries the passing threshold
- Question: multiple choice, options stored as an ordered JSON list
- QuizAttempt: one graded, immutable submission by a student
"""
from quizhub import db
from quizhub.quiz.schemas import Option
from quizhub.utils import utcnow, isoformat


class Quiz(db.Model):
    """
    Model for quizzes.

    ``total_questions`` is a denormalized count kept up to date by the
    question service; grading never relies on it.
    """
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    duration = db.Column(db.Integer, nullable=False)  # Minutes
    passing_marks = db.Column(db.Integer, nullable=False)
    total_questions = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=False, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='SET NULL'), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    creator = db.relationship("User", foreign_keys=[created_by])
    questions = db.relationship("Question", backref="quiz", cascade="all, delete-orphan", order_by="Question.order")
    attempts = db.relationship("QuizAttempt", backref="quiz", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Quiz {self.id}: {self.title}>"

    def get_total_marks(self) -> int:
        """Sum of the marks of all current questions."""
        return sum(q.marks for q in self.questions)

    def to_dict(self, include_admin_fields: bool = True) -> dict:
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'duration': self.duration,
            'passing_marks': self.passing_marks,
            'total_questions': self.total_questions,
            'is_active': self.is_active,
        }
        if include_admin_fields:
            data.update({
                'total_marks': self.get_total_marks(),
                'created_by': self.created_by,
                'created_at': isoformat(self.created_at),
                'updated_at': isoformat(self.updated_at),
            })
        return data


class Question(db.Model):
    """
    Model for multiple choice questions.

    ``options`` holds a list of ``{"id", "text", "is_correct"}`` objects in
    display order. It is always written from validated ``Option`` records.
    """
    __tablename__ = "quiz_questions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete='CASCADE'), nullable=False, index=True)
    question_text = db.Column(db.Text, nullable=False)
    marks = db.Column(db.Integer, nullable=False)
    order = db.Column("order_index", db.Integer, nullable=False)
    options = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('quiz_id', 'order_index', name='uq_quiz_questions_quiz_order'),
    )

    def __repr__(self) -> str:
        return f"<Question {self.id}: quiz {self.quiz_id} #{self.order}>"

    def get_options(self) -> list[Option]:
        return [
            Option(id=str(opt['id']), text=opt['text'], is_correct=bool(opt['is_correct']))
            for opt in (self.options or [])
        ]

    def set_options(self, options: list[Option]) -> None:
        self.options = [opt.to_dict() for opt in options]

    def find_option(self, option_id: str) -> Option | None:
        for option in self.get_options():
            if option.id == option_id:
                return option
        return None

    def to_dict(self, include_answers: bool = True) -> dict:
        """
        Serialize the question.

        Args:
            include_answers: False for the student view, which must never
                reveal which option is correct.
        """
        return {
            'id': self.id,
            'quiz_id': self.quiz_id,
            'question_text': self.question_text,
            'marks': self.marks,
            'order': self.order,
            'options': [opt.to_dict(include_answers) for opt in self.get_options()],
        }


class QuizAttempt(db.Model):
    """
    Model for graded quiz attempts. Rows are written once by the grader.
    """
    __tablename__ = "quiz_attempts"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id", ondelete='CASCADE'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete='CASCADE'), nullable=False, index=True)
    answers = db.Column(db.JSON, nullable=False)
    score = db.Column(db.Integer, nullable=False)
    total_marks = db.Column(db.Integer, nullable=False)
    is_passed = db.Column(db.Boolean, nullable=False)
    started_at = db.Column(db.DateTime, nullable=False)
    submitted_at = db.Column(db.DateTime, nullable=False, index=True)
    time_spent = db.Column(db.Integer, nullable=False)  # Seconds

    __table_args__ = (
        db.Index('ix_quiz_attempts_quiz_student', 'quiz_id', 'student_id'),
    )

    def __repr__(self) -> str:
        return f"<QuizAttempt {self.id}: Student {self.student_id}, Quiz {self.quiz_id}>"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'quiz_id': self.quiz_id,
            'student_id': self.student_id,
            'answers': self.answers,
            'score': self.score,
            'total_marks': self.total_marks,
            'is_passed': self.is_passed,
            'started_at': isoformat(self.started_at),
            'submitted_at': isoformat(self.submitted_at),
            'time_spent': self.time_spent,
        }
