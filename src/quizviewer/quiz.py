"""One quiz attempt: answer tracking, scoring, and review."""

from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from .errors import EmptyQuizError, InvalidSelectionError
from .models import Lesson, Question
from .navigation import ViewState

NOT_ANSWERED = "Not Answered"
ALL_CORRECT_MESSAGE = "Congratulations, all answers are correct!"


@dataclass(frozen=True)
class QuizScore:
    """Final tally of one attempt."""

    correct_count: int
    total: int
    percentage: int


@dataclass(frozen=True)
class ReviewItem:
    """A question answered incorrectly or left unanswered."""

    number: int
    stem: str
    chosen_text: str
    correct_text: str


@dataclass(frozen=True)
class AnswerFeedback:
    """Correctness feedback revealed once a question is answered."""

    chosen_index: int
    correct_index: int
    is_correct: bool
    explanation: str


@dataclass(frozen=True)
class QuizProgress:
    position: int
    total: int
    percent: float


@dataclass(frozen=True)
class QuestionScreen:
    lesson_title: str
    back_label: str
    color: str
    progress: QuizProgress
    stem: str
    options: tuple[str, ...]
    feedback: AnswerFeedback | None
    prev_enabled: bool
    next_label: str


@dataclass(frozen=True)
class ResultsScreen:
    lesson_title: str
    back_label: str
    color: str
    score: QuizScore
    review: tuple[ReviewItem, ...]
    message: str


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class QuizSession:
    """Mutable state of a single quiz attempt over one lesson."""

    def __init__(self, lesson: Lesson, return_target: ViewState) -> None:
        if not lesson.questions:
            raise EmptyQuizError(f"Lesson '{lesson.id}' has no quiz questions.")
        self.lesson = lesson
        self.return_target = return_target
        self.current_index = 0
        self.answers: list[int | None] = [None] * len(lesson.questions)
        self.finished = False

    @classmethod
    def start(cls, lesson: Lesson, return_target: ViewState) -> QuizSession:
        """Create a fresh session positioned on the first question."""
        session = cls(lesson, return_target)
        logger.debug("Started quiz for lesson '{}' ({} questions)", lesson.id, len(lesson.questions))
        return session

    @property
    def questions(self) -> tuple[Question, ...]:
        return self.lesson.questions

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_index]

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index == len(self.questions) - 1

    def select_answer(self, option_index: int) -> AnswerFeedback:
        """Record the answer for the current question and reveal feedback.

        Raises InvalidSelectionError, leaving the session unchanged, when the
        index is outside the option range, the question is already answered,
        or the quiz is finished.
        """
        question = self.current_question
        if self.finished:
            raise InvalidSelectionError("The quiz is already finished.")
        if self.answers[self.current_index] is not None:
            raise InvalidSelectionError(f"Question {self.current_index + 1} is already answered.")
        if not 0 <= option_index < len(question.options):
            raise InvalidSelectionError(f"Option {option_index} is out of range for question {self.current_index + 1}.")
        self.answers[self.current_index] = option_index
        return self._feedback_for(question, option_index)

    def feedback(self) -> AnswerFeedback | None:
        """Feedback for the current question, or None while unanswered."""
        chosen = self.answers[self.current_index]
        if chosen is None:
            return None
        return self._feedback_for(self.current_question, chosen)

    @staticmethod
    def _feedback_for(question: Question, chosen: int) -> AnswerFeedback:
        return AnswerFeedback(
            chosen_index=chosen,
            correct_index=question.answer_index,
            is_correct=chosen == question.answer_index,
            explanation=question.explanation,
        )

    def next(self) -> bool:
        """Advance one question; on the last question finish instead.

        Returns True when the session is finished.
        """
        if self.finished:
            return True
        if self.is_last:
            self.finished = True
            logger.debug("Finished quiz for lesson '{}'", self.lesson.id)
            return True
        self.current_index += 1
        return False

    def prev(self) -> None:
        """Step back one question; no-op on the first question or once finished."""
        if self.finished or self.is_first:
            return
        self.current_index -= 1

    def score(self) -> QuizScore:
        total = len(self.questions)
        correct = sum(
            1 for question, chosen in zip(self.questions, self.answers, strict=True) if chosen == question.answer_index
        )
        return QuizScore(correct_count=correct, total=total, percentage=_round_half_up(correct / total * 100))

    def review(self) -> list[ReviewItem]:
        """List every incorrect or unanswered question in lesson order."""
        items: list[ReviewItem] = []
        for number, (question, chosen) in enumerate(zip(self.questions, self.answers, strict=True), start=1):
            if chosen == question.answer_index:
                continue
            items.append(
                ReviewItem(
                    number=number,
                    stem=question.stem,
                    chosen_text=NOT_ANSWERED if chosen is None else question.options[chosen],
                    correct_text=question.correct_option,
                )
            )
        return items

    def retry(self) -> QuizSession:
        """Fresh session for the same lesson and return target."""
        return QuizSession.start(self.lesson, self.return_target)

    def progress(self) -> QuizProgress:
        total = len(self.questions)
        position = self.current_index + 1
        return QuizProgress(position=position, total=total, percent=position / total * 100)


def question_screen(session: QuizSession, color: str) -> QuestionScreen:
    """Screen data for the session's current question."""
    question = session.current_question
    return QuestionScreen(
        lesson_title=session.lesson.title,
        back_label="Back to Lesson",
        color=color,
        progress=session.progress(),
        stem=question.stem,
        options=question.options,
        feedback=session.feedback(),
        prev_enabled=not session.is_first,
        next_label="Finish Quiz" if session.is_last else "Next",
    )


def results_screen(session: QuizSession, color: str) -> ResultsScreen:
    """Screen data for a finished session."""
    review = tuple(session.review())
    return ResultsScreen(
        lesson_title=session.lesson.title,
        back_label="Back to Lesson",
        color=color,
        score=session.score(),
        review=review,
        message="" if review else ALL_CORRECT_MESSAGE,
    )
