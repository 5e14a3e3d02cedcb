"""Application service coordinating navigation and the active quiz session."""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from .errors import EmptyQuizError, InvalidSelectionError, NotFoundError
from .models import ContentModel
from .navigation import (
    ROOT_VIEW,
    CoursesScreen,
    LessonScreen,
    LessonsScreen,
    LessonsView,
    LessonView,
    QuizView,
    Router,
    SubjectsScreen,
    SubjectsView,
    ViewState,
)
from .quiz import AnswerFeedback, QuestionScreen, QuizSession, ResultsScreen, question_screen, results_screen

Screen = CoursesScreen | SubjectsScreen | LessonsScreen | LessonScreen | QuestionScreen | ResultsScreen

NO_QUESTIONS_NOTICE = "This lesson has no quiz questions yet."


class ViewerService:
    """Explicit application state: the router, its history, and at most one quiz session."""

    def __init__(self, content: ContentModel) -> None:
        """Initialize with an already-loaded content model."""
        self.content = content
        self.router = Router(content)
        self.session: QuizSession | None = None
        self._notice = ""

    @property
    def current_state(self) -> ViewState:
        return self.router.current

    def open_course(self, course_id: str) -> ViewState:
        return self._enter(SubjectsView(course_id))

    def open_subject(self, course_id: str, subject_id: str) -> ViewState:
        return self._enter(LessonsView(course_id, subject_id))

    def open_lesson(self, course_id: str, subject_id: str, lesson_id: str) -> ViewState:
        return self._enter(LessonView(course_id, subject_id, lesson_id))

    def start_quiz(self, course_id: str, subject_id: str, lesson_id: str) -> QuizSession | None:
        """Begin a fresh attempt; the lesson view becomes the return target."""
        lesson_view = LessonView(course_id, subject_id, lesson_id)
        try:
            lesson = self.content.get_lesson(course_id, subject_id, lesson_id)
        except NotFoundError as exc:
            logger.warning("Cannot start quiz ({}); returning to courses", exc)
            self._discard_session()
            self.router.reset()
            return None
        try:
            session = QuizSession.start(lesson, return_target=lesson_view)
        except EmptyQuizError as exc:
            logger.info("{}", exc)
            self._notice = NO_QUESTIONS_NOTICE
            return None
        self.session = session
        self._notice = ""
        self.router.push(QuizView(course_id, subject_id, lesson_id))
        return session

    def go_back(self) -> ViewState:
        """Leave the current screen; leaving a quiz discards its session."""
        if self.session is not None:
            return self.leave_quiz()
        self._notice = ""
        return self.router.go_back()

    def leave_quiz(self) -> ViewState:
        """Discard the session and return to the screen the quiz was started from."""
        if self.session is None:
            return self.router.current
        target = self.session.return_target
        self._discard_session()
        return self.router.return_to(target)

    def answer(self, option_index: int) -> AnswerFeedback | None:
        """Record an answer; rejected selections are a no-op."""
        if self.session is None or self.session.finished:
            return None
        try:
            return self.session.select_answer(option_index)
        except InvalidSelectionError as exc:
            logger.debug("Ignored selection: {}", exc)
            return None

    def next_question(self) -> bool:
        """Advance the quiz; returns True once the results are showing."""
        if self.session is None:
            return False
        return self.session.next()

    def previous_question(self) -> None:
        if self.session is not None:
            self.session.prev()

    def retry_quiz(self) -> QuizSession | None:
        """Replace the active session with a fresh one for the same lesson."""
        if self.session is None:
            return None
        self.session = self.session.retry()
        return self.session

    def current_screen(self) -> Screen:
        """Screen data for whatever is visible now."""
        state = self.router.current
        if isinstance(state, QuizView):
            if self.session is None:
                # quiz history entry without a live session
                self.router.go_back()
                return self.current_screen()
            color = self.content.get_course(state.course_id).color
            if self.session.finished:
                return results_screen(self.session, color)
            return question_screen(self.session, color)
        try:
            screen = self.router.render(state)
        except NotFoundError as exc:
            logger.warning("Cannot render {} ({}); returning to courses", state, exc)
            self.router.reset()
            screen = self.router.render(ROOT_VIEW)
        if isinstance(screen, LessonScreen) and self._notice:
            screen = replace(screen, notice=self._notice)
        return screen

    def _enter(self, state: ViewState) -> ViewState:
        self._discard_session()
        self._notice = ""
        return self.router.push(state)

    def _discard_session(self) -> None:
        self.session = None
