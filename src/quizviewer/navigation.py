"""View states, browsing history, and dispatch from a state to screen data."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .errors import NotFoundError
from .models import ContentModel, Course, Lesson, Subject


@dataclass(frozen=True)
class CoursesView:
    """Root screen listing every course."""


@dataclass(frozen=True)
class SubjectsView:
    course_id: str


@dataclass(frozen=True)
class LessonsView:
    course_id: str
    subject_id: str


@dataclass(frozen=True)
class LessonView:
    course_id: str
    subject_id: str
    lesson_id: str


@dataclass(frozen=True)
class QuizView:
    course_id: str
    subject_id: str
    lesson_id: str

    def lesson_view(self) -> LessonView:
        """Lesson screen the quiz was launched from."""
        return LessonView(self.course_id, self.subject_id, self.lesson_id)


ViewState = CoursesView | SubjectsView | LessonsView | LessonView | QuizView

ROOT_VIEW = CoursesView()


@dataclass(frozen=True)
class CardItem:
    """One selectable card in a list screen."""

    id: str
    title: str
    description: str


@dataclass(frozen=True)
class CoursesScreen:
    title: str
    cards: tuple[CardItem, ...]
    colors: tuple[str, ...]


@dataclass(frozen=True)
class SubjectsScreen:
    title: str
    back_label: str
    color: str
    cards: tuple[CardItem, ...]


@dataclass(frozen=True)
class LessonsScreen:
    title: str
    back_label: str
    color: str
    cards: tuple[CardItem, ...]


@dataclass(frozen=True)
class LessonScreen:
    title: str
    back_label: str
    color: str
    sections: tuple[tuple[str, str], ...]
    question_count: int
    notice: str = ""


class NavigationStack:
    """Browsing history holding exactly one entry per visited screen."""

    def __init__(self) -> None:
        self._states: list[ViewState] = []

    def __len__(self) -> int:
        return len(self._states)

    def push(self, state: ViewState) -> None:
        """Append a state unless it is already on top."""
        if self._states and self._states[-1] == state:
            return
        self._states.append(state)

    def pop(self) -> ViewState | None:
        """Remove and return the top state, or None when empty."""
        if not self._states:
            return None
        return self._states.pop()

    def current(self) -> ViewState | None:
        return self._states[-1] if self._states else None

    def clear(self) -> None:
        self._states.clear()

    def states(self) -> tuple[ViewState, ...]:
        return tuple(self._states)


def _cards(items: tuple[Subject, ...] | tuple[Lesson, ...]) -> tuple[CardItem, ...]:
    return tuple(CardItem(id=item.id, title=item.title, description=item.short_description) for item in items)


class Router:
    """Owns the navigation stack and maps view states to screen data."""

    def __init__(self, content: ContentModel) -> None:
        self.content = content
        self.stack = NavigationStack()

    @property
    def current(self) -> ViewState:
        """Visible state; the root when history is empty."""
        state = self.stack.current()
        return ROOT_VIEW if state is None else state

    def push(self, state: ViewState) -> ViewState:
        """Enter a screen; unresolvable ids redirect to the root."""
        try:
            self.resolve(state)
        except NotFoundError as exc:
            logger.warning("Navigation to {} failed ({}); returning to courses", state, exc)
            self.reset()
            return ROOT_VIEW
        self.stack.push(state)
        return state

    def go_back(self) -> ViewState:
        """Leave the current screen and return to the one before it."""
        self.stack.pop()
        previous = self.stack.current()
        if previous is None:
            return ROOT_VIEW
        try:
            self.resolve(previous)
        except NotFoundError as exc:
            logger.warning("History entry {} no longer resolves ({}); returning to courses", previous, exc)
            self.reset()
            return ROOT_VIEW
        return previous

    def return_to(self, target: ViewState) -> ViewState:
        """Unwind history until `target` is on top."""
        if target in self.stack.states():
            while self.stack.current() != target:
                self.stack.pop()
            return target
        self.reset()
        return self.push(target)

    def reset(self) -> None:
        """Drop all history; the root becomes visible."""
        self.stack.clear()

    def resolve(self, state: ViewState) -> None:
        """Raise NotFoundError when the state's id chain does not resolve."""
        if isinstance(state, CoursesView):
            return
        if isinstance(state, SubjectsView):
            self.content.get_course(state.course_id)
        elif isinstance(state, LessonsView):
            self.content.get_subject(state.course_id, state.subject_id)
        elif isinstance(state, (LessonView, QuizView)):
            self.content.get_lesson(state.course_id, state.subject_id, state.lesson_id)
        else:
            raise TypeError(f"Unknown view state: {state!r}")

    def render(self, state: ViewState) -> CoursesScreen | SubjectsScreen | LessonsScreen | LessonScreen:
        """Build screen data for a browsing state."""
        if isinstance(state, CoursesView):
            return self._courses_screen()
        if isinstance(state, SubjectsView):
            return self._subjects_screen(self.content.get_course(state.course_id))
        if isinstance(state, LessonsView):
            course = self.content.get_course(state.course_id)
            return self._lessons_screen(course, self.content.get_subject(state.course_id, state.subject_id))
        if isinstance(state, LessonView):
            course = self.content.get_course(state.course_id)
            lesson = self.content.get_lesson(state.course_id, state.subject_id, state.lesson_id)
            return self._lesson_screen(course, lesson)
        if isinstance(state, QuizView):
            raise TypeError("Quiz screens are built from the active quiz session.")
        raise TypeError(f"Unknown view state: {state!r}")

    def _courses_screen(self) -> CoursesScreen:
        courses = self.content.list_courses()
        return CoursesScreen(
            title="Choose a Course",
            cards=tuple(CardItem(id=course.id, title=course.title, description="") for course in courses),
            colors=tuple(course.color for course in courses),
        )

    def _subjects_screen(self, course: Course) -> SubjectsScreen:
        return SubjectsScreen(
            title=f"{course.title} Subjects",
            back_label="Back to Courses",
            color=course.color,
            cards=_cards(course.subjects),
        )

    def _lessons_screen(self, course: Course, subject: Subject) -> LessonsScreen:
        return LessonsScreen(
            title=f"{subject.title} Topics",
            back_label="Back to Subjects",
            color=course.color,
            cards=_cards(subject.lessons),
        )

    def _lesson_screen(self, course: Course, lesson: Lesson) -> LessonScreen:
        return LessonScreen(
            title=lesson.title,
            back_label="Back to Topics",
            color=course.color,
            sections=lesson.summary,
            question_count=len(lesson.questions),
        )
