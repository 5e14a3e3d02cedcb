"""Read-only content tree: courses, subjects, lessons, and quiz questions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .errors import NotFoundError


@dataclass(frozen=True)
class Question:
    """One multiple-choice quiz question."""

    stem: str
    options: tuple[str, ...]
    answer_index: int
    explanation: str

    @property
    def correct_option(self) -> str:
        """Text of the correct option."""
        return self.options[self.answer_index]


@dataclass(frozen=True)
class Lesson:
    """Unit of study with an ordered summary and its quiz."""

    id: str
    title: str
    short_description: str
    summary: tuple[tuple[str, str], ...]
    questions: tuple[Question, ...]


@dataclass(frozen=True)
class Subject:
    """Ordered grouping of lessons within a course."""

    id: str
    title: str
    short_description: str
    lessons: tuple[Lesson, ...]

    def find_lesson(self, lesson_id: str) -> Lesson | None:
        for lesson in self.lessons:
            if lesson.id == lesson_id:
                return lesson
        return None


@dataclass(frozen=True)
class Course:
    """Top-level subject-matter grouping."""

    id: str
    title: str
    color: str
    subjects: tuple[Subject, ...]

    def find_subject(self, subject_id: str) -> Subject | None:
        for subject in self.subjects:
            if subject.id == subject_id:
                return subject
        return None


@dataclass(frozen=True)
class ContentModel:
    """Whole content tree, keyed by course id in document order."""

    courses: Mapping[str, Course]

    def list_courses(self) -> list[Course]:
        """Return courses in document order."""
        return list(self.courses.values())

    def get_course(self, course_id: str) -> Course:
        """Resolve a course or raise NotFoundError."""
        course = self.courses.get(course_id)
        if course is None:
            raise NotFoundError("course", course_id)
        return course

    def get_subject(self, course_id: str, subject_id: str) -> Subject:
        """Resolve a subject within a course or raise NotFoundError."""
        subject = self.get_course(course_id).find_subject(subject_id)
        if subject is None:
            raise NotFoundError("subject", subject_id)
        return subject

    def get_lesson(self, course_id: str, subject_id: str, lesson_id: str) -> Lesson:
        """Resolve a lesson through its full id chain or raise NotFoundError."""
        lesson = self.get_subject(course_id, subject_id).find_lesson(lesson_id)
        if lesson is None:
            raise NotFoundError("lesson", lesson_id)
        return lesson
