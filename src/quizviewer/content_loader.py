"""Load the course content document from bundled or user-supplied JSON."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from loguru import logger

from .errors import LoadError
from .models import ContentModel, Course, Lesson, Question, Subject

CONTENT_PACKAGE = "quizviewer.content"
CONTENT_FILE = "database.json"
DEFAULT_COLOR = "#333333"


def _require_text(raw: dict[str, Any], key: str, where: str) -> str:
    """Return a required non-empty string field."""
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{where} is missing '{key}'.")
    return value


def _question_from_dict(raw: dict[str, Any], where: str) -> Question:
    """Build a question from raw JSON content."""
    options = raw.get("options")
    if not isinstance(options, list) or len(options) < 2:
        raise ValueError(f"{where} needs at least two options.")
    answer_index = raw.get("answerIndex")
    # bool is an int subclass; reject it explicitly
    if isinstance(answer_index, bool) or not isinstance(answer_index, int):
        raise ValueError(f"{where} has a non-integer answerIndex.")
    if not 0 <= answer_index < len(options):
        raise ValueError(f"{where} answerIndex {answer_index} is out of range.")
    return Question(
        stem=_require_text(raw, "stem", where),
        options=tuple(str(option) for option in options),
        answer_index=answer_index,
        explanation=str(raw.get("explanation", "")),
    )


def _lesson_from_dict(raw: dict[str, Any], where: str) -> Lesson:
    """Build a lesson from raw JSON content."""
    lesson_id = _require_text(raw, "id", where)
    where = f"{where} lesson '{lesson_id}'"
    summary_raw = raw.get("summary", {})
    if not isinstance(summary_raw, dict):
        raise ValueError(f"{where} summary must be an object of heading -> text.")
    quiz_raw = raw.get("quiz", [])
    if not isinstance(quiz_raw, list):
        raise ValueError(f"{where} quiz must be a list.")
    questions = tuple(
        _question_from_dict(item, f"{where} question {number}") for number, item in enumerate(quiz_raw, start=1)
    )
    return Lesson(
        id=lesson_id,
        title=_require_text(raw, "title", where),
        short_description=str(raw.get("shortDescription", "")),
        summary=tuple((str(heading), str(text)) for heading, text in summary_raw.items()),
        questions=questions,
    )


def _subject_from_dict(raw: dict[str, Any], where: str) -> Subject:
    """Build a subject from raw JSON content."""
    subject_id = _require_text(raw, "id", where)
    where = f"{where} subject '{subject_id}'"
    lessons = tuple(_lesson_from_dict(item, where) for item in raw.get("lessons", []))
    _validate_unique_ids([lesson.id for lesson in lessons], f"lesson id in {where}")
    return Subject(
        id=subject_id,
        title=_require_text(raw, "title", where),
        short_description=str(raw.get("shortDescription", "")),
        lessons=lessons,
    )


def _course_from_dict(course_id: str, raw: dict[str, Any]) -> Course:
    """Build a course from raw JSON content."""
    where = f"Course '{course_id}'"
    subjects = tuple(_subject_from_dict(item, where) for item in raw.get("subjects", []))
    _validate_unique_ids([subject.id for subject in subjects], f"subject id in {where}")
    return Course(
        id=course_id,
        title=_require_text(raw, "title", where),
        color=str(raw.get("color") or DEFAULT_COLOR),
        subjects=subjects,
    )


def _validate_unique_ids(ids: list[str], label: str) -> None:
    """Reject duplicate ids within one parent scope."""
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Duplicate {label}: {item_id}")
        seen.add(item_id)


def parse_content(raw: object) -> ContentModel:
    """Validate a decoded document and build the content model."""
    if not isinstance(raw, dict) or not isinstance(raw.get("courses"), dict):
        raise ValueError("Content root must be an object with a 'courses' object.")
    courses = {str(course_id): _course_from_dict(str(course_id), item) for course_id, item in raw["courses"].items()}
    return ContentModel(courses=MappingProxyType(courses))


def _load_text(text: str, source: str) -> ContentModel:
    try:
        content = parse_content(json.loads(text))
    except (ValueError, TypeError, AttributeError) as exc:
        logger.error("Error parsing {}: {}", source, exc)
        raise LoadError(f"Could not load content from {source}: {exc}") from exc
    logger.debug("Loaded {} course(s) from {}", len(content.courses), source)
    return content


def load_content() -> ContentModel:
    """Load the bundled content document."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(CONTENT_FILE)
    try:
        text = entry.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error reading bundled content: {}", exc)
        raise LoadError(f"Could not read bundled content: {exc}") from exc
    return _load_text(text, CONTENT_FILE)


def load_content_from_path(path: Path | str) -> ContentModel:
    """Load a content document from a file for tools/tests."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error reading {}: {}", file_path, exc)
        raise LoadError(f"Could not read {file_path}: {exc}") from exc
    return _load_text(text, str(file_path))
