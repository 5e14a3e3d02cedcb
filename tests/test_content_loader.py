import json
from pathlib import Path
from typing import Any

from quizviewer.content_loader import load_content, load_content_from_path
from quizviewer.errors import NotFoundError


def test_load_bundled_content() -> None:
    content = load_content()
    assert list(content.courses) == ["gynecology", "obstetrics"]
    lesson = content.get_lesson("gynecology", "menstrual-disorders", "amenorrhea")
    assert lesson.title == "Amenorrhea"
    assert lesson.summary[0][0] == "Definition"
    assert lesson.questions[0].correct_option == "Pregnancy test"


def test_bundled_questions_have_valid_answer_index() -> None:
    content = load_content()
    for course in content.list_courses():
        for subject in course.subjects:
            for lesson in subject.lessons:
                for question in lesson.questions:
                    assert len(question.options) >= 2
                    assert 0 <= question.answer_index < len(question.options)


def test_load_content_from_path(document_file: Path) -> None:
    content = load_content_from_path(document_file)
    assert [course.title for course in content.list_courses()] == ["Course One", "Course Two"]
    subject = content.get_subject("c1", "s1")
    assert subject.short_description == "First subject"
    assert [lesson.id for lesson in subject.lessons] == ["l1", "l2"]


def test_summary_order_is_preserved(tmp_path: Path, document: dict[str, Any]) -> None:
    lesson = document["courses"]["c1"]["subjects"][0]["lessons"][0]
    lesson["summary"] = {"Zeta": "z", "Alpha": "a", "Mid": "m"}
    path = tmp_path / "ordered.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    content = load_content_from_path(path)
    summary = content.get_lesson("c1", "s1", "l1").summary
    assert [heading for heading, _ in summary] == ["Zeta", "Alpha", "Mid"]


def test_optional_fields_default(tmp_path: Path) -> None:
    payload = {
        "courses": {
            "c": {
                "title": "C",
                "subjects": [
                    {
                        "id": "s",
                        "title": "S",
                        "lessons": [
                            {"id": "l", "title": "L", "quiz": [{"stem": "Q", "options": ["x", "y"], "answerIndex": 0}]}
                        ],
                    }
                ],
            }
        }
    }
    path = tmp_path / "minimal.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    content = load_content_from_path(path)
    course = content.get_course("c")
    lesson = content.get_lesson("c", "s", "l")
    assert course.color == "#333333"
    assert lesson.short_description == ""
    assert lesson.summary == ()
    assert lesson.questions[0].explanation == ""


def test_lookups_raise_not_found_for_broken_chain(content) -> None:
    for call, kind, item_id in [
        (lambda: content.get_course("missing"), "course", "missing"),
        (lambda: content.get_subject("c1", "missing"), "subject", "missing"),
        (lambda: content.get_subject("missing", "s1"), "course", "missing"),
        (lambda: content.get_lesson("c1", "s1", "missing"), "lesson", "missing"),
        (lambda: content.get_lesson("c2", "s1", "l1"), "subject", "s1"),
    ]:
        try:
            call()
            raise AssertionError("Expected NotFoundError.")
        except NotFoundError as exc:
            assert exc.kind == kind
            assert exc.item_id == item_id
            assert kind in str(exc)
