from __future__ import annotations

import json
import shutil
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from uuid import uuid4

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from quizviewer.content_loader import parse_content  # noqa: E402
from quizviewer.models import ContentModel  # noqa: E402


def _tmp_path_fixture() -> Iterator[Path]:
    """Provide per-test temporary directory path inside the workspace.

    Overrides pytest's builtin ``tmp_path`` so temporary files stay under the
    project working directory at ``.tmp_pytest/``.
    """
    base = ROOT / ".tmp_pytest"
    base.mkdir(parents=True, exist_ok=True)
    path = base / str(uuid4())
    path.mkdir(parents=True, exist_ok=False)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        try:
            next(base.iterdir())
        except StopIteration:
            base.rmdir()
        except FileNotFoundError:
            pass


tmp_path = pytest.fixture(name="tmp_path")(_tmp_path_fixture)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Remove log sinks installed during a test."""
    yield
    logger.remove()


def sample_document() -> dict[str, Any]:
    """Small two-course document; lesson l1 has correct indices [1, 0, 2]."""
    return {
        "courses": {
            "c1": {
                "title": "Course One",
                "color": "#ff0000",
                "subjects": [
                    {
                        "id": "s1",
                        "title": "Subject One",
                        "shortDescription": "First subject",
                        "lessons": [
                            {
                                "id": "l1",
                                "title": "Lesson One",
                                "shortDescription": "First lesson",
                                "summary": {"Intro": "Intro text", "Details": "Detail text"},
                                "quiz": [
                                    {
                                        "stem": "Q1",
                                        "options": ["a1", "b1", "c1"],
                                        "answerIndex": 1,
                                        "explanation": "E1",
                                    },
                                    {
                                        "stem": "Q2",
                                        "options": ["a2", "b2", "c2"],
                                        "answerIndex": 0,
                                        "explanation": "E2",
                                    },
                                    {
                                        "stem": "Q3",
                                        "options": ["a3", "b3", "c3"],
                                        "answerIndex": 2,
                                        "explanation": "E3",
                                    },
                                ],
                            },
                            {
                                "id": "l2",
                                "title": "Lesson Two",
                                "shortDescription": "No quiz",
                                "summary": {"Only": "Text"},
                                "quiz": [],
                            },
                        ],
                    }
                ],
            },
            "c2": {"title": "Course Two", "color": "#00ff00", "subjects": []},
        }
    }


@pytest.fixture
def document() -> dict[str, Any]:
    return sample_document()


@pytest.fixture
def content() -> ContentModel:
    return parse_content(sample_document())


@pytest.fixture
def document_file(tmp_path: Path) -> Path:
    path = tmp_path / "database.json"
    path.write_text(json.dumps(sample_document()), encoding="utf-8")
    return path
