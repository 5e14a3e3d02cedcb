"""CLI entrypoint for the course quiz viewer."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from . import __version__
from .content_loader import load_content, load_content_from_path
from .errors import LoadError
from .models import ContentModel
from .navigation import (
    CardItem,
    CoursesScreen,
    CoursesView,
    LessonScreen,
    LessonsScreen,
    LessonsView,
    LessonView,
    SubjectsScreen,
    SubjectsView,
)
from .quiz import QuestionScreen, ResultsScreen
from .service import Screen, ViewerService

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
MENU_BACK_COMMANDS = {"b"}
MENU_QUIT_COMMANDS = {"q"}
LOAD_ERROR_MESSAGE = "Error loading content. Please check the console for details."
LOG_FORMAT = "<level>{level: <8}</level> | {message}"


class QuitApp(Exception):
    """Signal immediate app exit from nested screens."""


def configure_logging(level: str) -> None:
    """Route diagnostics to stderr at the requested level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)


def _load(data_path: Path | None) -> ContentModel:
    """Load bundled content, or an alternate document when given."""
    if data_path is None:
        return load_content()
    return load_content_from_path(data_path)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="quizviewer", description="Browse courses and take lesson quizzes")
    parser.add_argument("--data", type=Path, default=None, help="alternate content document (JSON)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="diagnostic log level (stderr)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        content = _load(args.data)
    except LoadError:
        print(LOAD_ERROR_MESSAGE)
        return 1
    return play_shell(content)


def play_shell(content: ContentModel, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the screen loop until the user quits or input ends."""
    service = ViewerService(content)
    try:
        while True:
            screen = service.current_screen()
            _render(screen, print_fn)
            try:
                choice = input_fn("Choose: ").strip().lower()
            except EOFError:
                return 0
            _handle(service, screen, choice, print_fn)
    except QuitApp:
        return 0


def _render(screen: Screen, print_fn: PrintFn) -> None:
    """Print one screen."""
    if isinstance(screen, CoursesScreen):
        _render_cards(screen.title, screen.cards, None, print_fn)
    elif isinstance(screen, (SubjectsScreen, LessonsScreen)):
        _render_cards(screen.title, screen.cards, screen.back_label, print_fn)
    elif isinstance(screen, LessonScreen):
        _render_lesson(screen, print_fn)
    elif isinstance(screen, QuestionScreen):
        _render_question(screen, print_fn)
    elif isinstance(screen, ResultsScreen):
        _render_results(screen, print_fn)
    print_fn("q) Quit")


def _render_cards(title: str, cards: tuple[CardItem, ...], back_label: str | None, print_fn: PrintFn) -> None:
    print_fn(f"\n=== {title} ===")
    for idx, card in enumerate(cards, start=1):
        if card.description:
            print_fn(f"{idx}) {card.title} - {card.description}")
        else:
            print_fn(f"{idx}) {card.title}")
    if back_label:
        print_fn(f"b) {back_label}")


def _render_lesson(screen: LessonScreen, print_fn: PrintFn) -> None:
    print_fn(f"\n=== {screen.title} ===")
    for heading, text in screen.sections:
        print_fn(f"\n{heading}")
        print_fn(text)
    print_fn("")
    if screen.notice:
        print_fn(screen.notice)
    if screen.question_count:
        print_fn("t) Test Yourself")
    print_fn(f"b) {screen.back_label}")


def _render_question(screen: QuestionScreen, print_fn: PrintFn) -> None:
    progress = screen.progress
    print_fn(f"\n=== Quiz: {screen.lesson_title} ===")
    print_fn(f"{progress.position} / {progress.total}")
    print_fn(f"\n{screen.stem}")
    feedback = screen.feedback
    for idx, option in enumerate(screen.options):
        marker = ""
        if feedback is not None:
            if idx == feedback.correct_index:
                marker = "  [correct]"
            elif idx == feedback.chosen_index:
                marker = "  [incorrect]"
        print_fn(f"{idx + 1}) {option}{marker}")
    if feedback is not None:
        print_fn(f"Explanation: {feedback.explanation}")
    if screen.prev_enabled:
        print_fn("p) Previous")
    print_fn(f"n) {screen.next_label}")
    print_fn(f"b) {screen.back_label}")


def _render_results(screen: ResultsScreen, print_fn: PrintFn) -> None:
    score = screen.score
    print_fn("\n=== Quiz Complete! ===")
    print_fn(f"Your Score: {score.correct_count} out of {score.total} ({score.percentage}%)")
    print_fn("\nReview Your Answers:")
    if screen.message:
        print_fn(screen.message)
    for item in screen.review:
        print_fn(f"\nQuestion: {item.stem}")
        print_fn(f"Your Answer: {item.chosen_text}")
        print_fn(f"Correct Answer: {item.correct_text}")
    print_fn("")
    print_fn("r) Retry Quiz")
    print_fn(f"b) {screen.back_label}")


def _pick(choice: str, count: int) -> int | None:
    """Convert a 1-based menu digit into an index."""
    if not choice.isdigit():
        return None
    index = int(choice) - 1
    if 0 <= index < count:
        return index
    return None


def _handle(service: ViewerService, screen: Screen, choice: str, print_fn: PrintFn) -> None:
    """Translate one command into a service operation."""
    if choice in MENU_QUIT_COMMANDS:
        raise QuitApp()
    state = service.current_state

    if choice in MENU_BACK_COMMANDS and not isinstance(screen, CoursesScreen):
        service.go_back()
        return

    if isinstance(screen, (CoursesScreen, SubjectsScreen, LessonsScreen)):
        index = _pick(choice, len(screen.cards))
        if index is None:
            print_fn("Invalid choice.")
            return
        card_id = screen.cards[index].id
        if isinstance(state, CoursesView):
            service.open_course(card_id)
        elif isinstance(state, SubjectsView):
            service.open_subject(state.course_id, card_id)
        elif isinstance(state, LessonsView):
            service.open_lesson(state.course_id, state.subject_id, card_id)
        return

    if isinstance(screen, LessonScreen) and isinstance(state, LessonView):
        if choice == "t" and screen.question_count:
            service.start_quiz(state.course_id, state.subject_id, state.lesson_id)
            return
        print_fn("Invalid choice.")
        return

    if isinstance(screen, QuestionScreen):
        if choice == "n":
            service.next_question()
            return
        if choice == "p" and screen.prev_enabled:
            service.previous_question()
            return
        index = _pick(choice, len(screen.options))
        if index is not None and screen.feedback is None:
            service.answer(index)
            return
        print_fn("Invalid choice.")
        return

    if isinstance(screen, ResultsScreen) and choice == "r":
        service.retry_quiz()
        return

    print_fn("Invalid choice.")


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
