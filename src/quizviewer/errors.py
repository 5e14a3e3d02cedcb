"""Failure conditions raised by the content model, loader, and quiz session."""

from __future__ import annotations


class NotFoundError(KeyError):
    """An id chain does not resolve in the content tree."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} '{item_id}' not found")
        self.kind = kind
        self.item_id = item_id

    def __str__(self) -> str:
        return str(self.args[0])


class LoadError(Exception):
    """The data source could not be read, parsed, or validated."""


class InvalidSelectionError(ValueError):
    """An answer was rejected: out of range, or the question is already answered."""


class EmptyQuizError(ValueError):
    """A quiz was requested for a lesson without questions."""
