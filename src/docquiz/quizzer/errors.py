"""Failures raised while loading and compiling a quiz."""

from __future__ import annotations

__all__ = [
    "QuizLoadError",
    "SourceUnavailableError",
    "EmptyContentError",
    "NoValidQuestionsError",
    "CatalogError",
]


class QuizLoadError(RuntimeError):
    """Base class for every failure of the load pipeline.

    Callers catch this one type, show the message, and offer to retry the
    whole load from scratch.
    """


class SourceUnavailableError(QuizLoadError):
    """The raw document could not be fetched or read."""


class EmptyContentError(QuizLoadError):
    """The document normalized to an empty string."""

    def __init__(self, message: str = "No content found in document") -> None:
        super().__init__(message)


class NoValidQuestionsError(QuizLoadError):
    """No question block survived extraction."""

    def __init__(
        self,
        message: str = (
            "No valid questions found in the document. "
            "Please check the document format."
        ),
        *,
        segments: int = 0,
    ) -> None:
        super().__init__(message)
        self.segments = segments


class CatalogError(QuizLoadError):
    """A quiz catalog entry is missing or malformed."""
