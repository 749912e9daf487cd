"""Records produced by the question compiler."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Question:
    """One compiled multiple-choice question.

    ``options`` is already shuffled and holds no duplicates;
    ``correct_options`` is the answer key and is always a subset of
    ``options``.
    """

    stem: str
    options: tuple[str, ...]
    correct_options: frozenset[str]
    is_multi_answer: bool = field(init=False)

    def __post_init__(self) -> None:
        if not self.stem.strip():
            raise ValueError("question stem must be non-empty")
        if not self.options:
            raise ValueError("question needs at least one option")
        if len(set(self.options)) != len(self.options):
            raise ValueError("question options must be unique")
        if not self.correct_options:
            raise ValueError("question needs at least one correct option")
        missing = self.correct_options.difference(self.options)
        if missing:
            raise ValueError(
                "correct options missing from the option pool: "
                + ", ".join(sorted(missing))
            )
        object.__setattr__(
            self, "is_multi_answer", len(self.correct_options) > 1
        )

    def is_correct(self, option: str) -> bool:
        return option in self.correct_options

    def grade(self, selected: frozenset[str] | set[str]) -> bool:
        """Exact-match grading: every correct option and nothing else."""

        return frozenset(selected) == self.correct_options


@dataclass(frozen=True)
class ExtractionReport:
    """How many question blocks were seen versus kept."""

    segments: int
    kept: int

    @property
    def dropped(self) -> int:
        return self.segments - self.kept


@dataclass(frozen=True)
class CompiledQuiz:
    """A ready-to-play question set plus extraction diagnostics."""

    questions: list[Question]
    report: ExtractionReport
    pool_size: int

    def __len__(self) -> int:
        return len(self.questions)
