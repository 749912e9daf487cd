"""Shuffling and question-set selection."""

from __future__ import annotations

import enum
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_QUICK_COUNT = 30


class QuizMode(str, enum.Enum):
    FULL = "full"
    QUICK = "quick"

    @classmethod
    def parse(cls, value: "QuizMode | str") -> "QuizMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(
                f"Unknown quiz mode '{value}' (expected one of: {choices})"
            ) from exc


def shuffle(
    items: Sequence[T], rng: Optional[random.Random] = None
) -> List[T]:
    """Return a uniformly shuffled copy of ``items`` (Fisher-Yates).

    The caller's sequence is left untouched.
    """

    rng = rng if rng is not None else random.Random()
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def select_set(
    questions: Sequence[T],
    mode: "QuizMode | str" = QuizMode.FULL,
    quick_count: int = DEFAULT_QUICK_COUNT,
    rng: Optional[random.Random] = None,
) -> List[T]:
    """Order (and in quick mode, cap) the question set.

    - full: a random permutation of every question.
    - quick: the first ``quick_count`` items of a random permutation, i.e.
      sampling without replacement. Smaller pools come back whole.
    """

    resolved = QuizMode.parse(mode)
    if isinstance(quick_count, bool) or not isinstance(quick_count, int):
        raise ValueError("quick_count must be an integer")
    if quick_count <= 0:
        raise ValueError("quick_count must be > 0")
    ordered = shuffle(questions, rng)
    if resolved is QuizMode.QUICK:
        return ordered[:quick_count]
    return ordered
