from __future__ import annotations

import random
from collections import Counter

import pytest

from docquiz.quizzer.selection import QuizMode, select_set, shuffle


@pytest.mark.parametrize(
    "items",
    [[], [1], [1, 2], list(range(25)), ["a", "a", "b", "b", "b"]],
)
def test_shuffle_is_a_permutation(items: list, rng: random.Random) -> None:
    assert Counter(shuffle(items, rng)) == Counter(items)


def test_shuffle_does_not_mutate_input(rng: random.Random) -> None:
    items = list(range(10))
    snapshot = list(items)
    out = shuffle(items, rng)

    assert items == snapshot
    assert out is not items


def test_shuffle_accepts_tuples(rng: random.Random) -> None:
    out = shuffle(("x", "y", "z"), rng)
    assert isinstance(out, list)
    assert sorted(out) == ["x", "y", "z"]


def test_shuffle_is_deterministic_with_seed() -> None:
    items = list(range(30))
    assert shuffle(items, random.Random(3)) == shuffle(items, random.Random(3))


def test_shuffle_reaches_every_position() -> None:
    rng = random.Random(0)
    seen_first = {shuffle([0, 1, 2], rng)[0] for _ in range(200)}
    assert seen_first == {0, 1, 2}


def test_quick_mode_samples_without_replacement(rng: random.Random) -> None:
    pool = [f"q{i}" for i in range(50)]
    picked = select_set(pool, QuizMode.QUICK, 30, rng)

    assert len(picked) == 30
    assert len(set(picked)) == 30
    assert set(picked) <= set(pool)


def test_quick_mode_degrades_to_full_permutation(rng: random.Random) -> None:
    pool = [f"q{i}" for i in range(10)]
    picked = select_set(pool, "quick", 30, rng)

    assert sorted(picked) == sorted(pool)


def test_full_mode_returns_every_question(rng: random.Random) -> None:
    pool = list(range(40))
    picked = select_set(pool, QuizMode.FULL, 5, rng)

    assert sorted(picked) == pool


def test_mode_parsing_accepts_strings() -> None:
    assert QuizMode.parse("QUICK") is QuizMode.QUICK
    assert QuizMode.parse(" full ") is QuizMode.FULL
    assert QuizMode.parse(QuizMode.QUICK) is QuizMode.QUICK


def test_unknown_mode_is_rejected(rng: random.Random) -> None:
    with pytest.raises(ValueError, match="Unknown quiz mode"):
        select_set([1, 2], "speedrun", 1, rng)


@pytest.mark.parametrize("count", [0, -3, True, 2.5])
def test_quick_count_must_be_positive_int(count, rng: random.Random) -> None:
    with pytest.raises(ValueError):
        select_set([1, 2, 3], QuizMode.QUICK, count, rng)
