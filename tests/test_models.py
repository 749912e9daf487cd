from __future__ import annotations

import dataclasses

import pytest

from docquiz.quizzer.models import ExtractionReport, Question


def test_multi_answer_is_derived() -> None:
    single = Question("Q", ("a", "b"), frozenset({"a"}))
    multi = Question("Q", ("a", "b"), frozenset({"a", "b"}))

    assert single.is_multi_answer is False
    assert multi.is_multi_answer is True


@pytest.mark.parametrize(
    "kwargs, message",
    [
        (dict(stem="  ", options=("a",), correct_options=frozenset({"a"})),
         "stem"),
        (dict(stem="Q", options=(), correct_options=frozenset({"a"})),
         "at least one option"),
        (dict(stem="Q", options=("a", "a"), correct_options=frozenset({"a"})),
         "unique"),
        (dict(stem="Q", options=("a",), correct_options=frozenset()),
         "correct option"),
        (dict(stem="Q", options=("a",), correct_options=frozenset({"z"})),
         "missing"),
    ],
)
def test_invariants_are_enforced(kwargs, message) -> None:
    with pytest.raises(ValueError, match=message):
        Question(**kwargs)


def test_grade_requires_exact_set() -> None:
    q = Question("Pick primes", ("2", "3", "4"), frozenset({"2", "3"}))

    assert q.grade({"2", "3"})
    assert not q.grade({"2"})
    assert not q.grade({"2", "3", "4"})
    assert q.is_correct("3")
    assert not q.is_correct("4")


def test_question_is_immutable() -> None:
    q = Question("Q", ("a",), frozenset({"a"}))
    with pytest.raises(dataclasses.FrozenInstanceError):
        q.stem = "other"  # type: ignore[misc]


def test_report_dropped() -> None:
    assert ExtractionReport(segments=5, kept=3).dropped == 2
