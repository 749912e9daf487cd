from __future__ import annotations

import json
import logging
import random

import pytest

from docquiz.core import configure_logger
from docquiz.quizzer.compiler import compile_question_set
from docquiz.quizzer.errors import (
    EmptyContentError,
    NoValidQuestionsError,
    QuizLoadError,
)
from docquiz.quizzer.models import Question
from fixtures import make_block, make_document


def _document(count: int) -> str:
    return make_document(
        make_block(
            f"Question {i}",
            right=[f"answer {i}"],
            wrong=[f"decoy {i}", f"other {i}"],
            closing=bool(i % 2),
        )
        for i in range(count)
    )


def test_full_mode_returns_whole_pool(rng: random.Random) -> None:
    compiled = compile_question_set(_document(12), mode="full", rng=rng)

    assert len(compiled) == 12
    assert compiled.pool_size == 12
    assert sorted(q.stem for q in compiled.questions) == sorted(
        f"Question {i}" for i in range(12)
    )
    assert compiled.report.segments == 12
    assert compiled.report.dropped == 0


def test_quick_mode_caps_question_count(rng: random.Random) -> None:
    compiled = compile_question_set(
        _document(50), mode="quick", quick_count=30, rng=rng
    )

    assert len(compiled) == 30
    assert len({q.stem for q in compiled.questions}) == 30
    assert compiled.pool_size == 50


def test_quick_mode_with_small_pool(rng: random.Random) -> None:
    compiled = compile_question_set(
        _document(10), mode="quick", quick_count=30, rng=rng
    )
    assert len(compiled) == 10


def test_same_seed_reproduces_the_quiz() -> None:
    text = _document(20)
    first = compile_question_set(text, rng=random.Random(99))
    second = compile_question_set(text, rng=random.Random(99))

    assert first.questions == second.questions


@pytest.mark.parametrize(
    "raw", ["", "   \n\t", "</variant>\n</question></variantright>"]
)
def test_empty_content_is_reported(raw: str, rng: random.Random) -> None:
    with pytest.raises(EmptyContentError, match="No content found"):
        compile_question_set(raw, rng=rng)


def test_no_valid_questions_is_reported(rng: random.Random) -> None:
    raw = "<question>Only a stem\n<question>Another<variant>no answer"

    with pytest.raises(NoValidQuestionsError) as info:
        compile_question_set(raw, rng=rng)

    assert info.value.segments == 2
    assert "check the document format" in str(info.value)
    assert isinstance(info.value, QuizLoadError)


def test_compiled_questions_honor_invariants(rng: random.Random) -> None:
    raw = make_document(
        [
            make_block("Dup", right=["x"], wrong=["x", "y"]),
            make_block("Multi", right=["a", "b"], wrong=["c"]),
            "<question>broken",
        ]
    )
    compiled = compile_question_set(raw, rng=rng)

    assert compiled.report.kept == 2
    assert compiled.report.dropped == 1
    for q in compiled.questions:
        assert isinstance(q, Question)
        assert len(set(q.options)) == len(q.options)
        assert q.correct_options <= set(q.options)
        assert q.is_multi_answer == (len(q.correct_options) > 1)


def test_compile_logs_diagnostic_counts(tmp_path, rng: random.Random) -> None:
    logger, log_path = configure_logger(
        "docquiz", log_dir=tmp_path / "logs", filename="compile.log"
    )
    compile_question_set(
        _document(3) + "<question>junk",
        rng=rng,
        log=logging.getLogger("docquiz.quizzer.compiler"),
    )
    for handler in logger.handlers:
        handler.flush()

    records = [
        json.loads(line)
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    compiled = [r for r in records if r["message"].startswith("Compiled")]
    assert compiled
    extra = compiled[-1]["extra"]
    assert extra["segments"] == 4
    assert extra["kept"] == 3
    assert extra["dropped"] == 1
    assert extra["mode"] == "full"
