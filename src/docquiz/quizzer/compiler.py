"""Compile raw document text into a playable question set."""

from __future__ import annotations

import logging
import random
from typing import Optional

from .errors import EmptyContentError, NoValidQuestionsError
from .extract import extract_with_report
from .models import CompiledQuiz
from .normalize import normalize
from .selection import DEFAULT_QUICK_COUNT, QuizMode, select_set

logger = logging.getLogger(__name__)


def compile_question_set(
    raw: str,
    *,
    mode: QuizMode | str = QuizMode.FULL,
    quick_count: int = DEFAULT_QUICK_COUNT,
    rng: Optional[random.Random] = None,
    log: Optional[logging.Logger] = None,
) -> CompiledQuiz:
    """Normalize, extract and select in one go.

    Raises :class:`EmptyContentError` when the text is blank after
    normalization and :class:`NoValidQuestionsError` when no block survives
    extraction. The same ``rng`` drives option and question order, so a
    seeded generator reproduces the whole quiz.
    """

    log = log or logger
    rng = rng if rng is not None else random.Random()
    resolved_mode = QuizMode.parse(mode)

    normalized = normalize(raw)
    if not normalized:
        log.warning("Document is empty after normalization")
        raise EmptyContentError()

    pool, report = extract_with_report(normalized, rng)
    if not pool:
        log.warning(
            "No valid questions extracted",
            extra={"segments": report.segments},
        )
        raise NoValidQuestionsError(segments=report.segments)

    selected = select_set(pool, resolved_mode, quick_count, rng)
    log.info(
        "Compiled %d question(s)",
        len(selected),
        extra={
            "segments": report.segments,
            "kept": report.kept,
            "dropped": report.dropped,
            "mode": resolved_mode.value,
            "selected": len(selected),
        },
    )
    return CompiledQuiz(
        questions=selected,
        report=report,
        pool_size=len(pool),
    )
