"""Turn normalized quiz text into validated :class:`Question` records.

The tag grammar is flat: ``<question>`` opens a block, and inside a block
``<variant>`` and ``<variantright>`` open plain and correct options. Every
tag is closed implicitly by the next tag or by the end of the block. There is
no escaping, so these literals cannot appear inside question or answer text.

Blocks that lack a stem, an option marker or a correct answer are dropped
without complaint; :func:`extract_with_report` exposes how many were seen
versus kept.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .models import ExtractionReport, Question
from .selection import shuffle

QUESTION_MARKER = "<question>"
VARIANT_MARKER = "<variant>"
RIGHT_MARKER = "<variantright>"

_OPTION_MARKERS = (RIGHT_MARKER, VARIANT_MARKER)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """A marker found in a block and the text it governs."""

    marker: str
    text: str


def _find_marker(segment: str, start: int) -> Tuple[int, Optional[str]]:
    """Return the position and literal of the next option marker."""

    best_pos = -1
    best_marker: Optional[str] = None
    for marker in _OPTION_MARKERS:
        pos = segment.find(marker, start)
        if pos == -1:
            continue
        # The two literals differ right after "<variant", so they never
        # match at the same offset.
        if best_pos == -1 or pos < best_pos:
            best_pos, best_marker = pos, marker
    return best_pos, best_marker


def scan_segment(segment: str) -> Tuple[str, List[Token]]:
    """Split one question block into its stem and option tokens.

    Each token's text runs from just after its marker up to the next marker
    or the end of the block, trimmed. Returns ``("", [])`` when the block
    holds no option marker at all.
    """

    pos, marker = _find_marker(segment, 0)
    if marker is None:
        return "", []
    stem = segment[:pos].strip()
    tokens: List[Token] = []
    while marker is not None:
        body_start = pos + len(marker)
        next_pos, next_marker = _find_marker(segment, body_start)
        body_end = next_pos if next_marker is not None else len(segment)
        tokens.append(Token(marker, segment[body_start:body_end].strip()))
        pos, marker = next_pos, next_marker
    return stem, tokens


def iter_segments(normalized: str) -> Iterator[str]:
    for segment in normalized.split(QUESTION_MARKER):
        if segment.strip():
            yield segment


def _unique(values: List[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def build_question(
    segment: str, rng: Optional[random.Random] = None
) -> Optional[Question]:
    """Parse one block into a :class:`Question`, or ``None`` if malformed."""

    stem, tokens = scan_segment(segment)
    if not stem or not tokens:
        return None
    plain = [t.text for t in tokens if t.marker == VARIANT_MARKER and t.text]
    correct = [t.text for t in tokens if t.marker == RIGHT_MARKER and t.text]
    if not correct:
        return None

    pool = _unique(plain)
    for answer in correct:
        if answer not in pool:
            pool.append(answer)

    return Question(
        stem=stem,
        options=tuple(shuffle(pool, rng)),
        correct_options=frozenset(correct),
    )


def extract_with_report(
    normalized: str, rng: Optional[random.Random] = None
) -> Tuple[List[Question], ExtractionReport]:
    """Extract questions in source order along with seen/kept counts."""

    rng = rng if rng is not None else random.Random()
    questions: List[Question] = []
    segments = 0
    for segment in iter_segments(normalized):
        segments += 1
        question = build_question(segment, rng)
        if question is None:
            logger.debug(
                "Dropped malformed question block",
                extra={"block": segments, "preview": segment[:60].strip()},
            )
            continue
        questions.append(question)
    return questions, ExtractionReport(segments=segments, kept=len(questions))


def extract(
    normalized: str, rng: Optional[random.Random] = None
) -> List[Question]:
    """Extract every well-formed question from ``normalized`` text.

    May return an empty list; deciding whether that is an error is up to the
    caller.
    """

    questions, _ = extract_with_report(normalized, rng)
    return questions
