"""Fetch raw quiz document text from a local file or an HTTP(S) URL."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Callable, Optional, Union

import httpx

from .compiler import compile_question_set
from .errors import SourceUnavailableError
from .models import CompiledQuiz
from .selection import DEFAULT_QUICK_COUNT, QuizMode

TextExtractor = Callable[[bytes], str]
Source = Union[str, Path]

logger = logging.getLogger(__name__)


def is_url(source: Source) -> bool:
    text = str(source).strip().lower()
    return text.startswith("http://") or text.startswith("https://")


def decode_text(encoding: str = "utf-8") -> TextExtractor:
    """Default extractor: plain decode, replacing undecodable bytes."""

    def _decode(payload: bytes) -> str:
        return payload.decode(encoding, errors="replace")

    return _decode


def fetch_bytes(
    source: Source,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 10.0,
) -> bytes:
    """Read ``source`` as bytes, raising :class:`SourceUnavailableError`."""

    if is_url(source):
        return _fetch_url(str(source).strip(), client=client, timeout=timeout)
    return _read_path(Path(source).expanduser())


def _fetch_url(
    url: str, *, client: Optional[httpx.Client], timeout: float
) -> bytes:
    owned = client is None
    http = client if client is not None else httpx.Client(timeout=timeout)
    try:
        response = http.get(url, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.warning(
            "Fetching quiz source failed", extra={"url": url, "error": str(exc)}
        )
        raise SourceUnavailableError(f"Failed to fetch {url}: {exc}") from exc
    finally:
        if owned:
            http.close()
    if not response.is_success:
        logger.warning(
            "Quiz source returned an error status",
            extra={"url": url, "status": response.status_code},
        )
        raise SourceUnavailableError(
            f"HTTP error! status: {response.status_code}"
        )
    logger.debug(
        "Fetched quiz source", extra={"url": url, "bytes": len(response.content)}
    )
    return response.content


def _read_path(path: Path) -> bytes:
    if not path.exists():
        raise SourceUnavailableError(f"Quiz source not found: {path}")
    if not path.is_file():
        raise SourceUnavailableError(f"Quiz source is not a file: {path}")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SourceUnavailableError(
            f"Unable to read quiz source {path}: {exc}"
        ) from exc
    logger.debug(
        "Read quiz source", extra={"path": path, "bytes": len(data)}
    )
    return data


def load_raw_text(
    source: Source,
    *,
    client: Optional[httpx.Client] = None,
    extractor: Optional[TextExtractor] = None,
    encoding: str = "utf-8",
    timeout: float = 10.0,
) -> str:
    """Fetch ``source`` and turn it into plain text.

    ``extractor`` is the seam for binary document formats; the default just
    decodes the bytes with ``encoding``.
    """

    payload = fetch_bytes(source, client=client, timeout=timeout)
    convert = extractor or decode_text(encoding)
    return convert(payload)


def load_question_set(
    source: Source,
    *,
    mode: QuizMode | str = QuizMode.FULL,
    quick_count: int = DEFAULT_QUICK_COUNT,
    rng: Optional[random.Random] = None,
    client: Optional[httpx.Client] = None,
    extractor: Optional[TextExtractor] = None,
    encoding: str = "utf-8",
    timeout: float = 10.0,
) -> CompiledQuiz:
    """Fetch a document and compile it; every call starts from scratch."""

    raw = load_raw_text(
        source,
        client=client,
        extractor=extractor,
        encoding=encoding,
        timeout=timeout,
    )
    return compile_question_set(
        raw, mode=mode, quick_count=quick_count, rng=rng
    )
