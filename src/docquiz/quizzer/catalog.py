"""Quiz catalog: the named quizzes a user can pick from.

The catalog lives in ``docquiz.toml``::

    [defaults]
    mode = "quick"
    quick_count = 30

    [quiz.culturology]
    title = "Culturology"
    source = "./culturology.txt"
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence

from ..core.config import (
    TomlConfigError,
    find_config,
    load_toml,
    merge_defaults,
)
from .errors import CatalogError
from .selection import DEFAULT_QUICK_COUNT, QuizMode
from .sources import is_url

CONFIG_FILENAME = "docquiz.toml"

DEFAULTS: Dict[str, Any] = {
    "mode": QuizMode.FULL.value,
    "quick_count": DEFAULT_QUICK_COUNT,
    "show_answers": True,
}

_ENTRY_KEYS = {"title", "source", "encoding"}


@dataclass(frozen=True)
class QuizDefaults:
    mode: QuizMode = QuizMode.FULL
    quick_count: int = DEFAULT_QUICK_COUNT
    show_answers: bool = True


@dataclass(frozen=True)
class QuizEntry:
    name: str
    title: str
    source: str
    encoding: str = "utf-8"


@dataclass(frozen=True)
class QuizCatalog:
    entries: Mapping[str, QuizEntry] = field(default_factory=dict)
    defaults: QuizDefaults = field(default_factory=QuizDefaults)
    path: Optional[Path] = None

    def __iter__(self) -> Iterator[QuizEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str) -> QuizEntry:
        try:
            return self.entries[name]
        except KeyError as exc:
            known = ", ".join(sorted(self.entries)) or "(none)"
            raise CatalogError(
                f"Unknown quiz '{name}'. Available quizzes: {known}"
            ) from exc


def locate_catalog(
    explicit: Optional[Path], search_dirs: Sequence[Path] = ()
) -> Optional[Path]:
    """Find ``docquiz.toml`` in the cwd, then each of ``search_dirs``."""

    candidates = [Path.cwd() / CONFIG_FILENAME]
    candidates.extend(Path(d) / CONFIG_FILENAME for d in search_dirs)
    return find_config(explicit, candidates)


def load_catalog(path: Path) -> QuizCatalog:
    """Parse the catalog at ``path``.

    Relative ``source`` paths resolve against the catalog's directory.
    Structural problems raise :class:`CatalogError`.
    """

    try:
        data = load_toml(path)
    except TomlConfigError as exc:
        raise CatalogError(str(exc)) from exc
    return build_catalog(data, base_dir=Path(path).parent, path=Path(path))


def build_catalog(
    data: Mapping[str, Any],
    *,
    base_dir: Path,
    path: Optional[Path] = None,
) -> QuizCatalog:
    defaults = _parse_defaults(data.get("defaults") or {})
    raw_quizzes = data.get("quiz") or {}
    if not isinstance(raw_quizzes, Mapping):
        raise CatalogError("[quiz] must be a table of quiz sections")
    entries = {
        name: _parse_entry(name, section, base_dir)
        for name, section in raw_quizzes.items()
    }
    return QuizCatalog(entries=entries, defaults=defaults, path=path)


def _parse_defaults(raw: Any) -> QuizDefaults:
    if not isinstance(raw, Mapping):
        raise CatalogError("[defaults] must be a table")
    merged = copy.deepcopy(DEFAULTS)
    try:
        merge_defaults(merged, raw, path="defaults.")
        mode = QuizMode.parse(merged["mode"])
    except (TomlConfigError, ValueError) as exc:
        raise CatalogError(str(exc)) from exc
    count = merged["quick_count"]
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise CatalogError("defaults.quick_count must be a positive integer")
    return QuizDefaults(
        mode=mode,
        quick_count=count,
        show_answers=bool(merged["show_answers"]),
    )


def _parse_entry(name: str, section: Any, base_dir: Path) -> QuizEntry:
    if not isinstance(section, Mapping):
        raise CatalogError(f"[quiz.{name}] must be a table")
    unknown = set(section) - _ENTRY_KEYS
    if unknown:
        raise CatalogError(
            f"Unknown key(s) in [quiz.{name}]: {', '.join(sorted(unknown))}"
        )
    source = str(section.get("source") or "").strip()
    if not source:
        raise CatalogError(f"[quiz.{name}] must define 'source'")
    if not is_url(source):
        candidate = Path(source).expanduser()
        if not candidate.is_absolute():
            candidate = base_dir / candidate
        source = str(candidate)
    title = str(section.get("title") or name).strip() or name
    encoding = str(section.get("encoding") or "utf-8")
    return QuizEntry(name=name, title=title, source=source, encoding=encoding)
