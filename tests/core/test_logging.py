from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from docquiz.core import logging as core_logging


def _marked(logger: logging.Logger, marker: str) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, marker, False)]


def test_configure_logger_writes_json(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "docquiz.test",
        log_dir=tmp_path / "logs",
        filename="test.log",
    )

    logger.info("compiled", extra={"kept": 3, "options": {"a", "b"}})
    logger.debug("hidden at INFO")

    class _Helper:
        def __repr__(self):  # noqa: D401
            return "helper"

    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "with error",
            extra={"path": Path("/tmp/x"), "obj": _Helper()},
        )
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["message"] == "compiled"
    assert first["level"] == "INFO"
    assert first["logger"] == "docquiz.test"
    assert first["extra"]["kept"] == 3
    assert sorted(first["extra"]["options"]) == ["a", "b"]

    last = json.loads(lines[-1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["obj"] == "helper"
    assert last["extra"]["path"] == str(Path("/tmp/x"))

    core_logging.release_logger(logger)


def test_records_without_extras_have_no_extra_key(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "docquiz.test_plain", log_dir=tmp_path, filename="plain.log"
    )
    logger.warning("plain")
    for handler in logger.handlers:
        handler.flush()

    payload = json.loads(log_path.read_text(encoding="utf-8"))
    assert "extra" not in payload
    core_logging.release_logger(logger)


def test_configure_logger_is_idempotent(tmp_path):
    name = "docquiz.test_twice"
    logger, first = core_logging.configure_logger(name, log_dir=tmp_path)
    _, second = core_logging.configure_logger(name, log_dir=tmp_path)

    assert first == second
    assert len(_marked(logger, "_docquiz_file")) == 1
    core_logging.release_logger(logger)
    assert not logger.handlers


def test_console_handler_toggle(tmp_path):
    name = "docquiz.test_toggle"
    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True
    )
    assert len(_marked(logger, "_docquiz_console")) == 1

    core_logging.configure_logger(name, log_dir=tmp_path, verbose=True)
    assert len(_marked(logger, "_docquiz_console")) == 1

    core_logging.configure_logger(name, log_dir=tmp_path, verbose=False)
    assert not _marked(logger, "_docquiz_console")
    core_logging.release_logger(logger)


def test_configure_logger_fallback_directory(tmp_path, monkeypatch):
    target = tmp_path / "blocked"
    fallback = tmp_path / "fallback"
    original_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: ANN001
        if self == target:
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback)

    logger, log_path = core_logging.configure_logger(
        "docquiz.test_blocked", log_dir=target, filename="blocked.log"
    )

    assert log_path == fallback / "blocked.log"
    assert log_path.exists()
    core_logging.release_logger(logger)


def test_configure_logger_rotating_handler_fallback(tmp_path, monkeypatch):
    calls = {"count": 0}
    fallback_dir = tmp_path / "rotate-fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):  # noqa: ANN001
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback_dir)

    logger, log_path = core_logging.configure_logger(
        "docquiz.test_rotating_fallback",
        log_dir=tmp_path / "primary",
        filename="rotate.log",
    )

    assert log_path.parent == fallback_dir
    assert calls["count"] == 2
    core_logging.release_logger(logger)


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))
    assert core_logging._fallback_log_dir() == tmp_path / "docquiz-logs"


def test_coerce_level():
    assert core_logging._coerce_level("bogus") == logging.INFO
    assert core_logging._coerce_level("debug") == logging.DEBUG
