import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..core import (
    ConfigTemplateError,
    WorkspaceError,
    configure_logger,
    ensure_workspace,
    get_template,
)
from .catalog import (
    CONFIG_FILENAME,
    QuizCatalog,
    QuizDefaults,
    load_catalog,
    locate_catalog,
)
from .errors import CatalogError, QuizLoadError
from .selection import QuizMode
from .session import run_quiz_session
from .sources import is_url, load_question_set

LOGGER_NAME = "docquiz"


def _setup_logging(args: argparse.Namespace) -> logging.Logger:
    try:
        layout = ensure_workspace()
        log_dir = layout.path_for("logs")
    except WorkspaceError:
        log_dir = Path.cwd() / ".docquiz-logs"
    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=log_dir,
        level=args.log_level,
        verbose=bool(args.verbose),
    )
    return logger


def _workspace_config_dirs() -> list[Path]:
    try:
        return [ensure_workspace(create=False).path_for("config")]
    except WorkspaceError:
        return []


def _load_optional_catalog(args: argparse.Namespace) -> Optional[QuizCatalog]:
    explicit = Path(args.config) if args.config else None
    path = locate_catalog(explicit, _workspace_config_dirs())
    if path is None:
        if explicit is not None:
            raise CatalogError(f"Config file not found: {explicit}")
        return None
    return load_catalog(path)


def _resolve_target(
    target: str, catalog: Optional[QuizCatalog]
) -> tuple[str, str, str]:
    """Map a CLI target to ``(title, source, encoding)``.

    Catalog names win; otherwise the target must be a URL or an existing
    file.
    """

    if catalog is not None and target in catalog.entries:
        entry = catalog.get(target)
        return entry.title, entry.source, entry.encoding
    if is_url(target) or Path(target).expanduser().exists():
        return Path(target).name or target, target, "utf-8"
    if catalog is None:
        raise CatalogError(
            f"'{target}' is not a file or URL and no {CONFIG_FILENAME} "
            "was found."
        )
    entry = catalog.get(target)
    return entry.title, entry.source, entry.encoding


def _print_load_error(exc: QuizLoadError) -> None:
    print(f"Error loading questions: {exc}", file=sys.stderr)
    print("Fix the source and run the command again to retry.", file=sys.stderr)


def _cmd_init(args: argparse.Namespace) -> int:
    target = Path(args.path or CONFIG_FILENAME).expanduser().resolve()
    try:
        written = get_template("catalog").write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    print(f"Created template {written}")

    # The catalog's [quiz.sample] entry points at this file.
    sample = get_template("sample")
    sample_path = target.parent / sample.filename
    if sample_path.exists() and not args.force:
        print(f"Keeping existing {sample_path}")
        return 0
    print(f"Created sample quiz {sample.write(sample_path, overwrite=True)}")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    try:
        catalog = _load_optional_catalog(args)
    except CatalogError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    if catalog is None or not len(catalog):
        print(f"No quizzes configured. Run 'docquiz init' to create "
              f"{CONFIG_FILENAME}.")
        return 1
    table = Table(title="Quizzes")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Source", overflow="fold")
    for entry in catalog:
        table.add_row(entry.name, entry.title, entry.source)
    Console().print(table)
    return 0


def _compile_for(
    args: argparse.Namespace, logger: logging.Logger
):
    catalog = _load_optional_catalog(args)
    defaults = catalog.defaults if catalog is not None else QuizDefaults()
    title, source, encoding = _resolve_target(args.target, catalog)
    mode = QuizMode.parse(getattr(args, "mode", None) or defaults.mode)
    count = getattr(args, "count", None) or defaults.quick_count
    seed = getattr(args, "seed", None)
    logger.info(
        "Loading quiz",
        extra={"target": args.target, "source": source, "mode": mode.value},
    )
    compiled = load_question_set(
        source,
        mode=mode,
        quick_count=int(count),
        rng=random.Random(seed),
        encoding=encoding,
    )
    return title, defaults, compiled


def _cmd_check(args: argparse.Namespace) -> int:
    logger = _setup_logging(args)
    try:
        title, _, compiled = _compile_for(args, logger)
    except CatalogError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except QuizLoadError as exc:
        logger.warning("Quiz check failed", extra={"error": str(exc)})
        _print_load_error(exc)
        return 1
    report = compiled.report
    multi = sum(1 for q in compiled.questions if q.is_multi_answer)
    table = Table(title=f"{title}: extraction report")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Question blocks", str(report.segments))
    table.add_row("Kept", str(report.kept))
    table.add_row("Dropped", str(report.dropped))
    table.add_row("Single answer", str(len(compiled) - multi))
    table.add_row("Multiple answers", str(multi))
    Console().print(table)
    return 0


def _cmd_take(args: argparse.Namespace) -> int:
    logger = _setup_logging(args)
    try:
        title, defaults, compiled = _compile_for(args, logger)
    except CatalogError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except QuizLoadError as exc:
        logger.warning("Quiz load failed", extra={"error": str(exc)})
        _print_load_error(exc)
        return 1
    show_answers = defaults.show_answers and not args.no_answers
    console = Console()
    result = run_quiz_session(
        compiled.questions,
        console,
        lambda: console.input("> "),
        show_answers=show_answers,
        title=title,
    )
    logger.info(
        "Session finished",
        extra={
            "exit_action": result.exit_action,
            "total": result.summary.total_questions,
            "correct": result.summary.correct_answers,
            "attempts": result.attempts,
        },
    )
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help=f"Path to {CONFIG_FILENAME}")
    parser.add_argument(
        "--verbose", action="store_true", help="Echo logs to stderr"
    )
    parser.add_argument("--log-level", default="INFO")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docquiz",
        description="Multiple-choice quizzes from tagged documents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_init = sub.add_parser("init", help=f"Write a {CONFIG_FILENAME} template")
    sp_init.add_argument("path", nargs="?")
    sp_init.add_argument("--force", action="store_true")

    sp_list = sub.add_parser("list", help="List configured quizzes")
    _add_common(sp_list)

    sp_check = sub.add_parser(
        "check", help="Parse a quiz source and report what was kept"
    )
    sp_check.add_argument("target", help="Catalog name, file path or URL")
    _add_common(sp_check)

    sp_take = sub.add_parser("take", help="Take a quiz in the terminal")
    sp_take.add_argument("target", help="Catalog name, file path or URL")
    sp_take.add_argument("--mode", choices=["full", "quick"])
    sp_take.add_argument(
        "--count", type=int, help="Questions per quick-mode session"
    )
    sp_take.add_argument("--seed", type=int)
    sp_take.add_argument(
        "--no-answers",
        action="store_true",
        help="Hide correct answers in the summary",
    )
    _add_common(sp_take)
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if getattr(args, "count", None) is not None and args.count <= 0:
        parser.error("--count must be a positive integer")
    if args.command == "init":
        code = _cmd_init(args)
    elif args.command == "list":
        code = _cmd_list(args)
    elif args.command == "check":
        code = _cmd_check(args)
    elif args.command == "take":
        code = _cmd_take(args)
    else:  # pragma: no cover - argparse enforces the choices
        parser.print_help()
        code = 2
    raise SystemExit(code)
