from ._main import build_arg_parser
from .catalog import (
    QuizCatalog,
    QuizDefaults,
    QuizEntry,
    load_catalog,
    locate_catalog,
)
from .compiler import compile_question_set
from .errors import (
    CatalogError,
    EmptyContentError,
    NoValidQuestionsError,
    QuizLoadError,
    SourceUnavailableError,
)
from .extract import extract, extract_with_report
from .models import CompiledQuiz, ExtractionReport, Question
from .normalize import normalize
from .selection import QuizMode, select_set, shuffle
from .session import (
    QuizSessionResult,
    QuizSessionState,
    QuizSummary,
    run_quiz_session,
)
from .sources import load_question_set, load_raw_text

__all__ = [
    "build_arg_parser",
    "QuizCatalog",
    "QuizDefaults",
    "QuizEntry",
    "load_catalog",
    "locate_catalog",
    "compile_question_set",
    "CatalogError",
    "EmptyContentError",
    "NoValidQuestionsError",
    "QuizLoadError",
    "SourceUnavailableError",
    "extract",
    "extract_with_report",
    "CompiledQuiz",
    "ExtractionReport",
    "Question",
    "normalize",
    "QuizMode",
    "select_set",
    "shuffle",
    "QuizSessionResult",
    "QuizSessionState",
    "QuizSummary",
    "run_quiz_session",
    "load_question_set",
    "load_raw_text",
]
