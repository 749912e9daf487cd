"""Rich-powered quiz session over a compiled question set.

The loop renders one question at a time, reads commands from an injectable
input provider and returns a :class:`QuizSessionResult`. Answers are graded
as soon as they are locked and a submitted attempt can be restarted.
State transitions live in :class:`QuizSessionState` so they can be tested
without a console.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Question

InputProvider = Callable[[], str]
ExitAction = Literal["submitted", "quit", "empty"]


def choice_key(index: int) -> str:
    """Return the 1-based key typed to pick the option at ``index``."""

    return str(index + 1)


@dataclass(frozen=True)
class QuestionResponse:
    """How the user answered one question."""

    index: int
    stem: str
    selected: tuple[str, ...]
    correct: tuple[str, ...]
    is_correct: bool
    is_multi_answer: bool


@dataclass(frozen=True)
class QuizSummary:
    total_questions: int
    answered_questions: int
    correct_answers: int

    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions

    @property
    def percent(self) -> int:
        # Half-up, not banker's rounding.
        return int(self.accuracy * 100 + 0.5)


@dataclass(frozen=True)
class QuizSessionResult:
    responses: list[QuestionResponse]
    summary: QuizSummary
    exit_action: ExitAction
    attempts: int = 1


@dataclass(frozen=True)
class SessionCommand:
    type: Literal[
        "next", "prev", "confirm", "submit", "restart", "quit", "select"
    ]
    choice: str | None = None


@dataclass
class QuizSessionState:
    """Mutable navigation, selection and lock state for one attempt.

    A locked question has been graded and refuses further changes. Only
    locked questions count toward the running :meth:`score`.
    """

    questions: list[Question]
    index: int = 0
    selections: dict[int, set[str]] = field(default_factory=dict)
    locked: set[int] = field(default_factory=set)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> Question:
        return self.questions[self.index]

    def available_choice_keys(self) -> list[str]:
        return [choice_key(i) for i in range(len(self.current.options))]

    def option_for(self, key: str) -> str | None:
        normalized = key.strip()
        for i, option in enumerate(self.current.options):
            if choice_key(i) == normalized:
                return option
        return None

    def is_locked(self, index: int | None = None) -> bool:
        return (self.index if index is None else index) in self.locked

    def select(self, key: str) -> bool:
        """Pick an option on the current question.

        A single-answer pick is final and locks the question at once.
        Multi-answer questions toggle the option in and out of the
        selection until :meth:`lock` is called. Returns ``False`` for an
        unknown key or a locked question.
        """

        if self.is_locked():
            return False
        option = self.option_for(key)
        if option is None:
            return False
        question = self.current
        if not question.is_multi_answer:
            self.selections[self.index] = {option}
            self.locked.add(self.index)
            return True
        chosen = self.selections.setdefault(self.index, set())
        if option in chosen:
            chosen.discard(option)
            if not chosen:
                del self.selections[self.index]
        else:
            chosen.add(option)
        return True

    def lock(self) -> bool:
        if self.is_locked() or not self.selected_for():
            return False
        self.locked.add(self.index)
        return True

    def lock_answered(self) -> None:
        self.locked.update(i for i, chosen in self.selections.items() if chosen)

    def selected_for(self, index: int | None = None) -> set[str]:
        target = self.index if index is None else index
        return set(self.selections.get(target, ()))

    def is_correct_at(self, index: int) -> bool:
        chosen = self.selected_for(index)
        return bool(chosen) and self.questions[index].grade(chosen)

    def score(self) -> int:
        return sum(1 for i in self.locked if self.is_correct_at(i))

    def answered_count(self) -> int:
        return sum(1 for chosen in self.selections.values() if chosen)

    def reset(self) -> None:
        """Start the same questions over from the first one."""

        self.index = 0
        self.selections.clear()
        self.locked.clear()

    def next(self) -> None:
        if self.index + 1 < self.total_questions:
            self.index += 1

    def previous(self) -> None:
        if self.index > 0:
            self.index -= 1

    def is_last(self) -> bool:
        return self.index == self.total_questions - 1


def parse_session_command(raw: str | None) -> SessionCommand | None:
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if lowered in {"c", "confirm", "check"}:
        return SessionCommand("confirm")
    if lowered in {"s", "submit", "finish"}:
        return SessionCommand("submit")
    if lowered in {"r", "restart", "again"}:
        return SessionCommand("restart")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if text.isascii() and text.isdigit():
        return SessionCommand("select", str(int(text)))
    return None


def run_quiz_session(
    questions: Sequence[Question],
    console: Console,
    input_provider: InputProvider,
    *,
    show_answers: bool = True,
    title: str | None = None,
) -> QuizSessionResult:
    """Run an interactive session and return the graded result.

    After a submitted attempt the summary offers a restart; the result
    describes the last attempt.
    """

    state = QuizSessionState(list(questions))
    if not state.questions:
        console.print(
            Panel(
                "Question set is empty.",
                title=title or "Quiz",
                border_style="yellow",
            )
        )
        return QuizSessionResult([], QuizSummary(0, 0, 0), "empty")

    if title:
        console.print(Panel(Text(title, style="bold"), border_style="cyan"))

    attempts = 1
    while True:
        exit_action = _run_attempt(
            console, state, input_provider, show_answers=show_answers
        )
        result = grade_session(state, exit_action, attempts=attempts)
        if exit_action != "submitted":
            return result
        _render_summary(console, result, show_answers=show_answers)
        if not _wants_restart(console, input_provider):
            return result
        state.reset()
        attempts += 1
        console.print(Text(f"Attempt {attempts}", style="bold cyan"))


def _run_attempt(
    console: Console,
    state: QuizSessionState,
    input_provider: InputProvider,
    *,
    show_answers: bool,
) -> ExitAction:
    while True:
        _render_question(console, state, show_answers=show_answers)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return "quit"
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        outcome = _apply_command(
            command, state, console, show_answers=show_answers
        )
        if outcome:
            return outcome


def _wants_restart(console: Console, input_provider: InputProvider) -> bool:
    console.print(
        Text("Enter r to try again, anything else to exit.", style="dim")
    )
    try:
        raw = input_provider()
    except (EOFError, KeyboardInterrupt, StopIteration):
        return False
    command = parse_session_command(raw)
    return command is not None and command.type == "restart"


def grade_session(
    state: QuizSessionState,
    exit_action: ExitAction = "submitted",
    *,
    attempts: int = 1,
) -> QuizSessionResult:
    """Score every question by exact match of the selected option set."""

    responses: list[QuestionResponse] = []
    for index, question in enumerate(state.questions):
        responses.append(
            QuestionResponse(
                index=index,
                stem=question.stem,
                selected=_in_option_order(question, state.selected_for(index)),
                correct=_in_option_order(question, question.correct_options),
                is_correct=state.is_correct_at(index),
                is_multi_answer=question.is_multi_answer,
            )
        )
    summary = QuizSummary(
        total_questions=len(responses),
        answered_questions=state.answered_count(),
        correct_answers=sum(1 for r in responses if r.is_correct),
    )
    return QuizSessionResult(responses, summary, exit_action, attempts)


def _in_option_order(
    question: Question, options: set[str] | frozenset[str]
) -> tuple[str, ...]:
    return tuple(opt for opt in question.options if opt in options)


def _print_feedback(
    console: Console, state: QuizSessionState, *, show_answers: bool
) -> None:
    if state.is_correct_at(state.index):
        console.print("[bold green]Correct![/]")
        return
    message = Text("Wrong.", style="bold red")
    if show_answers:
        question = state.current
        message.append(" Correct answer: ")
        message.append(
            "; ".join(_in_option_order(question, question.correct_options)),
            style="bold",
        )
    console.print(message)


def _apply_command(
    command: SessionCommand,
    state: QuizSessionState,
    console: Console,
    *,
    show_answers: bool = True,
) -> ExitAction | None:
    if command.type in {"select", "confirm"} and state.is_locked():
        console.print(
            f"[yellow]Question {state.index + 1} is already answered.[/]"
        )
        return None
    if command.type == "select" and command.choice:
        if not state.select(command.choice):
            console.print(
                "[red]'%s' is not a valid choice for this question.[/red]"
                % command.choice,
            )
        elif state.is_locked():
            _print_feedback(console, state, show_answers=show_answers)
        else:
            picked = ", ".join(
                choice_key(i)
                for i, opt in enumerate(state.current.options)
                if opt in state.selected_for()
            )
            console.print(
                f"Selected [bold]{picked or 'nothing'}[/]. "
                "Enter c to confirm."
            )
        return None
    if command.type == "confirm":
        if state.lock():
            _print_feedback(console, state, show_answers=show_answers)
        else:
            console.print("[red]Choose at least one option first.[/]")
        return None
    if command.type == "next":
        state.next()
        return None
    if command.type == "prev":
        state.previous()
        return None
    if command.type == "restart":
        state.reset()
        console.print("[bold cyan]Starting over.[/]")
        return None
    if command.type == "quit":
        console.print("\n[bold yellow]Ending session without submission.[/]")
        return "quit"
    if command.type == "submit":
        state.lock_answered()
        return "submitted"
    return None


def _render_option(
    option: str,
    question: Question,
    *,
    picked: bool,
    locked: bool,
    show_answers: bool,
) -> Text:
    if question.is_multi_answer:
        row = Text("[x] " if picked else "[ ] ")
    else:
        row = Text("(•) " if picked else "( ) ")
    if not locked:
        row.append(option, style="bold green" if picked else "")
        return row
    is_right = question.is_correct(option)
    if is_right and (picked or show_answers):
        row.append(option, style="bold green")
        row.append(" ✔", style="green")
    elif picked:
        row.append(option, style="bold red")
        row.append(" ✘", style="red")
    else:
        row.append(option, style="dim")
    return row


def _render_question(
    console: Console, state: QuizSessionState, *, show_answers: bool = True
) -> None:
    question = state.current
    header = Text.assemble(
        (f"Question {state.index + 1}", "bold cyan"),
        (f" of {state.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.stem, style="bold"))
    if question.is_multi_answer:
        console.print(Text("Select all that apply.", style="italic yellow"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")

    chosen = state.selected_for()
    locked = state.is_locked()
    for i, option in enumerate(question.options):
        table.add_row(
            choice_key(i),
            _render_option(
                option,
                question,
                picked=option in chosen,
                locked=locked,
                show_answers=show_answers,
            ),
        )
    console.print(table)

    keys = state.available_choice_keys()
    commands = [] if locked else [f"choices [{keys[0]}-{keys[-1]}]"]
    if question.is_multi_answer and not locked:
        commands.append("c (confirm)")
    commands += [
        "n (next)",
        "p (prev)",
        "submit (finish)" if state.is_last() else "submit",
        "quit",
    ]
    console.print(
        Text(
            f"Score {state.score()} | "
            f"Answered {state.answered_count()}/{state.total_questions} | "
            f"Commands: {', '.join(commands)}",
            style="dim",
        )
    )


def _render_summary(
    console: Console,
    result: QuizSessionResult,
    *,
    show_answers: bool,
) -> None:
    summary = result.summary
    console.print()
    console.rule(Text("Quiz Summary", style="bold magenta"))
    console.print(
        Text(f"{summary.percent}%", style="bold cyan", justify="center")
    )
    console.print(
        Text(
            f"You got {summary.correct_answers} out of "
            f"{summary.total_questions} questions right",
            justify="center",
        )
    )

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Total questions", str(summary.total_questions))
    overview.add_row("Answered", str(summary.answered_questions))
    overview.add_row("Correct", str(summary.correct_answers))
    console.print(overview)

    table = Table(title="Responses", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer", overflow="fold")
    if show_answers:
        table.add_column("Correct answer", overflow="fold")
    table.add_column("Result", justify="center")
    for response in result.responses:
        row = [
            str(response.index + 1),
            response.stem,
            "; ".join(response.selected) or "-",
        ]
        if show_answers:
            row.append("; ".join(response.correct))
        row.append("✅" if response.is_correct else "❌")
        table.add_row(*row)
    console.print(table)
