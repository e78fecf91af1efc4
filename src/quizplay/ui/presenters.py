from __future__ import annotations

from collections.abc import Sequence
from typing import IO

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.events import CorrectAnswer, IncorrectAnswer, RoundEvent, RoundWon
from ..core.models import Quiz, TurnOutcome

_COMMANDS: tuple[tuple[str, str], ...] = (
    ("h|help", "Show this help."),
    ("list", "List the existing quizzes."),
    ("show <id>", "Show the question and answer of the given quiz."),
    ("add", "Add a new quiz interactively."),
    ("delete <id>", "Delete the given quiz."),
    ("edit <id>", "Edit the given quiz."),
    ("test <id>", "Try out the given quiz."),
    ("p|play", "Play: answer every quiz once, in random order."),
    ("credits", "Credits."),
    ("q|quit", "Leave the program."),
)

AUTHORS: tuple[str, ...] = ("JULIAN",)


def make_console(*, no_color: bool = False, file: IO[str] | None = None, width: int | None = None) -> Console:
    # Colour is on unless explicitly disabled via --no-color.
    if no_color:
        return Console(file=file, force_terminal=False, color_system=None, width=width, highlight=False)
    return Console(file=file, force_terminal=True, color_system="auto", width=width, highlight=False)


class RichPresenter:
    def __init__(self, console: Console) -> None:
        self.console = console

    # --- generic output ---
    def info(self, text: str) -> None:
        self.console.print(Text(text))

    def error(self, text: str) -> None:
        self.console.print(Text.assemble(("Error: ", "bold red"), (text, "red")))

    def errors(self, title: str, messages: Sequence[str]) -> None:
        self.error(title)
        for message in messages:
            self.console.print(Text(f"  {message}", style="red"))

    def welcome(self) -> None:
        self.console.print(Panel("Quiz CLI. Type [bold]help[/] for the list of commands.", border_style="green", expand=False))

    # --- catalog ---
    def help(self) -> None:
        table = Table(title="Commands", show_header=False, box=box.SIMPLE)
        table.add_column(style="bold cyan", no_wrap=True)
        table.add_column()
        for usage, text in _COMMANDS:
            table.add_row(usage, text)
        self.console.print(table)

    def quiz_list(self, quizzes: Sequence[Quiz]) -> None:
        if not quizzes:
            self.console.print(Text("No quizzes yet.", style="dim"))
            return
        for quiz in quizzes:
            self.console.print(Text.assemble("[", (str(quiz.id), "magenta"), "]: ", quiz.question))

    def quiz_detail(self, quiz: Quiz, *, label: str | None = None) -> None:
        head: Text = Text.assemble((label, "magenta"), ": ") if label else Text.assemble("[", (str(quiz.id), "magenta"), "]: ")
        self.console.print(Text.assemble(head, quiz.question, " ", ("=>", "magenta"), " ", quiz.answer))

    def credits(self) -> None:
        self.console.print("Authors:")
        for name in AUTHORS:
            self.console.print(Text(name, style="green"))

    # --- play ---
    def round_started(self, total_questions: int) -> None:
        noun = "question" if total_questions == 1 else "questions"
        self.console.print(Text(f"New round: {total_questions} {noun}. One wrong answer ends it.", style="bold cyan"))

    def show_event(self, event: RoundEvent) -> None:
        if isinstance(event, CorrectAnswer):
            self.console.print(Text.assemble(("CORRECT", "bold green"), f" - {event.score_so_far} right so far."))
        elif isinstance(event, IncorrectAnswer):
            self.console.print(Text("INCORRECT", style="bold red"))
            self._final(event.final_score, won=False)
        elif isinstance(event, RoundWon):
            self.console.print(Text("No questions left.", style="cyan"))
            self._final(event.final_score, won=True)

    def _final(self, score: int, *, won: bool) -> None:
        style = "green" if won else "red"
        self.console.print(Text.assemble("End of game. Score: ", (str(score), f"bold {style}")))

    def test_result(self, turn: TurnOutcome) -> None:
        if turn.correct:
            self.console.print(Text("Your answer is correct.", style="bold green"))
        else:
            self.console.print(Text("Your answer is incorrect.", style="bold red"))
