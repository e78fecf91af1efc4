"""Scripted collaborators shared by the tests."""

from __future__ import annotations

import asyncio
import io
from collections.abc import Callable, Iterable

from quizplay.core.errors import ChannelClosed
from quizplay.core.models import Quiz
from quizplay.ui.presenters import RichPresenter, make_console

ARITHMETIC = [Quiz(1, "2+2", "4"), Quiz(2, "3+3", "6")]


def question_of(prompt: str) -> str:
    return prompt.rstrip().removesuffix("?")


class ScriptedChannel:
    """Answers from a fixed list; closes once the script runs out."""

    def __init__(self, replies: Iterable[str], *, yield_between: bool = False) -> None:
        self._replies = list(replies)
        self.prompts: list[str] = []
        self._yield = yield_between

    async def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self._yield:
            await asyncio.sleep(0)
        if not self._replies:
            raise ChannelClosed("script exhausted")
        return self._replies.pop(0).strip()


class ResponderChannel:
    """Answers via a callback on the prompt text."""

    def __init__(self, respond: Callable[[str], str], *, yield_between: bool = True) -> None:
        self._respond = respond
        self.prompts: list[str] = []
        self._yield = yield_between

    async def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self._yield:
            await asyncio.sleep(0)
        return self._respond(prompt).strip()


def answer_key(quizzes: Iterable[Quiz]) -> dict[str, str]:
    return {quiz.question: quiz.answer for quiz in quizzes}


class RecordingPresenter:
    def __init__(self) -> None:
        self.started: list[int] = []
        self.events: list[object] = []
        self.lines: list[str] = []

    def info(self, text: str) -> None:
        self.lines.append(text)

    def error(self, text: str) -> None:
        self.lines.append(f"error: {text}")

    def round_started(self, total_questions: int) -> None:
        self.started.append(total_questions)

    def show_event(self, event: object) -> None:
        self.events.append(event)


def text_presenter() -> tuple[RichPresenter, io.StringIO]:
    buffer = io.StringIO()
    return RichPresenter(make_console(no_color=True, file=buffer, width=120)), buffer
