"""Line-oriented command dispatcher shared by the console and TCP clients."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ...core.engine import GameSession
from ...core.errors import ChannelClosed, InvalidQuiz, InvalidQuizId, QuizPlayError
from ...core.interfaces import PromptChannel
from ...data.catalog import CatalogStore
from ...ui.presenters import RichPresenter
from ..play.concurrency import run_blocking
from ..play.host import SessionHost

__all__ = ["CommandLoop", "parse_id", "PROMPT"]

logger = logging.getLogger(__name__)

PROMPT = "quiz > "


def parse_id(raw: str | None) -> int:
    if raw is None:
        raise InvalidQuizId("Missing <id> parameter.")
    try:
        return int(raw)
    except ValueError:
        raise InvalidQuizId("The <id> parameter is not a number.") from None


class CommandLoop:
    """Read a command, run it, report errors, repeat until quit or EOF."""

    def __init__(
        self,
        *,
        client_id: str,
        catalog: CatalogStore,
        host: SessionHost,
        channel: PromptChannel,
        presenter: RichPresenter,
        flush: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.client_id = client_id
        self.catalog = catalog
        self.host = host
        self.channel = channel
        self.presenter = presenter
        self._flush = flush
        self._handlers: dict[str, Callable[[list[str]], Awaitable[bool]]] = {
            "h": self._help,
            "help": self._help,
            "list": self._list,
            "show": self._show,
            "add": self._add,
            "delete": self._delete,
            "edit": self._edit,
            "test": self._test,
            "p": self._play,
            "play": self._play,
            "credits": self._credits,
            "q": self._quit,
            "quit": self._quit,
        }

    async def run(self) -> None:
        self.presenter.welcome()
        while True:
            try:
                line = await self.channel.ask(PROMPT)
            except ChannelClosed:
                logger.debug("input closed for %s", self.client_id, extra={"client_id": self.client_id})
                return
            try:
                keep_going = await self.dispatch(line)
                if self._flush is not None:
                    await self._flush()
            except ChannelClosed:
                return
            if not keep_going:
                return

    async def dispatch(self, line: str) -> bool:
        """Run one command line. Returns False when the loop should stop."""

        words = line.split()
        if not words:
            return True
        name, args = words[0].lower(), words[1:]
        handler = self._handlers.get(name)
        if handler is None:
            self.presenter.error(f"Unknown command: '{name}'")
            self.presenter.info("Use 'help' to see all commands.")
            return True
        try:
            return await handler(args)
        except InvalidQuiz as exc:
            self.presenter.errors("The quiz is invalid:", exc.errors)
        except ChannelClosed:
            raise
        except QuizPlayError as exc:
            self.presenter.error(str(exc))
        return True

    # ------------------------------------------------------------- handlers
    async def _help(self, _args: list[str]) -> bool:
        self.presenter.help()
        return True

    async def _list(self, _args: list[str]) -> bool:
        quizzes = await run_blocking(self.catalog.list_all)
        self.presenter.quiz_list(quizzes)
        return True

    async def _show(self, args: list[str]) -> bool:
        quiz_id = parse_id(args[0] if args else None)
        quiz = await run_blocking(self.catalog.get_by_id, quiz_id)
        self.presenter.quiz_detail(quiz)
        return True

    async def _add(self, _args: list[str]) -> bool:
        question = await self.channel.ask("Enter a question: ")
        answer = await self.channel.ask("Enter the answer: ")
        quiz = await run_blocking(self.catalog.create, question, answer)
        self.presenter.quiz_detail(quiz, label="Added")
        return True

    async def _delete(self, args: list[str]) -> bool:
        quiz_id = parse_id(args[0] if args else None)
        await run_blocking(self.catalog.delete, quiz_id)
        self.presenter.info(f"Deleted quiz {quiz_id}.")
        return True

    async def _edit(self, args: list[str]) -> bool:
        quiz_id = parse_id(args[0] if args else None)
        current = await run_blocking(self.catalog.get_by_id, quiz_id)
        self.presenter.quiz_detail(current)
        self.presenter.info("Press enter to keep the current text.")
        question = await self.channel.ask("Enter a question: ") or current.question
        answer = await self.channel.ask("Enter the answer: ") or current.answer
        quiz = await run_blocking(self.catalog.update, quiz_id, question, answer)
        self.presenter.quiz_detail(quiz, label=f"Quiz {quiz_id} changed to")
        return True

    async def _test(self, args: list[str]) -> bool:
        quiz_id = parse_id(args[0] if args else None)
        quiz = await run_blocking(self.catalog.get_by_id, quiz_id)
        turn = await GameSession.start([quiz]).advance(self.channel)
        self.presenter.test_result(turn)
        return True

    async def _play(self, _args: list[str]) -> bool:
        await self.host.play(self.client_id, self.channel, self.presenter)
        return True

    async def _credits(self, _args: list[str]) -> bool:
        self.presenter.credits()
        return True

    async def _quit(self, _args: list[str]) -> bool:
        self.presenter.info("Bye!")
        return False
