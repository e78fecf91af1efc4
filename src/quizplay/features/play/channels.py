"""Prompt channels: how a question reaches one user and their reply comes back."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from rich.console import Console
from rich.text import Text

from ...core.errors import ChannelClosed
from .concurrency import read_in_daemon

__all__ = ["ConsoleChannel", "PROMPT_STYLE", "StreamChannel", "StreamFile"]

logger = logging.getLogger(__name__)

PROMPT_STYLE = "red"


class ConsoleChannel:
    """Local terminal. Each line is read on its own daemon thread."""

    def __init__(self, console: Console, *, input_fn: Callable[[Text], str] | None = None) -> None:
        self.console = console
        self._input = input_fn or console.input

    async def ask(self, prompt: str) -> str:
        try:
            raw = await read_in_daemon(self._input, Text(prompt, style=PROMPT_STYLE))
        except (EOFError, KeyboardInterrupt):
            raise ChannelClosed("console input closed") from None
        return raw.strip()


class StreamChannel:
    """One TCP connection, line-delimited UTF-8 in both directions."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, console: Console) -> None:
        self.reader = reader
        self.writer = writer
        self.console = console

    async def flush(self) -> None:
        try:
            await self.writer.drain()
        except ConnectionError as exc:
            raise ChannelClosed(str(exc)) from exc

    async def ask(self, prompt: str) -> str:
        self.console.print(Text(prompt, style=PROMPT_STYLE), end="")
        await self.flush()
        try:
            line = await self.reader.readline()
        except ConnectionError as exc:
            raise ChannelClosed(str(exc)) from exc
        except ValueError as exc:
            # readline() reports a line longer than the reader limit this way.
            logger.warning("dropping client: %s", exc)
            raise ChannelClosed("input line too long") from exc
        if not line:
            raise ChannelClosed("peer closed the connection")
        return line.decode("utf-8", errors="replace").strip()


class StreamFile:
    """Minimal text file facade so a rich ``Console`` can print into a socket."""

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer

    def write(self, text: str) -> int:
        if not self._writer.is_closing():
            self._writer.write(text.encode("utf-8"))
        return len(text)

    def flush(self) -> None:
        pass

    def isatty(self) -> bool:
        return False
