from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .events import RoundEvent
from .models import Quiz


@runtime_checkable
class PromptChannel(Protocol):
    async def ask(self, prompt: str) -> str:
        """Show ``prompt`` to the user and return their reply, whitespace-trimmed.

        Raises ``ChannelClosed`` when the user goes away before answering.
        """
        ...


class CatalogReader(Protocol):
    def list_all(self) -> Sequence[Quiz]: ...


class Presenter(Protocol):
    def info(self, text: str) -> None: ...

    def error(self, text: str) -> None: ...

    def round_started(self, total_questions: int) -> None: ...

    def show_event(self, event: RoundEvent) -> None: ...
