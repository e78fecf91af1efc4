from __future__ import annotations

import logging
import random
import secrets
import string
import threading

from ...core.engine import GameSession
from ...core.errors import EmptyCatalog, InvalidPrecondition, QuizPlayError
from ...core.events import events_for
from ...core.interfaces import CatalogReader, Presenter, PromptChannel
from ...core.models import Outcome
from .concurrency import run_blocking

__all__ = ["SessionHost", "new_client_id"]

logger = logging.getLogger(__name__)


def new_client_id(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


class SessionHost:
    """Maps each connected user to at most one live round.

    Rounds never share state. The registry lock only guards the mapping
    itself; turn processing happens outside of it.
    """

    def __init__(self, catalog: CatalogReader, *, seed: int | None = None) -> None:
        self._catalog = catalog
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self._seeder = random.Random(seed) if seed is not None else None

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _rng(self) -> random.Random:
        if self._seeder is None:
            return random.Random(secrets.randbits(32))
        with self._lock:
            return random.Random(self._seeder.getrandbits(32))

    def open(self, client_id: str) -> GameSession:
        """Snapshot the catalog and start a round owned by ``client_id``."""

        with self._lock:
            if client_id in self._sessions:
                raise InvalidPrecondition(f"client '{client_id}' already has a round in progress")
        try:
            quizzes = list(self._catalog.list_all())
        except (OSError, ValueError, QuizPlayError) as exc:
            logger.warning(
                "catalog snapshot failed for %s: %s",
                client_id,
                exc,
                extra={"client_id": client_id, "error": str(exc)},
            )
            raise EmptyCatalog() from exc
        session = GameSession.start(quizzes, rng=self._rng())
        with self._lock:
            if client_id in self._sessions:
                raise InvalidPrecondition(f"client '{client_id}' already has a round in progress")
            self._sessions[client_id] = session
        logger.info(
            "round started for %s (%d questions)",
            client_id,
            session.total_questions,
            extra={"client_id": client_id, "questions": session.total_questions},
        )
        return session

    def session_for(self, client_id: str) -> GameSession | None:
        with self._lock:
            return self._sessions.get(client_id)

    def release(self, client_id: str) -> GameSession | None:
        with self._lock:
            session = self._sessions.pop(client_id, None)
        if session is not None:
            if session.outcome is Outcome.IN_PROGRESS:
                logger.info(
                    "round abandoned by %s at score %d after %d questions",
                    client_id,
                    session.score,
                    len(session.order),
                    extra={"client_id": client_id, "score": session.score, "asked": len(session.order)},
                )
            else:
                logger.info(
                    "round finished for %s: %s with score %d",
                    client_id,
                    session.outcome.value,
                    session.score,
                    extra={"client_id": client_id, "outcome": session.outcome.value, "score": session.score},
                )
        return session

    async def play(self, client_id: str, channel: PromptChannel, presenter: Presenter) -> GameSession:
        """Run a whole round for ``client_id`` over ``channel``.

        The round is released whatever happens; a closed channel leaves it
        abandoned with its last committed score.
        """

        session = await run_blocking(self.open, client_id)
        try:
            presenter.round_started(session.total_questions)
            while session.outcome is Outcome.IN_PROGRESS:
                try:
                    turn = await session.advance(channel)
                except InvalidPrecondition:
                    logger.exception("session protocol violation for %s", client_id, extra={"client_id": client_id})
                    raise
                for event in events_for(turn):
                    presenter.show_event(event)
            return session
        finally:
            self.release(client_id)

