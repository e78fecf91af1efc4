"""HTTP rendition of the play feature.

Each round is addressed by an opaque id that doubles as the host's client id.
The suspension point sits between requests: the response to one answer
carries the next outstanding question. HTTP has no connection to lose, so a
round nobody touches for ``idle_timeout`` seconds counts as abandoned and is
released the next time a round is started.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from ...core.engine import GameSession
from ...core.errors import EmptyCatalog, InvalidPrecondition
from ...core.events import events_for
from ...data.catalog import CatalogStore
from .concurrency import run_blocking
from .host import SessionHost, new_client_id
from .schemas import AnswerRequest, QuizSummaryPayload, RoundPayload, TurnPayload

__all__ = ["DEFAULT_IDLE_TIMEOUT", "DEFAULT_MAX_ROUNDS", "PlayController", "create_play_router"]

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT = 900.0
DEFAULT_MAX_ROUNDS = 1000


@dataclass
class _RoundSlot:
    last_seen: float
    lock: threading.Lock = field(default_factory=threading.Lock)


class PlayController:
    def __init__(
        self,
        host: SessionHost,
        catalog: CatalogStore,
        *,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host = host
        self.catalog = catalog
        self.idle_timeout = idle_timeout
        self.max_rounds = max_rounds
        self._clock = clock
        self._slots: dict[str, _RoundSlot] = {}
        self._slots_lock = threading.Lock()

    def json_response(self, data: object, *, status_code: int = 200) -> JSONResponse:
        return JSONResponse(data, status_code=status_code)

    # ------------------------------------------------------------------ slots
    @property
    def live_rounds(self) -> int:
        with self._slots_lock:
            return len(self._slots)

    def _slot(self, round_id: str) -> _RoundSlot:
        with self._slots_lock:
            slot = self._slots.get(round_id)
        if slot is None:
            raise HTTPException(status_code=404, detail="round not found")
        return slot

    def _drop(self, round_id: str) -> GameSession | None:
        with self._slots_lock:
            self._slots.pop(round_id, None)
        return self.host.release(round_id)

    def _require(self, round_id: str) -> GameSession:
        session = self.host.session_for(round_id)
        if session is None:
            raise HTTPException(status_code=404, detail="round not found")
        return session

    def prune_idle(self) -> int:
        """Release every round untouched for longer than ``idle_timeout``."""

        now = self._clock()
        with self._slots_lock:
            candidates = [(rid, slot) for rid, slot in self._slots.items() if now - slot.last_seen > self.idle_timeout]
        pruned = 0
        for round_id, slot in candidates:
            # Skip rounds busy with a request; they are not idle.
            if not slot.lock.acquire(blocking=False):
                continue
            try:
                with self._slots_lock:
                    current = self._slots.get(round_id)
                if current is not slot or now - slot.last_seen <= self.idle_timeout:
                    continue
                self._drop(round_id)
                pruned += 1
            finally:
                slot.lock.release()
        if pruned:
            logger.info("pruned %d idle rounds", pruned, extra={"pruned": pruned})
        return pruned

    # -------------------------------------------------------------- endpoints
    def list_quizzes(self) -> list[dict[str, object]]:
        return [QuizSummaryPayload.from_quiz(quiz).to_dict() for quiz in self.catalog.list_all()]

    def start_round(self) -> dict[str, object]:
        self.prune_idle()
        round_id = new_client_id()
        slot = _RoundSlot(last_seen=self._clock())
        with self._slots_lock:
            if len(self._slots) >= self.max_rounds:
                raise HTTPException(status_code=429, detail="too many rounds in progress")
            self._slots[round_id] = slot
        with slot.lock:
            try:
                session = self.host.open(round_id)
            except EmptyCatalog as exc:
                with self._slots_lock:
                    self._slots.pop(round_id, None)
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            session.next_quiz()
            return RoundPayload.from_session(round_id, session).to_dict()

    def get_round(self, round_id: str) -> dict[str, object]:
        slot = self._slot(round_id)
        with slot.lock:
            session = self._require(round_id)
            slot.last_seen = self._clock()
            return RoundPayload.from_session(round_id, session).to_dict()

    def answer(self, round_id: str, payload: AnswerRequest) -> dict[str, object]:
        slot = self._slot(round_id)
        with slot.lock:
            session = self._require(round_id)
            slot.last_seen = self._clock()
            try:
                turn = session.answer(payload.answer)
            except InvalidPrecondition as exc:
                logger.exception("round protocol violation for %s", round_id, extra={"client_id": round_id})
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            if turn.final:
                self._drop(round_id)
            else:
                session.next_quiz()
            round_payload = RoundPayload.from_session(round_id, session)
        return TurnPayload.build(turn, events_for(turn), round_payload).to_dict()

    def abandon(self, round_id: str) -> dict[str, object]:
        slot = self._slot(round_id)
        with slot.lock:
            session = self._drop(round_id)
            if session is None:
                raise HTTPException(status_code=404, detail="round not found")
            return RoundPayload.from_session(round_id, session).to_dict()


def create_play_router(
    host: SessionHost,
    catalog: CatalogStore,
    *,
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    clock: Callable[[], float] = time.monotonic,
) -> APIRouter:
    controller = PlayController(host, catalog, idle_timeout=idle_timeout, max_rounds=max_rounds, clock=clock)
    router = APIRouter(prefix="/api/v1", tags=["play"])

    @router.get("/quizzes")
    async def list_quizzes() -> JSONResponse:
        return controller.json_response(await run_blocking(controller.list_quizzes))

    @router.post("/rounds")
    async def start_round() -> JSONResponse:
        return controller.json_response(await run_blocking(controller.start_round), status_code=201)

    @router.get("/rounds/{round_id}")
    async def get_round(round_id: str) -> JSONResponse:
        return controller.json_response(await run_blocking(controller.get_round, round_id))

    @router.post("/rounds/{round_id}/answer")
    async def answer(round_id: str, body: AnswerRequest) -> JSONResponse:
        return controller.json_response(await run_blocking(controller.answer, round_id, body))

    @router.delete("/rounds/{round_id}")
    async def abandon(round_id: str) -> JSONResponse:
        return controller.json_response(await run_blocking(controller.abandon, round_id))

    return router
