"""Game session engine.

A :class:`GameSession` owns the state of exactly one round. The round is
driven from the outside, one turn per :meth:`GameSession.advance` call, so the
only suspension point is the prompt/response round trip with the user. The
synchronous :meth:`~GameSession.next_quiz` / :meth:`~GameSession.answer` pair
exposes the same transition for transports whose suspension happens between
requests.
"""

from __future__ import annotations

import random
import secrets
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from .errors import EmptyCatalog, InvalidPrecondition
from .interfaces import PromptChannel
from .models import Outcome, Quiz, TurnOutcome, Verdict
from .sampler import SessionSampler

__all__ = ["GameSession", "SessionState", "format_prompt"]


def format_prompt(quiz: Quiz) -> str:
    return f"{quiz.question}? "


@dataclass
class SessionState:
    remaining_ids: set[int]
    total_questions: int
    order: list[int] = field(default_factory=list)
    score: int = 0
    outcome: Outcome = Outcome.IN_PROGRESS


class GameSession:
    def __init__(self, snapshot: dict[int, Quiz], rng: random.Random) -> None:
        if not snapshot:
            raise EmptyCatalog()
        self._snapshot = snapshot
        self._sampler = SessionSampler(snapshot, rng)
        self._state = SessionState(remaining_ids=set(snapshot), total_questions=len(snapshot))
        self._pending: Quiz | None = None

    @classmethod
    def start(cls, quizzes: Iterable[Quiz], *, rng: random.Random | None = None) -> GameSession:
        """Copy ``quizzes`` into a private snapshot and open a round over it."""

        snapshot = {quiz.id: quiz for quiz in quizzes}
        if not snapshot:
            raise EmptyCatalog()
        if rng is None:
            rng = random.Random(secrets.randbits(32))
        return cls(snapshot, rng)

    # ------------------------------------------------------------------ views
    @property
    def outcome(self) -> Outcome:
        return self._state.outcome

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def total_questions(self) -> int:
        return self._state.total_questions

    @property
    def remaining(self) -> int:
        return len(self._state.remaining_ids)

    @property
    def order(self) -> tuple[int, ...]:
        return tuple(self._state.order)

    @property
    def pending(self) -> Quiz | None:
        return self._pending

    def snapshot(self) -> SessionState:
        state = self._state
        return replace(state, remaining_ids=set(state.remaining_ids), order=list(state.order))

    # ------------------------------------------------------------ transitions
    def next_quiz(self) -> Quiz:
        """Draw the next question of the round and mark it outstanding."""

        if self._state.outcome is not Outcome.IN_PROGRESS:
            raise InvalidPrecondition(f"round is already over ({self._state.outcome.value})")
        if self._pending is not None:
            raise InvalidPrecondition(f"question {self._pending.id} is still awaiting an answer")
        quiz_id = self._sampler.draw()
        self._state.order.append(quiz_id)
        self._pending = self._snapshot[quiz_id]
        return self._pending

    def answer(self, response: str) -> TurnOutcome:
        """Check ``response`` against the outstanding question and commit the turn."""

        quiz = self._pending
        if quiz is None:
            raise InvalidPrecondition("no question is awaiting an answer")
        self._pending = None
        given = response.strip()
        state = self._state
        if given == quiz.answer:
            state.score += 1
            state.remaining_ids.discard(quiz.id)
            if not state.remaining_ids:
                state.outcome = Outcome.WON
            return TurnOutcome(
                verdict=Verdict.CORRECT,
                final=state.outcome is Outcome.WON,
                score=state.score,
                quiz=quiz,
                response=given,
            )
        state.outcome = Outcome.LOST
        return TurnOutcome(verdict=Verdict.INCORRECT, final=True, score=state.score, quiz=quiz, response=given)

    async def advance(self, channel: PromptChannel) -> TurnOutcome:
        quiz = self.next_quiz()
        # If ask() raises, the question stays pending and the round is dead.
        response = await channel.ask(format_prompt(quiz))
        return self.answer(response)
