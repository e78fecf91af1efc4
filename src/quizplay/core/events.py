"""Per-turn events produced by a round.

Events are plain data; turning them into coloured text is the presenter's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models import TurnOutcome


@dataclass(frozen=True, slots=True)
class CorrectAnswer:
    score_so_far: int


@dataclass(frozen=True, slots=True)
class IncorrectAnswer:
    final_score: int


@dataclass(frozen=True, slots=True)
class RoundWon:
    final_score: int


RoundEvent = Union[CorrectAnswer, IncorrectAnswer, RoundWon]


def events_for(turn: TurnOutcome) -> list[RoundEvent]:
    if not turn.correct:
        return [IncorrectAnswer(final_score=turn.score)]
    events: list[RoundEvent] = [CorrectAnswer(score_so_far=turn.score)]
    if turn.final:
        events.append(RoundWon(final_score=turn.score))
    return events
