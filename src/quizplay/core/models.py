from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Quiz:
    id: int
    question: str
    answer: str


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class Verdict(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class TurnOutcome:
    """Result of one ask/check cycle within a round."""

    verdict: Verdict
    final: bool
    score: int
    quiz: Quiz
    # Trimmed response exactly as it was compared against ``quiz.answer``.
    response: str

    @property
    def correct(self) -> bool:
        return self.verdict is Verdict.CORRECT
