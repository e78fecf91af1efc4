from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from ...core.engine import GameSession
from ...core.events import CorrectAnswer, IncorrectAnswer, RoundEvent, RoundWon
from ...core.models import Quiz, TurnOutcome

__all__ = [
    "AnswerRequest",
    "EventPayload",
    "QuestionPayload",
    "QuizSummaryPayload",
    "RoundPayload",
    "TurnPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class QuizSummaryPayload(_APIModel):
    id: int
    question: str

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> QuizSummaryPayload:
        return cls(id=quiz.id, question=quiz.question)


class QuestionPayload(_APIModel):
    quiz_id: int
    prompt: str


class EventPayload(_APIModel):
    kind: Literal["correct_answer", "incorrect_answer", "round_won"]
    score: int

    @classmethod
    def from_event(cls, event: RoundEvent) -> EventPayload:
        if isinstance(event, CorrectAnswer):
            return cls(kind="correct_answer", score=event.score_so_far)
        if isinstance(event, IncorrectAnswer):
            return cls(kind="incorrect_answer", score=event.final_score)
        if isinstance(event, RoundWon):
            return cls(kind="round_won", score=event.final_score)
        raise TypeError(f"unknown round event {event!r}")


class RoundPayload(_APIModel):
    round_id: str
    outcome: str
    score: int
    total_questions: int
    remaining: int
    question: QuestionPayload | None = None

    @classmethod
    def from_session(cls, round_id: str, session: GameSession) -> RoundPayload:
        pending = session.pending
        return cls(
            round_id=round_id,
            outcome=session.outcome.value,
            score=session.score,
            total_questions=session.total_questions,
            remaining=session.remaining,
            question=QuestionPayload(quiz_id=pending.id, prompt=pending.question) if pending else None,
        )


class TurnPayload(_APIModel):
    verdict: str
    final: bool
    score: int
    events: list[EventPayload]
    round: RoundPayload

    @classmethod
    def build(cls, turn: TurnOutcome, events: list[RoundEvent], round_payload: RoundPayload) -> TurnPayload:
        return cls(
            verdict=turn.verdict.value,
            final=turn.final,
            score=turn.score,
            events=[EventPayload.from_event(event) for event in events],
            round=round_payload,
        )


class AnswerRequest(BaseModel):
    answer: str
