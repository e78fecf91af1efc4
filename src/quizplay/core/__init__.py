"""Transport-agnostic quiz primitives: models, sampler and the game engine."""

from .engine import GameSession, SessionState
from .errors import (
    ChannelClosed,
    EmptyCatalog,
    InvalidPrecondition,
    InvalidQuiz,
    InvalidQuizId,
    QuizNotFound,
    QuizPlayError,
)
from .events import CorrectAnswer, IncorrectAnswer, RoundWon, events_for
from .models import Outcome, Quiz, TurnOutcome, Verdict
from .sampler import SessionSampler

__all__ = [
    "ChannelClosed",
    "CorrectAnswer",
    "EmptyCatalog",
    "GameSession",
    "IncorrectAnswer",
    "InvalidPrecondition",
    "InvalidQuiz",
    "InvalidQuizId",
    "Outcome",
    "Quiz",
    "QuizNotFound",
    "QuizPlayError",
    "RoundWon",
    "SessionSampler",
    "SessionState",
    "TurnOutcome",
    "Verdict",
    "events_for",
]
