"""Exception hierarchy shared by the engine, the catalog and the transports."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "ChannelClosed",
    "EmptyCatalog",
    "InvalidPrecondition",
    "InvalidQuiz",
    "InvalidQuizId",
    "QuizNotFound",
    "QuizPlayError",
]


class QuizPlayError(Exception):
    """Base class for errors that are reported to the user, not crashed on."""


class EmptyCatalog(QuizPlayError):
    def __init__(self, message: str = "No questions available.") -> None:
        super().__init__(message)


class InvalidPrecondition(QuizPlayError):
    """A caller drove a session out of protocol (e.g. advancing a finished round)."""


class QuizNotFound(QuizPlayError, LookupError):
    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"No quiz exists with id={quiz_id}.")
        self.quiz_id = quiz_id


class InvalidQuizId(QuizPlayError, ValueError):
    pass


class InvalidQuiz(QuizPlayError, ValueError):
    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("The quiz is invalid: " + "; ".join(errors))
        self.errors = list(errors)


class ChannelClosed(QuizPlayError):
    """The user's side of a prompt channel went away (EOF or disconnect)."""

    def __init__(self, message: str = "channel closed") -> None:
        super().__init__(message)
