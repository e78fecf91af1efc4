"""Persistent quiz catalog backed by a single JSON document."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..core.errors import InvalidQuiz, QuizNotFound
from ..core.models import Quiz

__all__ = ["CatalogStore", "QuizDraft", "default_catalog_path"]

logger = logging.getLogger(__name__)

_SEED: tuple[tuple[str, str], ...] = (
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
)


def default_catalog_path() -> Path:
    return Path.cwd() / "quizzes.json"


class QuizDraft(BaseModel):
    """Validated question/answer pair before it gets an id."""

    model_config = ConfigDict(str_strip_whitespace=True)

    question: str
    answer: str

    @field_validator("question", "answer")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value


def _draft(question: str, answer: str) -> QuizDraft:
    try:
        return QuizDraft(question=question, answer=answer)
    except ValidationError as exc:
        messages = []
        for err in exc.errors():
            where = ".".join(str(part) for part in err["loc"]) or "quiz"
            messages.append(f"{where}: {err['msg']}")
        raise InvalidQuiz(messages) from None


class CatalogStore:
    """CRUD over the quiz catalog.

    ``path=None`` keeps the catalog in memory only. Otherwise every mutation is
    written through to ``path`` (atomically, via a temporary sibling file).
    """

    def __init__(self, path: Path | None = None, *, seed: bool = True) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._quizzes: dict[int, Quiz] = {}
        self._next_id = 1
        if path is not None and path.exists():
            self._load(path)
        elif seed:
            for question, answer in _SEED:
                self._insert(question, answer)
            self._flush()

    @property
    def path(self) -> Path | None:
        return self._path

    def _load(self, path: Path) -> None:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        if not isinstance(payload, dict) or not isinstance(payload.get("quizzes"), list):
            raise ValueError(f"Invalid catalog payload in {path}")
        for raw in payload["quizzes"]:
            quiz = Quiz(id=int(raw["id"]), question=str(raw["question"]), answer=str(raw["answer"]))
            self._quizzes[quiz.id] = quiz
        highest = max(self._quizzes, default=0)
        self._next_id = max(int(payload.get("next_id", 1)), highest + 1)
        logger.debug("catalog loaded from %s (%d quizzes)", path, len(self._quizzes), extra={"path": str(path), "quizzes": len(self._quizzes)})

    def _flush(self) -> None:
        if self._path is None:
            return
        payload = {
            "next_id": self._next_id,
            "quizzes": [
                {"id": quiz.id, "question": quiz.question, "answer": quiz.answer}
                for quiz in sorted(self._quizzes.values(), key=lambda q: q.id)
            ],
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path)

    def _insert(self, question: str, answer: str) -> Quiz:
        draft = _draft(question, answer)
        quiz = Quiz(id=self._next_id, question=draft.question, answer=draft.answer)
        self._quizzes[quiz.id] = quiz
        self._next_id += 1
        return quiz

    # ---------------------------------------------------------------- queries
    def list_all(self) -> list[Quiz]:
        with self._lock:
            return sorted(self._quizzes.values(), key=lambda q: q.id)

    def get_by_id(self, quiz_id: int) -> Quiz:
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFound(quiz_id)
        return quiz

    def count(self) -> int:
        with self._lock:
            return len(self._quizzes)

    # -------------------------------------------------------------- mutations
    def create(self, question: str, answer: str) -> Quiz:
        with self._lock:
            quiz = self._insert(question, answer)
            self._flush()
        logger.info("quiz %d created", quiz.id, extra={"quiz_id": quiz.id})
        return quiz

    def update(self, quiz_id: int, question: str, answer: str) -> Quiz:
        draft = _draft(question, answer)
        with self._lock:
            if quiz_id not in self._quizzes:
                raise QuizNotFound(quiz_id)
            quiz = Quiz(id=quiz_id, question=draft.question, answer=draft.answer)
            self._quizzes[quiz_id] = quiz
            self._flush()
        logger.info("quiz %d updated", quiz_id, extra={"quiz_id": quiz_id})
        return quiz

    def delete(self, quiz_id: int) -> Quiz:
        with self._lock:
            quiz = self._quizzes.pop(quiz_id, None)
            if quiz is None:
                raise QuizNotFound(quiz_id)
            self._flush()
        logger.info("quiz %d deleted", quiz_id, extra={"quiz_id": quiz_id})
        return quiz
