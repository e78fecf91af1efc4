from __future__ import annotations

import asyncio
import random

import pytest

from quizplay.core.engine import GameSession, format_prompt
from quizplay.core.errors import ChannelClosed, EmptyCatalog, InvalidPrecondition
from quizplay.core.events import CorrectAnswer, IncorrectAnswer, RoundWon, events_for
from quizplay.core.models import Outcome, Quiz, Verdict

from support import ARITHMETIC, ResponderChannel, ScriptedChannel, answer_key, question_of


def _catalog(n: int) -> list[Quiz]:
    return [Quiz(i, f"question {i}", f"answer {i}") for i in range(1, n + 1)]


def test_start_on_empty_catalog_fails():
    with pytest.raises(EmptyCatalog):
        GameSession.start([])


def test_start_initialises_state():
    session = GameSession.start(_catalog(3), rng=random.Random(1))
    state = session.snapshot()
    assert state.remaining_ids == {1, 2, 3}
    assert state.total_questions == 3
    assert state.score == 0
    assert state.order == []
    assert session.outcome is Outcome.IN_PROGRESS


@pytest.mark.parametrize("n", [1, 2, 5, 9])
def test_all_correct_round_is_won_after_n_turns(n: int):
    quizzes = _catalog(n)
    session = GameSession.start(quizzes, rng=random.Random(n))
    turns = []
    while session.outcome is Outcome.IN_PROGRESS:
        quiz = session.next_quiz()
        turns.append(session.answer(quiz.answer))
    assert len(turns) == n
    assert session.score == n
    assert session.outcome is Outcome.WON
    assert [t.final for t in turns] == [False] * (n - 1) + [True]
    assert sorted(session.order) == [q.id for q in quizzes]


@pytest.mark.parametrize("n", [1, 2, 4, 6])
def test_first_wrong_answer_loses_with_prior_score(n: int):
    for k in range(1, n + 1):
        session = GameSession.start(_catalog(n), rng=random.Random(k * 31 + n))
        for _ in range(k - 1):
            quiz = session.next_quiz()
            assert session.answer(quiz.answer).verdict is Verdict.CORRECT
        quiz = session.next_quiz()
        turn = session.answer(quiz.answer + " nope")
        assert turn.verdict is Verdict.INCORRECT
        assert turn.final
        assert session.outcome is Outcome.LOST
        assert session.score == k - 1
        with pytest.raises(InvalidPrecondition):
            session.next_quiz()


def test_score_tracks_remaining_pool():
    session = GameSession.start(_catalog(4), rng=random.Random(3))
    while session.outcome is Outcome.IN_PROGRESS:
        quiz = session.next_quiz()
        session.answer(quiz.answer)
        assert session.score == session.total_questions - session.remaining


def test_comparison_is_exact_and_case_sensitive():
    session = GameSession.start([Quiz(1, "Capital of Italy", "Rome")], rng=random.Random(0))
    session.next_quiz()
    assert session.answer("rome").verdict is Verdict.INCORRECT


def test_surrounding_whitespace_is_ignored():
    session = GameSession.start([Quiz(1, "Capital of Italy", "Rome")], rng=random.Random(0))
    session.next_quiz()
    turn = session.answer("   Rome \t")
    assert turn.correct and turn.final
    assert turn.response == "Rome"
    assert session.outcome is Outcome.WON


def test_answer_without_outstanding_question_fails():
    session = GameSession.start(_catalog(2), rng=random.Random(0))
    with pytest.raises(InvalidPrecondition):
        session.answer("anything")


def test_second_draw_while_question_outstanding_fails():
    session = GameSession.start(_catalog(2), rng=random.Random(0))
    session.next_quiz()
    with pytest.raises(InvalidPrecondition):
        session.next_quiz()


def test_advance_after_win_fails():
    session = GameSession.start(ARITHMETIC, rng=random.Random(0))
    key = answer_key(ARITHMETIC)
    channel = ResponderChannel(lambda prompt: key[question_of(prompt)])

    async def scenario():
        while session.outcome is Outcome.IN_PROGRESS:
            await session.advance(channel)
        with pytest.raises(InvalidPrecondition):
            await session.advance(channel)

    asyncio.run(scenario())
    assert session.outcome is Outcome.WON


def test_snapshot_is_immune_to_catalog_edits():
    catalog = _catalog(2)
    session = GameSession.start(catalog, rng=random.Random(0))
    catalog.clear()
    catalog.append(Quiz(1, "question 1", "changed"))
    quiz = session.next_quiz()
    assert quiz.answer == f"answer {quiz.id}"


def test_prompt_is_question_followed_by_question_mark():
    assert format_prompt(Quiz(1, "2+2", "4")) == "2+2? "


def test_worked_example_win():
    session = GameSession.start(ARITHMETIC, rng=random.Random(5))
    replies = {"2+2": "4", "3+3": "6"}
    channel = ResponderChannel(lambda prompt: replies[question_of(prompt)])

    async def scenario():
        results = []
        while session.outcome is Outcome.IN_PROGRESS:
            results.append(await session.advance(channel))
        return results

    results = asyncio.run(scenario())
    assert [(r.verdict, r.score, r.final) for r in results] == [
        (Verdict.CORRECT, 1, False),
        (Verdict.CORRECT, 2, True),
    ]
    assert session.outcome is Outcome.WON
    assert events_for(results[-1]) == [CorrectAnswer(2), RoundWon(2)]


def test_worked_example_loss_on_second_question():
    session = GameSession.start(ARITHMETIC, rng=random.Random(5))
    first = session.next_quiz()
    first_turn = session.answer(first.answer)
    second = session.next_quiz()
    second_turn = session.answer("7" if second.answer == "6" else "5")
    assert (first_turn.verdict, first_turn.score, first_turn.final) == (Verdict.CORRECT, 1, False)
    assert (second_turn.verdict, second_turn.score, second_turn.final) == (Verdict.INCORRECT, 1, True)
    assert session.outcome is Outcome.LOST
    assert events_for(second_turn) == [IncorrectAnswer(1)]


def test_closed_channel_abandons_round_at_last_committed_state():
    session = GameSession.start(_catalog(3), rng=random.Random(9))
    first = session.next_quiz()
    session.answer(first.answer)
    channel = ScriptedChannel([])

    async def scenario():
        with pytest.raises(ChannelClosed):
            await session.advance(channel)

    asyncio.run(scenario())
    assert session.score == 1
    assert session.outcome is Outcome.IN_PROGRESS
    assert session.pending is not None
    with pytest.raises(InvalidPrecondition):
        session.next_quiz()

