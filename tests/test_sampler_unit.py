from __future__ import annotations

import random
from collections import Counter
from itertools import permutations

import pytest

from quizplay.core.errors import InvalidPrecondition
from quizplay.core.sampler import SessionSampler


def test_draws_are_a_permutation_of_the_pool():
    ids = [3, 7, 11, 19, 23]
    sampler = SessionSampler(ids, random.Random(42))
    drawn = [sampler.draw() for _ in ids]
    assert sorted(drawn) == sorted(ids)
    assert len(set(drawn)) == len(ids)
    assert sampler.exhausted


def test_len_shrinks_by_one_per_draw():
    sampler = SessionSampler(range(4), random.Random(0))
    for expected in (3, 2, 1, 0):
        sampler.draw()
        assert len(sampler) == expected


def test_single_element_pool_is_deterministic():
    for seed in range(10):
        assert SessionSampler([99], random.Random(seed)).draw() == 99


def test_empty_pool_is_rejected():
    with pytest.raises(ValueError):
        SessionSampler([], random.Random(0))


def test_drawing_past_exhaustion_fails():
    sampler = SessionSampler([1], random.Random(0))
    sampler.draw()
    with pytest.raises(InvalidPrecondition):
        sampler.draw()


def test_duplicate_ids_collapse():
    sampler = SessionSampler([5, 5, 6], random.Random(1))
    assert len(sampler) == 2


def test_orderings_are_roughly_uniform():
    rng = random.Random(2024)
    counts: Counter[tuple[int, ...]] = Counter()
    trials = 6000
    for _ in range(trials):
        sampler = SessionSampler([1, 2, 3], rng)
        counts[tuple(sampler.draw() for _ in range(3))] += 1
    assert set(counts) == set(permutations([1, 2, 3]))
    expected = trials / 6
    for seen in counts.values():
        assert abs(seen - expected) < expected * 0.15
