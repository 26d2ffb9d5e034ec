import random

import pytest

from app.services.selector import difficulty_ceiling, select_batch

from tests.conftest import make_scenario


@pytest.mark.parametrize(
    "accuracy, shifts, ceiling",
    [
        (0.0, 0, 2),
        (1.0, 2, 2),
        (0.6, 3, 3),
        (0.59, 3, 2),
        (0.7, 6, 4),
        (0.69, 6, 3),
        (0.75, 11, 5),
        (0.74, 11, 4),
        (0.8, 12, 5),
    ],
)
def test_difficulty_ceiling(accuracy, shifts, ceiling):
    assert difficulty_ceiling(accuracy, shifts) == ceiling


def make_pool(per_level=5):
    return [make_scenario(difficulty_score=level) for level in range(1, 6) for _ in range(per_level)]


def test_experienced_learner_gets_a_full_mixed_batch():
    batch = select_batch(make_pool(), 10, accuracy=0.8, shifts_completed=12, rng=random.Random(7))
    assert len(batch) == 10
    assert len({s.id for s in batch}) == 10
    assert sum(1 for s in batch if s.difficulty_score == 5) >= 2


def test_beginner_gets_core_and_one_level_of_stretch():
    batch = select_batch(make_pool(), 10, accuracy=0.5, shifts_completed=0, rng=random.Random(3))
    levels = [s.difficulty_score for s in batch]
    assert len(batch) == 10
    assert max(levels) == 3
    assert levels.count(3) == 2


def test_missing_stretch_level_is_backfilled_from_core():
    pool = [make_scenario(difficulty_score=level) for level in (1, 2) for _ in range(6)]
    batch = select_batch(pool, 10, accuracy=0.5, shifts_completed=0, rng=random.Random(1))
    assert len(batch) == 10
    assert all(s.difficulty_score <= 2 for s in batch)


def test_short_pool_returns_short_batch():
    pool = [make_scenario(difficulty_score=1) for _ in range(3)] + [make_scenario(difficulty_score=5)]
    batch = select_batch(pool, 10, accuracy=0.0, shifts_completed=0, rng=random.Random(1))
    assert len(batch) == 3
    assert all(s.difficulty_score == 1 for s in batch)


def test_chain_follow_ups_are_never_selected():
    start = make_scenario(difficulty_score=1, chain_id="c1", chain_order=1)
    follow = make_scenario(difficulty_score=1, chain_id="c1", chain_order=2, previous_action="proceed")
    batch = select_batch([start, follow], 5, accuracy=0.0, shifts_completed=0, rng=random.Random(1))
    assert [s.id for s in batch] == [start.id]


def test_duplicate_pool_entries_are_drawn_once():
    scenario = make_scenario(difficulty_score=1)
    batch = select_batch([scenario, scenario, scenario], 5, accuracy=0.0, shifts_completed=0, rng=random.Random(1))
    assert len(batch) == 1


def test_zero_size_batch():
    assert select_batch(make_pool(), 0, accuracy=0.9, shifts_completed=20) == []


def test_same_seed_same_batch():
    pool = make_pool()
    first = select_batch(pool, 10, 0.8, 12, rng=random.Random(42))
    second = select_batch(pool, 10, 0.8, 12, rng=random.Random(42))
    assert [s.id for s in first] == [s.id for s in second]
