"""Adaptive scenario selection: difficulty ceiling from learner performance, then a mixed-difficulty draw."""
import math
import random

from loguru import logger

from app.schemas.scenario import Scenario
from app.services.difficulty import MAX_DIFFICULTY

CORE_SHARE = 0.8  # share of the batch drawn at or below the ceiling

# (min shifts completed, min accuracy, ceiling); highest threshold first
CEILING_POLICY = (
    (11, 0.75, 5),
    (6, 0.70, 4),
    (3, 0.60, 3),
)
DEFAULT_CEILING = 2


def difficulty_ceiling(accuracy: float, shifts_completed: int) -> int:
    for min_shifts, min_accuracy, ceiling in CEILING_POLICY:
        if shifts_completed >= min_shifts and accuracy >= min_accuracy:
            return ceiling
    return DEFAULT_CEILING


def _draw(candidates: list[Scenario], count: int, rng: random.Random) -> list[Scenario]:
    if count <= 0 or not candidates:
        return []
    return rng.sample(candidates, min(count, len(candidates)))


def select_batch(
    pool,
    size: int,
    accuracy: float,
    shifts_completed: int,
    rng: random.Random | None = None,
) -> list[Scenario]:
    """Pick up to `size` distinct starting scenarios for a new shift.

    Most of the batch is drawn at or below the learner's difficulty ceiling and
    the remainder one level above it. Chain follow-ups are never drawn. When the
    pool cannot fill the batch a shorter list is returned.
    """
    rng = rng or random.Random()
    if size <= 0:
        return []

    ceiling = difficulty_ceiling(accuracy, shifts_completed)
    stretch_level = min(ceiling + 1, MAX_DIFFICULTY)

    starting, seen = [], set()
    for scenario in pool:
        if scenario.is_chain_start and scenario.id not in seen:
            seen.add(scenario.id)
            starting.append(scenario)
    core_pool = [s for s in starting if s.difficulty_score <= ceiling]
    stretch_pool = [s for s in starting if s.difficulty_score == stretch_level]

    core_count = math.ceil(size * CORE_SHARE)
    chosen = _draw(core_pool, core_count, rng)
    chosen_ids = {s.id for s in chosen}

    stretch = _draw([s for s in stretch_pool if s.id not in chosen_ids], size - core_count, rng)
    chosen.extend(stretch)
    chosen_ids.update(s.id for s in stretch)

    if len(chosen) < size:
        backfill = _draw([s for s in core_pool if s.id not in chosen_ids], size - len(chosen), rng)
        chosen.extend(backfill)

    rng.shuffle(chosen)

    if len(chosen) < size:
        logger.warning(
            "Scenario pool short: {} of {} scenarios at ceiling {} (stretch level {})",
            len(chosen), size, ceiling, stretch_level,
        )
    else:
        logger.debug("Selected {} scenarios at ceiling {} ({} stretch)", len(chosen), ceiling, len(stretch))
    return chosen
