"""Difficulty scorer: rates how hard a scenario is to classify, 1 (easiest) to 5 (hardest)."""
from app.schemas.scenario import Scenario, ScenarioDraft
from app.services.cues import OBVIOUS, SUBTLE, cue_weight, lookup_premise_factor

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5

DIFFICULTY_LABELS = {
    1: "Very Easy",
    2: "Easy",
    3: "Moderate",
    4: "Hard",
    5: "Very Hard",
}


def _base_difficulty(cues) -> int:
    if not cues:
        # nothing to detect
        return 1

    weights = [cue_weight(c) for c in cues]
    obvious = sum(1 for w in weights if w == OBVIOUS)
    subtle = sum(1 for w in weights if w == SUBTLE)

    if obvious >= 3:
        return 1
    if obvious >= 2 and subtle == 0:
        return 2
    # ahead of the two-subtle rule: ["look-alike domain", "spoofed internal name"] must rate 5, not 4
    if obvious == 0 and subtle > 0:
        return 5
    if subtle >= 2:
        return 4

    avg = sum(weights) / len(weights)
    if avg <= 1.5:
        return 2
    if avg <= 2:
        return 3
    return 4


def premise_bonus(premise_factors) -> int:
    """Sum of weights of recognized premise-alignment factors; unknown factors add nothing."""
    total = 0
    for name in premise_factors:
        factor = lookup_premise_factor(name)
        if factor is not None:
            total += factor.weight
    return total


def score_difficulty(cues, premise_factors=()) -> int:
    """Score a cue list (plus optional premise factors) into a difficulty of 1-5.

    Duplicate cues are counted every time they appear. The result depends only
    on the arguments and the static cue catalog.
    """
    cues = list(cues)
    if not cues:
        return MIN_DIFFICULTY
    base = _base_difficulty(cues)
    return min(MAX_DIFFICULTY, base + premise_bonus(premise_factors) // 2)


def difficulty_label(score: int) -> str:
    return DIFFICULTY_LABELS.get(score, "Unknown")


def ingest_scenario(draft: ScenarioDraft) -> Scenario:
    """Freeze an authored scenario, computing its difficulty score once."""
    data = draft.model_dump()
    data.pop("difficulty_score", None)
    return Scenario(**data, difficulty_score=score_difficulty(draft.cues, draft.premise_factors))
