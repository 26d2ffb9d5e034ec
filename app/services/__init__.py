from app.services.difficulty import ingest_scenario, score_difficulty
from app.services.outcomes import classify
from app.services.progress import apply_decision, apply_shift_completion
from app.services.seeding import seed_scenarios
from app.services.selector import difficulty_ceiling, select_batch

__all__ = [
    "apply_decision",
    "apply_shift_completion",
    "classify",
    "difficulty_ceiling",
    "ingest_scenario",
    "score_difficulty",
    "seed_scenarios",
    "select_batch",
]
