"""
Pytest configuration and shared helpers.
"""
import itertools

from app.schemas.scenario import Scenario, ScenarioDraft
from app.services.difficulty import ingest_scenario

_ids = itertools.count(1)


def make_scenario(**overrides) -> Scenario:
    """Build a scenario; difficulty is computed from cues unless given explicitly."""
    data = {
        "id": f"sc-{next(_ids)}",
        "channel": "email",
        "sender_name": "Sender",
        "body": "Body",
        "legitimacy": "malicious",
        "correct_action": "report",
        "cues": (),
    }
    data.update(overrides)
    difficulty = data.pop("difficulty_score", None)
    if difficulty is None:
        return ingest_scenario(ScenarioDraft(**data))
    return Scenario(**data, difficulty_score=difficulty)
