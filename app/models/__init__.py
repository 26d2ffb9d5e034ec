from app.models.scenario import ScenarioRecord
from app.models.shift import ShiftRecord
from app.models.progress import ProgressRecord
from app.models.decision import DecisionRecord

__all__ = ["ScenarioRecord", "ShiftRecord", "ProgressRecord", "DecisionRecord"]
