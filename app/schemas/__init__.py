from app.schemas.scenario import (
    ActionType,
    Channel,
    Legitimacy,
    OutcomeType,
    Scenario,
    ScenarioDraft,
    ScenarioOutSchema,
    ScenarioRevealSchema,
)
from app.schemas.shift import Decision, DecisionResultSchema, DecisionSubmitSchema, ShiftOutSchema, ShiftState
from app.schemas.stats import BadgeSchema, MissedCueSchema, ProgressOutSchema, ProgressState, ShiftCompletionSchema

__all__ = [
    "ActionType",
    "BadgeSchema",
    "Channel",
    "Decision",
    "DecisionResultSchema",
    "DecisionSubmitSchema",
    "Legitimacy",
    "MissedCueSchema",
    "OutcomeType",
    "ProgressOutSchema",
    "ProgressState",
    "Scenario",
    "ScenarioDraft",
    "ScenarioOutSchema",
    "ScenarioRevealSchema",
    "ShiftCompletionSchema",
    "ShiftOutSchema",
    "ShiftState",
]
