"""Pydantic schemas for shifts (training sessions) and decisions."""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.scenario import ActionType, OutcomeType, ScenarioOutSchema, ScenarioRevealSchema, new_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ShiftState(BaseModel):
    """One batch of scenarios assigned to a learner, with a verification budget and running totals."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=new_id)
    user_id: str
    scenario_ids: list[str] = Field(default_factory=list)
    verification_budget: int = Field(default=3, ge=0)
    verifications_used: int = Field(default=0, ge=0)
    score: int = 0
    correct_decisions: int = 0
    false_positives: int = 0
    compromised: int = 0
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None
    version: int = 1

    @property
    def verifications_remaining(self) -> int:
        return max(0, self.verification_budget - self.verifications_used)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def accuracy(self) -> float:
        if not self.scenario_ids:
            return 0.0
        return self.correct_decisions / len(self.scenario_ids)

    @property
    def is_perfect(self) -> bool:
        return (
            self.correct_decisions == len(self.scenario_ids)
            and self.compromised == 0
            and self.false_positives == 0
        )


class Decision(BaseModel):
    """One learner action against one scenario within one shift. Immutable once recorded."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(default_factory=new_id)
    shift_id: str
    scenario_id: str
    user_id: str
    action: ActionType
    confidence: int = Field(ge=0, le=100)
    outcome: OutcomeType
    points_earned: int
    used_verification: bool = False
    idempotency_key: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class DecisionSubmitSchema(BaseModel):
    scenario_id: str
    action: str  # validated by the engine so the error names the field
    confidence: int = 50


class ShiftOutSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    scenario_ids: list[str]
    verification_budget: int
    verifications_used: int
    verifications_remaining: int
    score: int
    correct_decisions: int
    false_positives: int
    compromised: int
    started_at: datetime
    completed_at: datetime | None = None
    scenarios: list[ScenarioOutSchema] = Field(default_factory=list)


class DecisionResultSchema(BaseModel):
    decision_id: str
    outcome: OutcomeType
    points_earned: int
    is_correct: bool
    replayed: bool = False
    new_badges: list[str] = Field(default_factory=list)
    injected_scenario: ScenarioOutSchema | None = None
    scenario: ScenarioRevealSchema
    shift: ShiftOutSchema
