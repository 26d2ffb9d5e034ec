"""Pydantic schemas for learner progress and results."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.shift import ShiftOutSchema


class ProgressState(BaseModel):
    """Cumulative, ever-growing performance record of one learner."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    total_shifts: int = 0
    total_decisions: int = 0
    correct_decisions: int = 0
    false_positives: int = 0
    compromised: int = 0
    malicious_seen: int = 0
    malicious_handled: int = 0
    legitimate_seen: int = 0
    legitimate_handled: int = 0
    reports_made: int = 0
    correct_reports: int = 0
    high_confidence_errors: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_score: int = 0
    missed_cues: dict[str, int] = Field(default_factory=dict)
    earned_badges: list[str] = Field(default_factory=list)
    last_played_at: datetime | None = None
    version: int = 0  # 0 until first persisted

    @property
    def accuracy(self) -> float:
        if not self.total_decisions:
            return 0.0
        return self.correct_decisions / self.total_decisions


class MissedCueSchema(BaseModel):
    cue: str
    count: int


class BadgeSchema(BaseModel):
    id: str
    name: str
    description: str
    requirement: int
    progress: int
    earned: bool


class ProgressOutSchema(BaseModel):
    user_id: str
    total_shifts: int
    total_decisions: int
    correct_decisions: int
    accuracy: float
    false_positives: int
    compromised: int
    high_confidence_errors: int
    current_streak: int
    longest_streak: int
    total_score: int
    difficulty_ceiling: int
    top_missed_cues: list[MissedCueSchema]
    badges: list[BadgeSchema]


class ShiftCompletionSchema(BaseModel):
    shift: ShiftOutSchema
    accuracy: float
    is_perfect: bool
    new_badges: list[str] = Field(default_factory=list)


class ErrorSchema(BaseModel):
    error: str
    field: str | None = None
    message: str
