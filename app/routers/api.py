"""API routes: JSON for shifts, decisions, progress and scenarios."""
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from app.core.errors import UnknownSession
from app.db.session import get_db
from app.repositories.sql import SqlTrainingStore
from app.schemas.scenario import Scenario, ScenarioOutSchema, ScenarioRevealSchema
from app.schemas.shift import DecisionResultSchema, DecisionSubmitSchema, ShiftOutSchema, ShiftState
from app.schemas.stats import (
    BadgeSchema,
    MissedCueSchema,
    ProgressOutSchema,
    ProgressState,
    ShiftCompletionSchema,
)
from app.services.progress import BADGES, badge_progress, top_missed_cues
from app.services.selector import difficulty_ceiling
from app.services.training import TrainingService

router = APIRouter(prefix="/api", tags=["api"])


def get_training_service(db: Annotated[Session, Depends(get_db)]) -> TrainingService:
    return TrainingService(SqlTrainingStore(db))


def get_learner_id(x_learner_id: Annotated[str, Header()]) -> str:
    """Learner identity comes from the caller; authentication lives outside this service."""
    return x_learner_id.strip()


Service = Annotated[TrainingService, Depends(get_training_service)]
LearnerId = Annotated[str, Depends(get_learner_id)]


def _owned_shift(service: TrainingService, shift_id: str, learner_id: str) -> ShiftState:
    shift = service.get_shift(shift_id)
    if shift.user_id != learner_id:
        # don't reveal other learners' shifts
        raise UnknownSession(shift_id)
    return shift


def _scenario_out(scenario: Scenario) -> ScenarioOutSchema:
    return ScenarioOutSchema.model_validate(scenario, from_attributes=True)


def _shift_out(shift: ShiftState, scenarios: list[Scenario] | None = None) -> ShiftOutSchema:
    return ShiftOutSchema(
        **shift.model_dump(exclude={"version"}),
        verifications_remaining=shift.verifications_remaining,
        scenarios=[_scenario_out(s) for s in scenarios or []],
    )


def _progress_out(progress: ProgressState) -> ProgressOutSchema:
    counters = badge_progress(progress)
    return ProgressOutSchema(
        user_id=progress.user_id,
        total_shifts=progress.total_shifts,
        total_decisions=progress.total_decisions,
        correct_decisions=progress.correct_decisions,
        accuracy=round(progress.accuracy, 3),
        false_positives=progress.false_positives,
        compromised=progress.compromised,
        high_confidence_errors=progress.high_confidence_errors,
        current_streak=progress.current_streak,
        longest_streak=progress.longest_streak,
        total_score=progress.total_score,
        difficulty_ceiling=difficulty_ceiling(progress.accuracy, progress.total_shifts),
        top_missed_cues=[MissedCueSchema(cue=c, count=n) for c, n in top_missed_cues(progress)],
        badges=[
            BadgeSchema(
                id=badge.id,
                name=badge.name,
                description=badge.description,
                requirement=badge.requirement,
                progress=counters[badge.id],
                earned=badge.id in progress.earned_badges,
            )
            for badge in BADGES.values()
        ],
    )


@router.get("/progress", response_model=ProgressOutSchema)
def get_progress(service: Service, learner_id: LearnerId):
    """Cumulative stats, badge progress and most-missed cues for the learner."""
    return _progress_out(service.get_progress(learner_id))


@router.post("/shifts", response_model=ShiftOutSchema, status_code=201)
def start_shift(service: Service, learner_id: LearnerId):
    """Start a shift with scenarios picked for the learner's level."""
    shift = service.start_shift(learner_id)
    return _shift_out(shift, service.get_shift_scenarios(shift.id))


@router.get("/shifts/{shift_id}", response_model=ShiftOutSchema)
def get_shift(shift_id: str, service: Service, learner_id: LearnerId):
    shift = _owned_shift(service, shift_id, learner_id)
    return _shift_out(shift, service.get_shift_scenarios(shift_id))


@router.post("/shifts/{shift_id}/decisions", response_model=DecisionResultSchema)
def submit_decision(
    shift_id: str,
    body: DecisionSubmitSchema,
    service: Service,
    learner_id: LearnerId,
    idempotency_key: Annotated[str | None, Header()] = None,
):
    """Submit an action on one scenario; returns outcome, points and updated shift."""
    _owned_shift(service, shift_id, learner_id)
    result = service.submit_decision(
        shift_id,
        body.scenario_id,
        body.action,
        body.confidence,
        idempotency_key=idempotency_key,
    )
    return DecisionResultSchema(
        decision_id=result.decision.id,
        outcome=result.decision.outcome,
        points_earned=result.decision.points_earned,
        is_correct=result.is_correct,
        replayed=result.replayed,
        new_badges=result.new_badges,
        injected_scenario=_scenario_out(result.injected_scenario) if result.injected_scenario else None,
        scenario=ScenarioRevealSchema.model_validate(result.scenario, from_attributes=True),
        shift=_shift_out(result.shift),
    )


@router.post("/shifts/{shift_id}/complete", response_model=ShiftCompletionSchema)
def complete_shift(shift_id: str, service: Service, learner_id: LearnerId):
    _owned_shift(service, shift_id, learner_id)
    completion = service.complete_shift(shift_id)
    return ShiftCompletionSchema(
        shift=_shift_out(completion.shift),
        accuracy=round(completion.shift.accuracy, 3),
        is_perfect=completion.shift.is_perfect,
        new_badges=completion.new_badges,
    )


@router.get("/scenarios/{scenario_id}", response_model=ScenarioOutSchema)
def get_scenario(scenario_id: str, service: Service):
    """Get one scenario by ID, without its ground truth."""
    return _scenario_out(service.get_scenario(scenario_id))
