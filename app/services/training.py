"""Training loop: start a shift, take decisions, complete the shift.

Every state change for a shift happens under that shift's lock, and every
progress change under the learner's lock (always acquired after the shift
lock). Writes are grouped in `store.atomic()` so a rejected or failed decision
leaves shift, progress and decision log untouched.
"""
import random
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import NamedTuple

from loguru import logger

from app.core.config import Settings, get_settings
from app.core.errors import (
    InsufficientPool,
    InvalidConfidence,
    ScenarioAlreadyDecided,
    ScenarioNotInShift,
    ShiftCompleted,
    UnknownScenario,
    UnknownSession,
    VerificationBudgetExhausted,
)
from app.repositories.base import TrainingStore
from app.schemas.scenario import ActionType, OutcomeType, Scenario
from app.schemas.shift import Decision, ShiftState
from app.schemas.stats import ProgressState
from app.services.chains import ChainStateMachine
from app.services.outcomes import OutcomeResult, classify, parse_action
from app.services.progress import apply_decision, apply_shift_completion
from app.services.selector import select_batch


class LockRegistry:
    """One re-entrant lock per key, kept only while someone holds or waits for it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}  # key -> [lock, holders and waiters]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: str):
        with self._guard:
            entry = self._locks.setdefault(key, [threading.RLock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


# Shared by every TrainingService in the process.
default_locks = LockRegistry()


class DecisionOutcome(NamedTuple):
    decision: Decision
    scenario: Scenario
    shift: ShiftState
    progress: ProgressState
    new_badges: list[str]
    injected_scenario: Scenario | None
    replayed: bool = False

    @property
    def is_correct(self) -> bool:
        return self.decision.action == self.scenario.correct_action


class ShiftCompletion(NamedTuple):
    shift: ShiftState
    progress: ProgressState
    new_badges: list[str]


def _shift_lock_key(shift_id: str) -> str:
    return f"shift:{shift_id}"


def _learner_lock_key(user_id: str) -> str:
    return f"learner:{user_id}"


def _progress_changes(progress: ProgressState) -> dict:
    return progress.model_dump(exclude={"user_id", "version"})


class TrainingService:
    def __init__(
        self,
        store: TrainingStore,
        settings: Settings | None = None,
        locks: LockRegistry | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.locks = locks or default_locks
        self.rng = rng or random.Random()
        self.chains = ChainStateMachine(store.scenarios)

    # ---------- reads ----------

    def get_progress(self, user_id: str) -> ProgressState:
        return self.store.progress.get(user_id) or ProgressState(user_id=user_id)

    def get_shift(self, shift_id: str) -> ShiftState:
        shift = self.store.shifts.get(shift_id)
        if shift is None:
            raise UnknownSession(shift_id)
        return shift

    def get_shift_scenarios(self, shift_id: str) -> list[Scenario]:
        """Scenarios of a shift in the order they were assigned."""
        shift = self.get_shift(shift_id)
        return self.store.scenarios.get_by_ids(shift.scenario_ids)

    def get_scenario(self, scenario_id: str) -> Scenario:
        scenario = self.store.scenarios.get_by_id(scenario_id)
        if scenario is None:
            raise UnknownScenario(scenario_id)
        return scenario

    # ---------- shift lifecycle ----------

    def start_shift(self, user_id: str, size: int | None = None) -> ShiftState:
        if size is None:
            size = self.settings.shift_size
        progress = self.get_progress(user_id)

        pool = self.store.scenarios.sample(lambda s: s.is_chain_start)
        batch = select_batch(pool, size, progress.accuracy, progress.total_shifts, rng=self.rng)
        if not batch:
            raise InsufficientPool(size, batch)

        shift = ShiftState(
            user_id=user_id,
            scenario_ids=[s.id for s in batch],
            verification_budget=self.settings.verification_budget,
        )
        with self.store.atomic():
            shift = self.store.shifts.create(shift)
        logger.info(
            "Started shift {} for learner {} with {} scenarios (accuracy {:.2f}, {} shifts completed)",
            shift.id, user_id, len(batch), progress.accuracy, progress.total_shifts,
        )
        return shift

    def submit_decision(
        self,
        shift_id: str,
        scenario_id: str,
        action,
        confidence: int,
        idempotency_key: str | None = None,
    ) -> DecisionOutcome:
        """Classify one action and apply it to the shift and the learner's progress."""
        with self.locks.hold(_shift_lock_key(shift_id)):
            shift = self.get_shift(shift_id)

            if idempotency_key:
                previous = self.store.decisions.find_by_idempotency_key(shift_id, idempotency_key)
                if previous is not None:
                    logger.info("Replaying decision {} for key {}", previous.id, idempotency_key)
                    return DecisionOutcome(
                        decision=previous,
                        scenario=self.get_scenario(previous.scenario_id),
                        shift=shift,
                        progress=self.get_progress(shift.user_id),
                        new_badges=[],
                        injected_scenario=None,
                        replayed=True,
                    )

            if shift.is_completed:
                raise ShiftCompleted(shift_id)
            action = parse_action(action)
            if not isinstance(confidence, int) or isinstance(confidence, bool) or not 0 <= confidence <= 100:
                raise InvalidConfidence(confidence)
            scenario = self.get_scenario(scenario_id)
            if scenario_id not in shift.scenario_ids:
                raise ScenarioNotInShift(shift_id, scenario_id)
            if any(d.scenario_id == scenario_id for d in self.store.decisions.for_shift(shift_id)):
                raise ScenarioAlreadyDecided(shift_id, scenario_id)

            used_verification = action == ActionType.VERIFY
            if used_verification and shift.verifications_used >= shift.verification_budget:
                logger.warning("Shift {}: verify rejected, budget {} exhausted", shift_id, shift.verification_budget)
                raise VerificationBudgetExhausted(shift_id, shift.verification_budget)

            result = classify(scenario, action, used_verification)

            with self.locks.hold(_learner_lock_key(shift.user_id)):
                return self._record_decision(
                    shift, scenario, action, confidence, result, used_verification, idempotency_key
                )

    def _record_decision(
        self,
        shift: ShiftState,
        scenario: Scenario,
        action: ActionType,
        confidence: int,
        result: OutcomeResult,
        used_verification: bool,
        idempotency_key: str | None,
    ) -> DecisionOutcome:
        now = datetime.now(timezone.utc)
        is_correct = action == scenario.correct_action
        progress = self.get_progress(shift.user_id)
        updated_progress, new_badges = apply_decision(
            progress,
            scenario,
            action,
            confidence,
            result,
            high_confidence_threshold=self.settings.high_confidence_threshold,
            now=now,
        )
        step = self.chains.advance(shift.scenario_ids, scenario, action)

        decision = Decision(
            shift_id=shift.id,
            scenario_id=scenario.id,
            user_id=shift.user_id,
            action=action,
            confidence=confidence,
            outcome=result.outcome,
            points_earned=result.points,
            used_verification=used_verification,
            idempotency_key=idempotency_key,
            created_at=now,
        )
        shift_changes = {
            "score": shift.score + result.points,
            "correct_decisions": shift.correct_decisions + int(is_correct),
            "false_positives": shift.false_positives + int(result.outcome == OutcomeType.FALSE_ALARM),
            "compromised": shift.compromised + int(result.outcome == OutcomeType.COMPROMISED),
            "verifications_used": shift.verifications_used + int(used_verification),
            "scenario_ids": step.scenario_ids,
        }

        with self.store.atomic():
            self.store.decisions.append(decision)
            updated_shift = self.store.shifts.update(shift.id, shift_changes, shift.version)
            updated_progress = self.store.progress.upsert(
                shift.user_id, _progress_changes(updated_progress), progress.version
            )

        logger.info(
            "Shift {}: {} on {} -> {} ({:+d})",
            shift.id, action.value, scenario.id, result.outcome.value, result.points,
        )
        return DecisionOutcome(
            decision=decision,
            scenario=scenario,
            shift=updated_shift,
            progress=updated_progress,
            new_badges=new_badges,
            injected_scenario=step.injected,
        )

    def complete_shift(self, shift_id: str) -> ShiftCompletion:
        with self.locks.hold(_shift_lock_key(shift_id)):
            shift = self.get_shift(shift_id)
            if shift.is_completed:
                raise ShiftCompleted(shift_id)
            decided = {d.scenario_id for d in self.store.decisions.for_shift(shift_id)}
            now = datetime.now(timezone.utc)

            with self.locks.hold(_learner_lock_key(shift.user_id)):
                progress = self.get_progress(shift.user_id)
                updated_progress, new_badges = apply_shift_completion(
                    progress, shift, decisions_made=len(decided & set(shift.scenario_ids)), now=now
                )
                with self.store.atomic():
                    updated_shift = self.store.shifts.update(shift_id, {"completed_at": now}, shift.version)
                    updated_progress = self.store.progress.upsert(
                        shift.user_id, _progress_changes(updated_progress), progress.version
                    )

        logger.info(
            "Completed shift {} for learner {}: score {}, {}/{} correct",
            shift_id, shift.user_id, shift.score, shift.correct_decisions, len(shift.scenario_ids),
        )
        return ShiftCompletion(updated_shift, updated_progress, new_badges)
