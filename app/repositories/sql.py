"""SQLAlchemy-backed store. Repositories flush; `SqlTrainingStore.atomic` owns commit/rollback.

Shift and progress rows are re-read from the database on every get, so a row
cached earlier in the session never masks a commit made by another session.
"""
import random
from contextlib import contextmanager

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrentUpdate, UnknownSession
from app.models.decision import DecisionRecord
from app.models.progress import ProgressRecord
from app.models.scenario import ScenarioRecord
from app.models.shift import ShiftRecord
from app.schemas.scenario import Scenario
from app.schemas.shift import Decision, ShiftState
from app.schemas.stats import ProgressState


def _scenario_from_row(row: ScenarioRecord) -> Scenario:
    return Scenario.model_validate(row)


class SqlScenarioRepository:
    def __init__(self, db: Session, rng: random.Random | None = None):
        self.db = db
        self._rng = rng or random.Random()

    def get_by_id(self, scenario_id: str) -> Scenario | None:
        row = self.db.get(ScenarioRecord, scenario_id)
        return _scenario_from_row(row) if row else None

    def get_by_ids(self, scenario_ids) -> list[Scenario]:
        scenario_ids = list(scenario_ids)
        if not scenario_ids:
            return []
        rows = self.db.scalars(select(ScenarioRecord).where(ScenarioRecord.id.in_(scenario_ids))).all()
        by_id = {row.id: _scenario_from_row(row) for row in rows}
        return [by_id[i] for i in scenario_ids if i in by_id]

    def sample(self, predicate, count: int | None = None) -> list[Scenario]:
        rows = self.db.scalars(select(ScenarioRecord)).all()
        matches = [s for s in map(_scenario_from_row, rows) if predicate(s)]
        self._rng.shuffle(matches)
        return matches if count is None else matches[:count]

    def add(self, scenario: Scenario) -> Scenario:
        self.db.add(ScenarioRecord(**scenario.model_dump(mode="json")))
        self.db.flush()
        return scenario

    def count(self) -> int:
        return self.db.scalar(select(func.count(ScenarioRecord.id))) or 0


class SqlShiftRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, shift_id: str) -> ShiftState | None:
        row = self.db.get(ShiftRecord, shift_id, populate_existing=True)
        return ShiftState.model_validate(row) if row else None

    def create(self, shift: ShiftState) -> ShiftState:
        row = ShiftRecord(**shift.model_dump(exclude={"version"}))
        self.db.add(row)
        self.db.flush()
        return ShiftState.model_validate(row)

    def update(self, shift_id: str, changes: dict, expected_version: int) -> ShiftState:
        row = self.db.get(ShiftRecord, shift_id, populate_existing=True)
        if row is None:
            raise UnknownSession(shift_id)
        if row.version != expected_version:
            raise ConcurrentUpdate("Shift", shift_id)
        for key, value in changes.items():
            setattr(row, key, value)
        try:
            self.db.flush()
        except StaleDataError as exc:
            raise ConcurrentUpdate("Shift", shift_id) from exc
        return ShiftState.model_validate(row)


class SqlProgressRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> ProgressState | None:
        row = self.db.get(ProgressRecord, user_id, populate_existing=True)
        return ProgressState.model_validate(row) if row else None

    def upsert(self, user_id: str, changes: dict, expected_version: int) -> ProgressState:
        changes = {k: v for k, v in changes.items() if k not in ("user_id", "version")}
        row = self.db.get(ProgressRecord, user_id, populate_existing=True)
        current_version = row.version if row else 0
        if current_version != expected_version:
            raise ConcurrentUpdate("Progress", user_id)
        if row is None:
            row = ProgressRecord(user_id=user_id, **changes)
            self.db.add(row)
        else:
            for key, value in changes.items():
                setattr(row, key, value)
        try:
            self.db.flush()
        except (StaleDataError, IntegrityError) as exc:
            raise ConcurrentUpdate("Progress", user_id) from exc
        return ProgressState.model_validate(row)


class SqlDecisionLog:
    def __init__(self, db: Session):
        self.db = db

    def append(self, decision: Decision) -> Decision:
        self.db.add(
            DecisionRecord(
                id=decision.id,
                shift_id=decision.shift_id,
                scenario_id=decision.scenario_id,
                user_id=decision.user_id,
                action=decision.action.value,
                confidence=decision.confidence,
                outcome=decision.outcome.value,
                points_earned=decision.points_earned,
                used_verification=decision.used_verification,
                idempotency_key=decision.idempotency_key,
                created_at=decision.created_at,
            )
        )
        try:
            self.db.flush()
        except IntegrityError as exc:
            raise ConcurrentUpdate("Decision", decision.idempotency_key or decision.id) from exc
        return decision

    def find_by_idempotency_key(self, shift_id: str, key: str) -> Decision | None:
        row = self.db.scalar(
            select(DecisionRecord).where(
                DecisionRecord.shift_id == shift_id,
                DecisionRecord.idempotency_key == key,
            )
        )
        return Decision.model_validate(row) if row else None

    def for_shift(self, shift_id: str) -> list[Decision]:
        rows = self.db.scalars(
            select(DecisionRecord).where(DecisionRecord.shift_id == shift_id).order_by(DecisionRecord.created_at)
        ).all()
        return [Decision.model_validate(row) for row in rows]

    def all_for_analytics(self) -> list[Decision]:
        rows = self.db.scalars(select(DecisionRecord).order_by(DecisionRecord.created_at)).all()
        return [Decision.model_validate(row) for row in rows]


class SqlTrainingStore:
    def __init__(self, db: Session, rng: random.Random | None = None):
        self.db = db
        self.scenarios = SqlScenarioRepository(db, rng=rng)
        self.shifts = SqlShiftRepository(db)
        self.progress = SqlProgressRepository(db)
        self.decisions = SqlDecisionLog(db)

    @contextmanager
    def atomic(self):
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
