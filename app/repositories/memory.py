"""In-process store used for tests and local experiments."""
import random
import threading
from contextlib import contextmanager
from typing import Iterable

from app.core.errors import ConcurrentUpdate, UnknownSession
from app.schemas.scenario import Scenario
from app.schemas.shift import Decision, ShiftState
from app.schemas.stats import ProgressState


class MemoryScenarioRepository:
    def __init__(self, scenarios: Iterable[Scenario] = (), rng: random.Random | None = None):
        self._rows: dict[str, Scenario] = {}
        self._rng = rng or random.Random()
        for scenario in scenarios:
            self.add(scenario)

    def get_by_id(self, scenario_id: str) -> Scenario | None:
        return self._rows.get(scenario_id)

    def get_by_ids(self, scenario_ids) -> list[Scenario]:
        return [self._rows[i] for i in scenario_ids if i in self._rows]

    def sample(self, predicate, count: int | None = None) -> list[Scenario]:
        matches = [s for s in self._rows.values() if predicate(s)]
        self._rng.shuffle(matches)
        return matches if count is None else matches[:count]

    def add(self, scenario: Scenario) -> Scenario:
        self._rows[scenario.id] = scenario
        return scenario

    def count(self) -> int:
        return len(self._rows)


class MemoryShiftRepository:
    def __init__(self):
        self._rows: dict[str, ShiftState] = {}

    def get(self, shift_id: str) -> ShiftState | None:
        shift = self._rows.get(shift_id)
        return shift.model_copy(deep=True) if shift else None

    def create(self, shift: ShiftState) -> ShiftState:
        stored = shift.model_copy(update={"version": 1}, deep=True)
        self._rows[stored.id] = stored
        return stored.model_copy(deep=True)

    def update(self, shift_id: str, changes: dict, expected_version: int) -> ShiftState:
        current = self._rows.get(shift_id)
        if current is None:
            raise UnknownSession(shift_id)
        if current.version != expected_version:
            raise ConcurrentUpdate("Shift", shift_id)
        stored = current.model_copy(update={**changes, "version": current.version + 1}, deep=True)
        self._rows[shift_id] = stored
        return stored.model_copy(deep=True)


class MemoryProgressRepository:
    def __init__(self):
        self._rows: dict[str, ProgressState] = {}

    def get(self, user_id: str) -> ProgressState | None:
        progress = self._rows.get(user_id)
        return progress.model_copy(deep=True) if progress else None

    def upsert(self, user_id: str, changes: dict, expected_version: int) -> ProgressState:
        changes = {k: v for k, v in changes.items() if k not in ("user_id", "version")}
        current = self._rows.get(user_id)
        current_version = current.version if current else 0
        if current_version != expected_version:
            raise ConcurrentUpdate("Progress", user_id)
        if current is None:
            stored = ProgressState(user_id=user_id, **changes, version=1)
        else:
            stored = current.model_copy(update={**changes, "version": current_version + 1}, deep=True)
        self._rows[user_id] = stored
        return stored.model_copy(deep=True)


class MemoryDecisionLog:
    def __init__(self):
        self._rows: list[Decision] = []

    def append(self, decision: Decision) -> Decision:
        self._rows.append(decision)
        return decision

    def find_by_idempotency_key(self, shift_id: str, key: str) -> Decision | None:
        for decision in self._rows:
            if decision.shift_id == shift_id and decision.idempotency_key == key:
                return decision
        return None

    def for_shift(self, shift_id: str) -> list[Decision]:
        return [d for d in self._rows if d.shift_id == shift_id]

    def all_for_analytics(self) -> list[Decision]:
        return list(self._rows)


class MemoryTrainingStore:
    """Bundles the in-memory repositories; `atomic` restores every table if the block fails."""

    def __init__(self, scenarios: Iterable[Scenario] = (), rng: random.Random | None = None):
        self.scenarios = MemoryScenarioRepository(scenarios, rng=rng)
        self.shifts = MemoryShiftRepository()
        self.progress = MemoryProgressRepository()
        self.decisions = MemoryDecisionLog()
        self._lock = threading.RLock()

    @contextmanager
    def atomic(self):
        with self._lock:
            snapshot = (
                dict(self.scenarios._rows),
                dict(self.shifts._rows),
                dict(self.progress._rows),
                list(self.decisions._rows),
            )
            try:
                yield self
            except BaseException:
                (
                    self.scenarios._rows,
                    self.shifts._rows,
                    self.progress._rows,
                    self.decisions._rows,
                ) = snapshot
                raise
