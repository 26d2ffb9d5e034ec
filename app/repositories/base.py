"""Storage collaborators of the training engine.

The engine treats these as synchronous dependencies and never retries them.
`update`/`upsert` take the version the caller read; a mismatch raises
ConcurrentUpdate.
"""
from contextlib import AbstractContextManager
from typing import Callable, Iterable, Protocol

from app.schemas.scenario import Scenario
from app.schemas.shift import Decision, ShiftState
from app.schemas.stats import ProgressState

ScenarioPredicate = Callable[[Scenario], bool]


class ScenarioRepository(Protocol):
    def get_by_id(self, scenario_id: str) -> Scenario | None: ...

    def get_by_ids(self, scenario_ids: Iterable[str]) -> list[Scenario]: ...

    def sample(self, predicate: ScenarioPredicate, count: int | None = None) -> list[Scenario]:
        """Scenarios matching `predicate` in random order; all of them when count is None."""
        ...

    def add(self, scenario: Scenario) -> Scenario: ...

    def count(self) -> int: ...


class ShiftRepository(Protocol):
    def get(self, shift_id: str) -> ShiftState | None: ...

    def create(self, shift: ShiftState) -> ShiftState: ...

    def update(self, shift_id: str, changes: dict, expected_version: int) -> ShiftState: ...


class ProgressRepository(Protocol):
    def get(self, user_id: str) -> ProgressState | None: ...

    def upsert(self, user_id: str, changes: dict, expected_version: int) -> ProgressState:
        """Create (expected_version 0) or update the learner's progress record."""
        ...


class DecisionLog(Protocol):
    def append(self, decision: Decision) -> Decision: ...

    def find_by_idempotency_key(self, shift_id: str, key: str) -> Decision | None: ...

    def for_shift(self, shift_id: str) -> list[Decision]: ...

    def all_for_analytics(self) -> list[Decision]: ...


class TrainingStore(Protocol):
    scenarios: ScenarioRepository
    shifts: ShiftRepository
    progress: ProgressRepository
    decisions: DecisionLog

    def atomic(self) -> AbstractContextManager:
        """All writes inside the block apply together or not at all."""
        ...
