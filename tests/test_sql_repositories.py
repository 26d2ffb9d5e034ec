import random

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.errors import ConcurrentUpdate, UnknownSession
from app.db.base import Base
from app.repositories.sql import SqlTrainingStore
from app.schemas.scenario import ActionType, OutcomeType
from app.schemas.shift import Decision, ShiftState
from app.services.seeding import SCENARIO_SEED, seed_scenarios
from app.services.training import LockRegistry, TrainingService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    store = SqlTrainingStore(db, rng=random.Random(11))
    with store.atomic():
        seed_scenarios(store.scenarios)
    return store


def test_seeding_runs_once(store):
    assert store.scenarios.count() == len(SCENARIO_SEED)
    assert seed_scenarios(store.scenarios) == 0


def test_scenario_round_trip(store):
    scenario = store.scenarios.get_by_id("seed-ceo-fraud-3")
    assert scenario.previous_action == ActionType.VERIFY
    assert scenario.chain_order == 3
    assert scenario.cues == ("wire transfer request", "keep it secret", "authority pressure")
    assert 1 <= scenario.difficulty_score <= 5
    assert store.scenarios.get_by_id("nope") is None


def test_get_by_ids_keeps_order(store):
    ids = ["seed-ceo-fraud-2", "missing", "seed-account-suspension"]
    assert [s.id for s in store.scenarios.get_by_ids(ids)] == ["seed-ceo-fraud-2", "seed-account-suspension"]


def test_sample_filters_and_limits(store):
    followups = store.scenarios.sample(lambda s: not s.is_chain_start)
    assert {s.id for s in followups} == {
        "seed-wrong-number-2",
        "seed-wrong-number-3",
        "seed-ceo-fraud-2",
        "seed-ceo-fraud-3",
        "seed-tech-support-2",
    }
    assert len(store.scenarios.sample(lambda s: True, count=3)) == 3


def test_shift_versioning(store):
    with store.atomic():
        shift = store.shifts.create(ShiftState(user_id="u1", scenario_ids=["seed-account-suspension"]))
    assert shift.version == 1

    with store.atomic():
        updated = store.shifts.update(shift.id, {"score": 15, "scenario_ids": ["a", "b"]}, expected_version=1)
    assert updated.version == 2
    assert updated.scenario_ids == ["a", "b"]

    with pytest.raises(ConcurrentUpdate):
        store.shifts.update(shift.id, {"score": 0}, expected_version=1)
    with pytest.raises(UnknownSession):
        store.shifts.update("missing", {"score": 0}, expected_version=1)


def test_progress_upsert(store):
    with store.atomic():
        created = store.progress.upsert("u1", {"total_decisions": 1, "missed_cues": {"urgency": 1}}, 0)
    assert created.version == 1
    assert created.missed_cues == {"urgency": 1}

    with pytest.raises(ConcurrentUpdate):
        store.progress.upsert("u1", {"total_decisions": 2}, 0)

    with store.atomic():
        updated = store.progress.upsert("u1", {"total_decisions": 2, "earned_badges": ["perfect_shift"]}, 1)
    assert updated.version == 2
    assert updated.earned_badges == ["perfect_shift"]
    assert store.progress.get("u1").total_decisions == 2


def test_decision_log(store, db):
    with store.atomic():
        shift = store.shifts.create(ShiftState(user_id="u1", scenario_ids=["seed-account-suspension"]))
        decision = Decision(
            shift_id=shift.id,
            scenario_id="seed-account-suspension",
            user_id="u1",
            action="report",
            confidence=70,
            outcome="safe",
            points_earned=15,
            idempotency_key="k1",
        )
        store.decisions.append(decision)

    found = store.decisions.find_by_idempotency_key(shift.id, "k1")
    assert found.id == decision.id
    assert found.outcome == OutcomeType.SAFE
    assert store.decisions.find_by_idempotency_key(shift.id, "k2") is None
    assert [d.id for d in store.decisions.for_shift(shift.id)] == [decision.id]

    with pytest.raises(ConcurrentUpdate):
        store.decisions.append(decision.model_copy(update={"id": "other"}))
    db.rollback()
    assert len(store.decisions.all_for_analytics()) == 1


def test_atomic_rolls_back(store):
    with pytest.raises(RuntimeError):
        with store.atomic():
            store.progress.upsert("u1", {"total_decisions": 1}, 0)
            raise RuntimeError("boom")
    assert store.progress.get("u1") is None


def test_training_service_persists(store, session_factory):
    service = TrainingService(
        store,
        settings=Settings(shift_size=5, seed_on_startup=False),
        locks=LockRegistry(),
        rng=random.Random(3),
    )
    shift = service.start_shift("u1")
    first = service.get_shift_scenarios(shift.id)[0]
    result = service.submit_decision(shift.id, first.id, first.correct_action, 60)
    assert result.is_correct
    service.complete_shift(shift.id)

    with session_factory() as other:
        fresh = SqlTrainingStore(other)
        saved = fresh.shifts.get(shift.id)
        assert saved.completed_at is not None
        assert saved.correct_decisions == 1
        assert saved.version == 3
        progress = fresh.progress.get("u1")
        assert progress.total_shifts == 1
        assert progress.correct_decisions == 1
        assert len(fresh.decisions.for_shift(shift.id)) == 1


def test_decisions_from_two_sessions_apply_in_turn(store, session_factory):
    settings = Settings(shift_size=5, seed_on_startup=False)
    locks = LockRegistry()
    first_service = TrainingService(store, settings=settings, locks=locks, rng=random.Random(3))
    shift = first_service.start_shift("u1")
    first, second = first_service.get_shift_scenarios(shift.id)[:2]

    with session_factory() as other:
        other_service = TrainingService(SqlTrainingStore(other), settings=settings, locks=locks)
        # the second request caches the shift row before the first one commits
        assert other_service.get_shift(shift.id).version == 1

        first_service.submit_decision(shift.id, first.id, first.correct_action, 50)
        result = other_service.submit_decision(shift.id, second.id, second.correct_action, 50)

        assert result.shift.version == 3
        assert result.shift.correct_decisions == 2
        assert result.progress.total_decisions == 2


def test_repositories_reread_rows_committed_elsewhere(store, session_factory):
    with store.atomic():
        shift = store.shifts.create(ShiftState(user_id="u1", scenario_ids=["seed-account-suspension"]))
        store.progress.upsert("u1", {"total_decisions": 1}, 0)

    with session_factory() as other:
        other_store = SqlTrainingStore(other)
        assert other_store.shifts.get(shift.id).score == 0
        assert other_store.progress.get("u1").total_decisions == 1

        with store.atomic():
            store.shifts.update(shift.id, {"score": 15}, expected_version=1)
            store.progress.upsert("u1", {"total_decisions": 2}, 1)

        assert other_store.shifts.get(shift.id).score == 15
        assert other_store.progress.get("u1").version == 2
        with other_store.atomic():
            updated = other_store.shifts.update(shift.id, {"score": 25}, expected_version=2)
        assert updated.version == 3
