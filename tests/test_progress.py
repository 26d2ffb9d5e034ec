from datetime import datetime, timezone

from app.schemas.scenario import OutcomeType
from app.schemas.shift import ShiftState
from app.schemas.stats import ProgressState
from app.services.outcomes import classify
from app.services.progress import (
    BADGES,
    apply_decision,
    apply_shift_completion,
    badge_progress,
    top_missed_cues,
)

from tests.conftest import make_scenario

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def decide(progress, scenario, action, confidence=50, **kwargs):
    return apply_decision(progress, scenario, action, confidence, classify(scenario, action), now=NOW, **kwargs)


def test_correct_decision_updates_counters():
    scenario = make_scenario(legitimacy="malicious", correct_action="report", cues=("urgency",))
    progress, badges = decide(ProgressState(user_id="u1"), scenario, "report")

    assert progress.total_decisions == 1
    assert progress.correct_decisions == 1
    assert progress.malicious_seen == 1
    assert progress.malicious_handled == 1
    assert progress.reports_made == 1
    assert progress.correct_reports == 1
    assert progress.total_score == 15
    assert progress.current_streak == 1
    assert progress.longest_streak == 1
    assert progress.missed_cues == {}
    assert progress.last_played_at == NOW
    assert badges == []


def test_input_progress_is_not_mutated():
    start = ProgressState(user_id="u1", missed_cues={"urgency": 1})
    scenario = make_scenario(correct_action="report", cues=("urgency",))
    decide(start, scenario, "delete")
    assert start.total_decisions == 0
    assert start.missed_cues == {"urgency": 1}


def test_compromise_resets_streak():
    scenario = make_scenario(legitimacy="malicious", correct_action="report")
    start = ProgressState(user_id="u1", current_streak=7, longest_streak=9)
    progress, _ = decide(start, scenario, "proceed")
    assert progress.current_streak == 0
    assert progress.longest_streak == 9
    assert progress.compromised == 1
    assert progress.malicious_handled == 0


def test_wrong_but_safe_decision_keeps_streak():
    scenario = make_scenario(legitimacy="malicious", correct_action="report")
    progress, _ = decide(ProgressState(user_id="u1", current_streak=4), scenario, "delete")
    assert progress.current_streak == 4
    assert progress.correct_decisions == 0
    assert progress.malicious_handled == 1


def test_longest_streak_tracks_maximum():
    scenario = make_scenario(legitimacy="malicious", correct_action="report")
    progress, _ = decide(ProgressState(user_id="u1", current_streak=5, longest_streak=5), scenario, "report")
    assert progress.longest_streak == 6


def test_false_alarm_counts():
    scenario = make_scenario(legitimacy="legitimate", correct_action="proceed")
    progress, _ = decide(ProgressState(user_id="u1"), scenario, "report")
    assert progress.false_positives == 1
    assert progress.legitimate_seen == 1
    assert progress.legitimate_handled == 0
    assert progress.correct_reports == 0
    assert progress.total_score == -5


def test_missed_cues_accumulate_on_wrong_decisions():
    scenario = make_scenario(correct_action="report", cues=("urgency", "look-alike domain"))
    progress, _ = decide(ProgressState(user_id="u1"), scenario, "proceed")
    progress, _ = decide(progress, scenario, "delete")
    assert progress.missed_cues == {"urgency": 2, "look-alike domain": 2}
    assert top_missed_cues(progress, limit=1) == [("look-alike domain", 2)]


def test_high_confidence_errors():
    scenario = make_scenario(correct_action="report")
    progress, _ = decide(ProgressState(user_id="u1"), scenario, "delete", confidence=85)
    assert progress.high_confidence_errors == 1
    progress, _ = decide(progress, scenario, "delete", confidence=84)
    assert progress.high_confidence_errors == 1
    progress, _ = decide(progress, scenario, "delete", confidence=60, high_confidence_threshold=50)
    assert progress.high_confidence_errors == 2


def test_bare_outcome_scores_nothing():
    scenario = make_scenario(correct_action="report")
    progress, _ = apply_decision(ProgressState(user_id="u1"), scenario, "report", 50, OutcomeType.SAFE, now=NOW)
    assert progress.total_score == 0
    assert progress.correct_decisions == 1


def test_domain_detective_awarded_at_threshold():
    scenario = make_scenario(correct_action="report", cues=("suspicious domain",))
    progress, badges = decide(ProgressState(user_id="u1", correct_decisions=8), scenario, "report")
    assert badges == []
    progress, badges = decide(progress, scenario, "report")
    assert badges == ["domain_detective"]
    assert progress.earned_badges == ["domain_detective"]


def test_badges_are_awarded_once():
    scenario = make_scenario(correct_action="report", cues=("suspicious domain",))
    progress, badges = decide(ProgressState(user_id="u1", correct_decisions=30), scenario, "report")
    assert "domain_detective" in badges
    progress, badges = decide(progress, scenario, "report")
    assert badges == []
    assert progress.earned_badges.count("domain_detective") == 1


def test_wrong_decision_does_not_earn_cue_badge():
    scenario = make_scenario(correct_action="report", cues=("suspicious domain", "urgency"))
    _, badges = decide(ProgressState(user_id="u1", correct_decisions=40), scenario, "delete")
    assert badges == []


def test_verification_pro():
    scenario = make_scenario(legitimacy="malicious", correct_action="verify")
    _, badges = decide(ProgressState(user_id="u1", total_decisions=19), scenario, "verify")
    assert "verification_pro" in badges

    legit = make_scenario(legitimacy="legitimate", correct_action="verify")
    _, badges = decide(ProgressState(user_id="u1", total_decisions=19), legit, "verify")
    assert "verification_pro" not in badges


def test_bec_blocker():
    scenario = make_scenario(correct_action="report", attack_family="BEC")
    _, badges = decide(ProgressState(user_id="u1", correct_decisions=14), scenario, "report")
    assert badges == ["bec_blocker"]


def test_urgency_immune():
    scenario = make_scenario(correct_action="delete", cues=("manufactured urgency",))
    _, badges = decide(ProgressState(user_id="u1", correct_decisions=24), scenario, "delete")
    assert badges == ["urgency_immune"]


def test_streak_master():
    scenario = make_scenario(legitimacy="legitimate", correct_action="proceed")
    _, badges = decide(ProgressState(user_id="u1", current_streak=19), scenario, "proceed")
    assert badges == ["streak_master"]


def make_shift(**overrides):
    data = {"user_id": "u1", "scenario_ids": ["a", "b"], "correct_decisions": 2}
    data.update(overrides)
    return ShiftState(**data)


def test_perfect_shift_badge():
    progress, badges = apply_shift_completion(ProgressState(user_id="u1"), make_shift(), decisions_made=2, now=NOW)
    assert badges == ["perfect_shift"]
    assert progress.total_shifts == 1

    progress, badges = apply_shift_completion(progress, make_shift(), decisions_made=2, now=NOW)
    assert badges == []
    assert progress.total_shifts == 2


def test_imperfect_shift_earns_nothing():
    shift = make_shift(correct_decisions=2, false_positives=1)
    _, badges = apply_shift_completion(ProgressState(user_id="u1"), shift, decisions_made=2, now=NOW)
    assert badges == []


def test_abandoned_messages_reset_streak():
    start = ProgressState(user_id="u1", current_streak=6, longest_streak=6)
    progress, _ = apply_shift_completion(start, make_shift(correct_decisions=1), decisions_made=1, now=NOW)
    assert progress.current_streak == 0
    assert progress.longest_streak == 6

    progress, _ = apply_shift_completion(start, make_shift(), decisions_made=2, now=NOW)
    assert progress.current_streak == 6


def test_badge_progress_is_capped():
    progress = ProgressState(user_id="u1", correct_decisions=12, total_decisions=40, current_streak=3)
    counters = badge_progress(progress)
    assert counters["domain_detective"] == 10
    assert counters["verification_pro"] == 20
    assert counters["urgency_immune"] == 12
    assert counters["streak_master"] == 3
    assert set(counters) == set(BADGES)
