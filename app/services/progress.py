"""Progress aggregation: cumulative counters, streaks, missed cues and badge awards.

Functions here are pure: they take the current ProgressState and return a new
one together with the badge ids earned by the update.
"""
from datetime import datetime, timezone
from typing import Callable, NamedTuple

from loguru import logger

from app.schemas.scenario import ActionType, OutcomeType, Scenario
from app.schemas.shift import ShiftState
from app.schemas.stats import ProgressState
from app.services.outcomes import OutcomeResult, parse_action

HIGH_CONFIDENCE_THRESHOLD = 85


class BadgeDefinition(NamedTuple):
    id: str
    name: str
    description: str
    requirement: int


BADGES: dict[str, BadgeDefinition] = {
    b.id: b
    for b in (
        BadgeDefinition("domain_detective", "Domain Detective", "Spotted 10 domain mismatches", 10),
        BadgeDefinition("verification_pro", "Verification Pro", "Used verification correctly 20 times", 20),
        BadgeDefinition("bec_blocker", "BEC Blocker", "Blocked 15 business email compromise attempts", 15),
        BadgeDefinition("urgency_immune", "Urgency Immune", "Resisted 25 urgency-based attacks", 25),
        BadgeDefinition("streak_master", "Streak Master", "Achieved a 20-decision safe streak", 20),
        BadgeDefinition("perfect_shift", "Perfect Shift", "Completed a shift with 100% accuracy", 1),
    )
}


class BadgeContext(NamedTuple):
    """Everything a per-decision badge predicate may look at (counters are post-update)."""

    progress: ProgressState
    scenario: Scenario
    action: ActionType
    is_correct: bool
    used_verification: bool


def _requirement(badge_id: str) -> int:
    return BADGES[badge_id].requirement


def _has_cue(scenario: Scenario, fragment: str) -> bool:
    return any(fragment in cue.lower() for cue in scenario.cues)


def _domain_detective(ctx: BadgeContext) -> bool:
    return (
        ctx.is_correct
        and _has_cue(ctx.scenario, "domain")
        and ctx.progress.correct_decisions >= _requirement("domain_detective")
    )


def _verification_pro(ctx: BadgeContext) -> bool:
    return (
        ctx.used_verification
        and ctx.scenario.is_malicious
        and ctx.progress.total_decisions >= _requirement("verification_pro")
    )


def _bec_blocker(ctx: BadgeContext) -> bool:
    return (
        ctx.is_correct
        and (ctx.scenario.attack_family or "").lower() == "bec"
        and ctx.progress.correct_decisions >= _requirement("bec_blocker")
    )


def _urgency_immune(ctx: BadgeContext) -> bool:
    return (
        ctx.is_correct
        and _has_cue(ctx.scenario, "urgency")
        and ctx.progress.correct_decisions >= _requirement("urgency_immune")
    )


def _streak_master(ctx: BadgeContext) -> bool:
    return ctx.progress.current_streak >= _requirement("streak_master")


# Evaluated in order after every decision; perfect_shift is checked on shift completion.
BADGE_RULES: tuple[tuple[str, Callable[[BadgeContext], bool]], ...] = (
    ("domain_detective", _domain_detective),
    ("verification_pro", _verification_pro),
    ("bec_blocker", _bec_blocker),
    ("urgency_immune", _urgency_immune),
    ("streak_master", _streak_master),
)


def evaluate_badges(ctx: BadgeContext) -> list[str]:
    """Badge ids whose predicate holds for this decision, earned or not."""
    return [badge_id for badge_id, predicate in BADGE_RULES if predicate(ctx)]


def award_badges(progress: ProgressState, candidates) -> tuple[ProgressState, list[str]]:
    """Add candidate badges the learner doesn't hold yet. Returns (progress, newly earned)."""
    earned = list(progress.earned_badges)
    new = []
    for badge_id in candidates:
        if badge_id not in earned:
            earned.append(badge_id)
            new.append(badge_id)
    if not new:
        return progress, []
    return progress.model_copy(update={"earned_badges": earned}), new


def _unpack_result(result) -> OutcomeResult:
    if isinstance(result, tuple):
        outcome, points = result
        return OutcomeResult(OutcomeType(outcome), points)
    return OutcomeResult(OutcomeType(result), 0)


def apply_decision(
    progress: ProgressState,
    scenario: Scenario,
    action,
    confidence: int,
    result,
    *,
    high_confidence_threshold: int = HIGH_CONFIDENCE_THRESHOLD,
    now: datetime | None = None,
) -> tuple[ProgressState, list[str]]:
    """Fold one classified decision into a learner's progress.

    `result` is the (outcome, points) pair from the outcome engine; a bare
    outcome is accepted and scores zero points.
    """
    action = parse_action(action)
    outcome, points = _unpack_result(result)

    is_correct = action == scenario.correct_action
    is_malicious = scenario.is_malicious
    is_legitimate = not is_malicious  # suspicious_legitimate included
    is_correct_report = action == ActionType.REPORT and is_malicious
    is_correct_malicious_handling = is_malicious and action != ActionType.PROCEED
    is_high_confidence_wrong = not is_correct and confidence >= high_confidence_threshold
    is_correct_legitimate_handling = is_legitimate and is_correct
    used_verification = action == ActionType.VERIFY

    if outcome == OutcomeType.COMPROMISED:
        current_streak = 0
    elif is_correct:
        current_streak = progress.current_streak + 1
    else:
        current_streak = progress.current_streak

    missed_cues = dict(progress.missed_cues)
    if not is_correct:
        for cue in scenario.cues:
            missed_cues[cue] = missed_cues.get(cue, 0) + 1

    updated = progress.model_copy(
        update={
            "total_decisions": progress.total_decisions + 1,
            "correct_decisions": progress.correct_decisions + int(is_correct),
            "false_positives": progress.false_positives + int(outcome == OutcomeType.FALSE_ALARM),
            "compromised": progress.compromised + int(outcome == OutcomeType.COMPROMISED),
            "malicious_seen": progress.malicious_seen + int(is_malicious),
            "malicious_handled": progress.malicious_handled + int(is_correct_malicious_handling),
            "legitimate_seen": progress.legitimate_seen + int(is_legitimate),
            "legitimate_handled": progress.legitimate_handled + int(is_correct_legitimate_handling),
            "reports_made": progress.reports_made + int(action == ActionType.REPORT),
            "correct_reports": progress.correct_reports + int(is_correct_report),
            "high_confidence_errors": progress.high_confidence_errors + int(is_high_confidence_wrong),
            "current_streak": current_streak,
            "longest_streak": max(progress.longest_streak, current_streak),
            "total_score": progress.total_score + points,
            "missed_cues": missed_cues,
            "earned_badges": list(progress.earned_badges),
            "last_played_at": now or datetime.now(timezone.utc),
        }
    )

    ctx = BadgeContext(updated, scenario, action, is_correct, used_verification)
    updated, new_badges = award_badges(updated, evaluate_badges(ctx))
    if new_badges:
        logger.info("Learner {} earned badges {}", progress.user_id, new_badges)
    return updated, new_badges


def is_perfect_shift(shift: ShiftState) -> bool:
    return shift.is_perfect


def apply_shift_completion(
    progress: ProgressState,
    shift: ShiftState,
    decisions_made: int | None = None,
    *,
    now: datetime | None = None,
) -> tuple[ProgressState, list[str]]:
    """Account for a finished shift: shift count, perfect_shift badge, streak reset on abandoned messages."""
    changes = {
        "total_shifts": progress.total_shifts + 1,
        "last_played_at": now or datetime.now(timezone.utc),
    }
    if decisions_made is not None and decisions_made < len(shift.scenario_ids):
        changes["current_streak"] = 0
    updated = progress.model_copy(update=changes)

    candidates = ["perfect_shift"] if is_perfect_shift(shift) else []
    updated, new_badges = award_badges(updated, candidates)
    if new_badges:
        logger.info("Learner {} earned badges {}", progress.user_id, new_badges)
    return updated, new_badges


def top_missed_cues(progress: ProgressState, limit: int = 5) -> list[tuple[str, int]]:
    """Most frequently missed cues, highest count first."""
    ranked = sorted(progress.missed_cues.items(), key=lambda kv: (-kv[1], kv[0]))
    return ranked[:limit]


def badge_progress(progress: ProgressState) -> dict[str, int]:
    """Current counter toward each badge requirement, capped at the requirement."""
    raw = {
        "domain_detective": progress.correct_decisions,
        "verification_pro": progress.total_decisions,
        "bec_blocker": progress.correct_decisions,
        "urgency_immune": progress.correct_decisions,
        "streak_master": progress.current_streak,
        "perfect_shift": int("perfect_shift" in progress.earned_badges),
    }
    return {badge_id: min(value, BADGES[badge_id].requirement) for badge_id, value in raw.items()}
