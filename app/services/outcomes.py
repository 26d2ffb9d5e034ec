"""Outcome engine: classify a learner's action against a scenario's ground truth.

The decision table is an ordered list; the first rule matching
(action, legitimacy) wins.
"""
from typing import NamedTuple

from app.core.errors import InvalidAction
from app.schemas.scenario import ActionType, Legitimacy, OutcomeType, Scenario

LEGITIMATE_KINDS = frozenset({Legitimacy.LEGITIMATE, Legitimacy.SUSPICIOUS_LEGITIMATE})


class OutcomeResult(NamedTuple):
    outcome: OutcomeType
    points: int


class OutcomeRule(NamedTuple):
    action: ActionType
    legitimacies: frozenset
    outcome: OutcomeType
    points: int

    def matches(self, action: ActionType, legitimacy: Legitimacy) -> bool:
        return action == self.action and legitimacy in self.legitimacies

    @property
    def result(self) -> OutcomeResult:
        return OutcomeResult(self.outcome, self.points)


def _rule(action, legitimacies, outcome, points) -> OutcomeRule:
    if isinstance(legitimacies, Legitimacy):
        legitimacies = {legitimacies}
    return OutcomeRule(action, frozenset(legitimacies), outcome, points)


OUTCOME_RULES: tuple[OutcomeRule, ...] = (
    _rule(ActionType.PROCEED, Legitimacy.MALICIOUS, OutcomeType.COMPROMISED, -20),
    _rule(ActionType.REPORT, Legitimacy.LEGITIMATE, OutcomeType.FALSE_ALARM, -5),
    _rule(ActionType.REPORT, Legitimacy.SUSPICIOUS_LEGITIMATE, OutcomeType.FALSE_ALARM, -2),
    _rule(ActionType.DELETE, Legitimacy.LEGITIMATE, OutcomeType.DELAYED_WORK, -3),
    _rule(ActionType.VERIFY, Legitimacy.MALICIOUS, OutcomeType.SAFE, 15),
    _rule(ActionType.VERIFY, LEGITIMATE_KINDS, OutcomeType.SAFE, 8),
    _rule(ActionType.REPORT, Legitimacy.MALICIOUS, OutcomeType.SAFE, 15),
    _rule(ActionType.DELETE, Legitimacy.MALICIOUS, OutcomeType.SAFE, 10),
    _rule(ActionType.PROCEED, Legitimacy.LEGITIMATE, OutcomeType.SAFE, 10),
    _rule(ActionType.PROCEED, Legitimacy.SUSPICIOUS_LEGITIMATE, OutcomeType.SAFE, 5),
    _rule(ActionType.DELETE, Legitimacy.SUSPICIOUS_LEGITIMATE, OutcomeType.DELAYED_WORK, 2),
)

# Unreachable for the 4 actions x 3 legitimacies covered above.
DEFAULT_OUTCOME = OutcomeResult(OutcomeType.SAFE, 5)


def parse_action(value) -> ActionType:
    """Coerce a raw action string into an ActionType, raising InvalidAction otherwise."""
    if isinstance(value, ActionType):
        return value
    try:
        return ActionType(str(value).strip().lower())
    except ValueError:
        raise InvalidAction(value) from None


def match_rule(action: ActionType, legitimacy: Legitimacy) -> OutcomeRule | None:
    for rule in OUTCOME_RULES:
        if rule.matches(action, legitimacy):
            return rule
    return None


def classify(scenario: Scenario, action, used_verification: bool = False) -> OutcomeResult:
    """Return (outcome, points) for an action on a scenario.

    Budget checks for `verify` belong to the caller and must happen before this
    call; `used_verification` does not change the classification.
    """
    action = parse_action(action)
    rule = match_rule(action, scenario.legitimacy)
    if rule is None:
        return DEFAULT_OUTCOME
    return rule.result


def is_correct_action(scenario: Scenario, action) -> bool:
    return parse_action(action) == scenario.correct_action
