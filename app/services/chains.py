"""Scenario chains: multi-step incidents where the action taken decides the next message.

States are the scenarios of a chain; a transition is encoded on the follow-up
scenario itself as (chain_id, chain_order, previous_action). A step with no
successor for the action taken ends the chain.
"""
from typing import NamedTuple

from loguru import logger

from app.repositories.base import ScenarioRepository
from app.schemas.scenario import Scenario
from app.services.outcomes import parse_action


class ChainStep(NamedTuple):
    scenario_ids: list[str]
    injected: Scenario | None


class ChainStateMachine:
    def __init__(self, scenarios: ScenarioRepository):
        self.scenarios = scenarios

    def next_in_chain(self, chain_id: str | None, current_order: int | None, action_taken) -> Scenario | None:
        """Follow-up scenario unlocked by `action_taken`, or None when the chain ends here."""
        if not chain_id or current_order is None:
            return None
        action = parse_action(action_taken)
        next_order = current_order + 1

        candidates = self.scenarios.sample(
            lambda s: s.chain_id == chain_id and s.chain_order == next_order and s.previous_action == action
        )
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.warning(
                "Chain {} has {} successors for step {} on {}; using the first by id",
                chain_id, len(candidates), next_order, action.value,
            )
        return min(candidates, key=lambda s: s.id)

    def advance(self, scenario_ids: list[str], scenario: Scenario, action_taken) -> ChainStep:
        """Append the successor of `scenario` to a shift's scenario list unless it is already there."""
        successor = self.next_in_chain(scenario.chain_id, scenario.chain_order, action_taken)
        if successor is None or successor.id in scenario_ids:
            return ChainStep(list(scenario_ids), None)
        logger.info("Chain {} advanced to step {} ({})", scenario.chain_id, successor.chain_order, successor.id)
        return ChainStep([*scenario_ids, successor.id], successor)
