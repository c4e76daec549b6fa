"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and the legal actions for it and
returns a BotDecision. Policies never mutate state; the caller hands
the chosen action to the engine.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..cards.models import CoinFlipEffect, EffectType, RequirementType, StaticEffect
from ..engine_core.action import ActionType

if TYPE_CHECKING:
    from ..cards.models import Card, Effect
    from ..engine_core.action import PlayerAction
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for logs/debugging)
    - Confidence in the decision
    """
    action: PlayerAction
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations range from random play to simple heuristics.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: Non-empty list of legal actions

        Returns:
            BotDecision with the selected action

        Raises:
            ValueError: if legal_actions is empty
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for testing and as a baseline.
    """

    def __init__(self, seed: int | str | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    With legal_actions ordering this plays the first playable card in
    hand, and ends the turn once nothing is playable.
    """

    def select_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


@dataclass
class GreedyWeights:
    """
    Weights for GreedyPolicy.

    Higher values = more importance. Values apply to the expected
    resolved value of an effect (coin flips count as the mean).
    """
    progress: float = 1.0
    progress_with_bugs: float = 0.4  # Progress is worth less while bugs block the win
    bug_removed: float = 3.0
    bug_added: float = -2.5
    debt_added: float = -1.0
    debt_removed: float = 1.5
    card_drawn: float = 1.5
    discard_reshuffled: float = 0.5

    pp_spent: float = -0.1
    card_discarded: float = -0.5
    card_sacrificed: float = -1.5

    # Discarding the hand pays off once debt eats into PP
    debt_reduction_threshold: int = 8
    debt_reduction_value: float = 6.0


class GreedyPolicy(BotPolicy):
    """
    One-ply heuristic policy.

    Scores each legal action by the expected resource change it causes
    and takes the best. END_TURN scores 0, so a card is played only
    when it is expected to help.
    """

    def __init__(self, weights: GreedyWeights | None = None):
        self.weights = weights or GreedyWeights()

    def select_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        scored = [(self.score_action(state, a), i, a) for i, a in enumerate(legal_actions)]
        best_score, _, best = max(scored, key=lambda item: (item[0], -item[1]))

        return BotDecision(
            action=best,
            explanation=f"Best expected value {best_score:.2f}",
            evaluated_actions=len(legal_actions),
            best_score=best_score,
            evaluation_details={
                (a.card_instance_id or a.action_type.value): score for score, _, a in scored
            },
        )

    def score_action(self, state: GameState, action: PlayerAction) -> float:
        if action.action_type == ActionType.END_TURN:
            return 0.0
        if action.action_type == ActionType.DISCARD_ALL_FOR_TD_REDUCTION:
            if state.resources.technical_debt >= self.weights.debt_reduction_threshold:
                return self.weights.debt_reduction_value
            return -1.0
        if action.action_type == ActionType.PLAY_CARD:
            card = state.piles.find_in_hand(action.card_instance_id)
            if card is None:
                return float("-inf")
            return self.score_card(state, card.card)
        return float("-inf")

    def score_card(self, state: GameState, card: Card) -> float:
        w = self.weights
        score = 0.0

        for requirement in card.requirements:
            if requirement.type == RequirementType.SPEND_PP:
                score += w.pp_spent * requirement.value
            elif requirement.type == RequirementType.DISCARD_CARDS:
                score += w.card_discarded * requirement.value
            elif requirement.type == RequirementType.SEND_TO_GRAVEYARD:
                score += w.card_sacrificed * requirement.value

        bugs = state.resources.bugs
        debt = state.resources.technical_debt
        for effect in card.effects:
            value = _expected_value(effect)
            if effect.type == EffectType.ADD_PROGRESS:
                room = max(0, 100 - state.resources.progress)
                gain = min(room, value)
                score += gain * (w.progress if bugs == 0 else w.progress_with_bugs)
            elif effect.type == EffectType.REMOVE_BUGS:
                removed = min(bugs, value)
                score += w.bug_removed * removed
                bugs -= removed
            elif effect.type == EffectType.ADD_BUGS:
                score += w.bug_added * value
                bugs += value
            elif effect.type == EffectType.ADD_TECHNICAL_DEBT:
                score += w.debt_added * value
                debt += value
            elif effect.type == EffectType.REMOVE_TECHNICAL_DEBT:
                removed = min(debt, value)
                score += w.debt_removed * removed
                debt -= removed
            elif effect.type == EffectType.DRAW_CARDS:
                score += w.card_drawn * value
            elif effect.type == EffectType.SHUFFLE_DISCARD_TO_DECK:
                score += w.discard_reshuffled * len(state.piles.discard)

        return score


def _expected_value(effect: Effect) -> float:
    if isinstance(effect, CoinFlipEffect):
        return (effect.heads_value + effect.tails_value) / 2
    if isinstance(effect, StaticEffect):
        return effect.value
    return 0.0
