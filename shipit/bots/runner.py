"""
Bot Runner - Plays whole games with a BotPolicy through the engine.

Each step:
1. Generate legal actions from the engine's state
2. Ask the policy for a decision
3. Apply it through GameEngine.process_action
4. Perform any draws a card play deferred to the caller
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core.action import ActionType, GameConfig
from ..engine_core.action_generator import legal_actions
from ..engine_core.engine import GameEngine
from ..engine_core.scoring import GameSummary
from ..engine_core.state import GameEndState
from .policy import BotPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 100


@dataclass
class BotGameResult:
    """Outcome of one bot game."""
    summary: GameSummary
    actions_taken: int
    abandoned: bool = False
    action_log: list[str] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.summary.end_state == GameEndState.WON


def run_bot_game(
    policy: BotPolicy,
    config: GameConfig | None = None,
    engine: GameEngine | None = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
) -> BotGameResult:
    """
    Play one game to completion.

    A game still running after max_rounds is abandoned (a policy that
    only ever ends turns never finishes on its own).

    Raises:
        RuntimeError: if the engine rejects an action the generator
            reported as legal
    """
    engine = engine or GameEngine()
    state = engine.create_new_game(config)
    log: list[str] = []
    actions_taken = 0

    while not state.is_over and state.stats.current_round <= max_rounds:
        legal = legal_actions(state, engine.get_history())
        decision = policy.select_action(state, legal)
        result = engine.process_action(decision.action)
        if not result.success:
            raise RuntimeError(
                f"{policy.get_name()} chose a rejected action "
                f"{decision.action.action_type.value}: {result.error}"
            )
        actions_taken += 1
        log.append(_describe(decision.action, state))

        to_draw = result.data.get("cards_to_draw", 0)
        if to_draw and not result.new_state.is_over:
            result = engine.draw_cards(to_draw)

        state = result.new_state

    abandoned = not state.is_over
    if abandoned:
        logger.debug("Abandoned game %s after %d rounds", state.seed, max_rounds)

    return BotGameResult(
        summary=engine.get_game_summary(),
        actions_taken=actions_taken,
        abandoned=abandoned,
        action_log=log,
    )


def _describe(action, state) -> str:
    if action.action_type == ActionType.PLAY_CARD:
        card = state.piles.find_in_hand(action.card_instance_id)
        title = card.card.title if card else action.card_instance_id
        return f"R{state.stats.current_round}: play {title}"
    return f"R{state.stats.current_round}: {action.action_type.value.lower()}"
