"""
Tests for bot action selection and legality.

Tests:
- Legal action generation
- Bot selects legal actions
- Greedy heuristics
- Full bot games through the engine
"""

import pytest

from ..bots import FirstLegalPolicy, GreedyPolicy, RandomPolicy, run_bot_game
from ..engine_core.action import ActionType, GameConfig, PlayerAction
from ..engine_core.action_generator import is_legal, legal_actions
from ..engine_core.engine import GameEngine
from ..engine_core.history import GameHistory, HistoryAction
from ..engine_core.state import GameEndState, GamePhase, GameResources


def _fresh_history(round_number=1):
    history = GameHistory()
    history.add_entry(HistoryAction.ROUND_START, "", None, GameResources(), round=round_number)
    return history


class TestLegalActions:
    """Tests for legal_actions."""

    def test_playable_cards_then_td_then_end_turn(self, make_state, cards):
        hand = cards("quick-bug-fix") + cards("implement-feature")
        state = make_state(hand=hand, productivity_points=6)

        actions = legal_actions(state, _fresh_history())

        assert [(a.action_type, a.card_instance_id) for a in actions] == [
            (ActionType.PLAY_CARD, hand[0].instance_id),
            (ActionType.DISCARD_ALL_FOR_TD_REDUCTION, None),
            (ActionType.END_TURN, None),
        ]

    def test_no_td_reduction_after_card_played(self, make_state, cards):
        history = _fresh_history()
        history.add_entry(HistoryAction.CARD_PLAYED, "", GameResources(), GameResources(), round=1, card_id="x")

        actions = legal_actions(make_state(hand=cards("documentation")), history)

        assert ActionType.DISCARD_ALL_FOR_TD_REDUCTION not in [a.action_type for a in actions]

    def test_no_actions_when_game_over(self, make_state, cards):
        state = make_state(hand=cards("documentation"))._copy_with(
            phase=GamePhase.GAME_OVER, end_state=GameEndState.WON
        )
        assert legal_actions(state, _fresh_history()) == []

    def test_is_legal(self, make_state, cards):
        hand = cards("quick-bug-fix")
        state = make_state(hand=hand)
        history = _fresh_history()

        assert is_legal(state, history, PlayerAction.play_card(hand[0].instance_id))
        assert is_legal(state, history, PlayerAction.end_turn())
        assert not is_legal(state, history, PlayerAction.play_card("other"))


class TestPolicies:
    """Tests for the simple policies."""

    def test_random_policy_picks_legal_action(self, engine):
        state = engine.get_game_state()
        actions = legal_actions(state, engine.get_history())

        decision = RandomPolicy(seed=7).select_action(state, actions)

        assert decision.action in actions
        assert decision.evaluated_actions == len(actions)

    def test_random_policy_is_seeded(self, engine):
        state = engine.get_game_state()
        actions = legal_actions(state, engine.get_history())

        first = [RandomPolicy(seed=1).select_action(state, actions).action for _ in range(3)]
        second = [RandomPolicy(seed=1).select_action(state, actions).action for _ in range(3)]

        assert first == second

    def test_first_legal_policy(self, engine):
        state = engine.get_game_state()
        actions = legal_actions(state, engine.get_history())
        assert FirstLegalPolicy().select_action(state, actions).action is actions[0]

    @pytest.mark.parametrize("policy", [RandomPolicy(0), FirstLegalPolicy(), GreedyPolicy()])
    def test_empty_actions_raise(self, make_state, policy):
        with pytest.raises(ValueError):
            policy.select_action(make_state(), [])

    def test_policy_name(self):
        assert GreedyPolicy().get_name() == "GreedyPolicy"


class TestGreedyPolicy:
    """Tests for GreedyPolicy heuristics."""

    def test_prefers_bug_fix_when_buggy(self, make_state, cards):
        hand = cards("copy-paste-solution") + cards("integration-testing")
        state = make_state(hand=hand, bugs=3, progress=96)

        decision = GreedyPolicy().select_action(state, legal_actions(state, _fresh_history()))

        assert decision.action.card_instance_id == hand[1].instance_id

    def test_prefers_progress_when_clean(self, make_state, cards):
        hand = cards("quick-bug-fix") + cards("rush-implementation")
        state = make_state(hand=hand)

        decision = GreedyPolicy().select_action(state, legal_actions(state, _fresh_history()))

        assert decision.action.card_instance_id == hand[1].instance_id

    def test_reduces_high_debt(self, make_state, cards):
        state = make_state(hand=cards("documentation"), technical_debt=12, productivity_points=0)

        decision = GreedyPolicy().select_action(state, legal_actions(state, _fresh_history()))

        assert decision.action.action_type == ActionType.DISCARD_ALL_FOR_TD_REDUCTION

    def test_ends_turn_when_nothing_helps(self, make_state, cards):
        state = make_state(hand=cards("documentation"), productivity_points=0)

        decision = GreedyPolicy().select_action(state, legal_actions(state, _fresh_history()))

        assert decision.action.action_type == ActionType.END_TURN


class TestBotGames:
    """Full games played by bots."""

    @pytest.mark.parametrize("policy_factory", [GreedyPolicy, FirstLegalPolicy, lambda: RandomPolicy(5)])
    def test_games_finish_or_are_abandoned(self, policy_factory):
        result = run_bot_game(policy_factory(), GameConfig(seed="bot-game"), max_rounds=60)

        assert result.actions_taken > 0
        assert result.abandoned or result.summary.end_state != GameEndState.IN_PROGRESS
        assert result.summary.rounds <= 61

    def test_same_seed_same_game(self):
        first = run_bot_game(GreedyPolicy(), GameConfig(seed="replay"))
        second = run_bot_game(GreedyPolicy(), GameConfig(seed="replay"))

        assert first.action_log == second.action_log
        assert first.summary.end_state == second.summary.end_state
        assert first.summary.cards_played == second.summary.cards_played

    def test_uses_supplied_engine(self):
        engine = GameEngine()
        result = run_bot_game(FirstLegalPolicy(), GameConfig(seed="mine"), engine=engine)
        assert engine.get_game_state().seed == "mine"
        assert result.summary.rounds == engine.get_game_state().stats.current_round
