"""
Tests for effect resolution.

Tests:
- Static and coin-flip resolution
- Predetermined coin-flip outcomes
- Resource clamping
- Deferred draws and discard reshuffles
- Sequential application order
"""

import logging
import random

import pytest

from ..cards.models import EffectType, coin_flip, static
from ..engine_core.effect_resolver import (
    CoinFlipOutcome,
    EffectResolution,
    EffectResolutionError,
    apply_effect_to_game_state,
    flip_coin,
    resolve_and_apply_effects,
    resolve_effect,
)
from .conftest import FixedRandom


class TestResolveEffect:
    """Tests for resolve_effect."""

    def test_static_effect(self, make_state):
        resolution = resolve_effect(static(EffectType.ADD_PROGRESS, 4), make_state())
        assert resolution.resolved_value == 4
        assert resolution.random_outcome is None
        assert resolution.cards_to_draw is None

    def test_coin_flip_heads_from_rng(self, make_state):
        effect = coin_flip(EffectType.ADD_PROGRESS, heads_value=4, tails_value=1)
        resolution = resolve_effect(effect, make_state(), rng=FixedRandom(0.2))
        assert resolution.random_outcome == CoinFlipOutcome.HEADS
        assert resolution.resolved_value == 4

    def test_coin_flip_tails_from_rng(self, make_state):
        effect = coin_flip(EffectType.ADD_PROGRESS, heads_value=4, tails_value=1)
        resolution = resolve_effect(effect, make_state(), rng=FixedRandom(0.7))
        assert resolution.random_outcome == CoinFlipOutcome.TAILS
        assert resolution.resolved_value == 1

    @pytest.mark.parametrize("outcome,expected", [
        (CoinFlipOutcome.HEADS, 12),
        (CoinFlipOutcome.TAILS, 3),
        ("heads", 12),
        ("tails", 3),
    ])
    def test_predetermined_outcome_is_honored(self, make_state, outcome, expected):
        effect = coin_flip(EffectType.ADD_PROGRESS, heads_value=12, tails_value=3)
        # rng alone would always give tails
        resolution = resolve_effect(effect, make_state(), predetermined_outcome=outcome, rng=FixedRandom(0.99))
        assert resolution.resolved_value == expected

    def test_draw_cards_sets_pending_draw(self, make_state):
        resolution = resolve_effect(static(EffectType.DRAW_CARDS, 2), make_state())
        assert resolution.cards_to_draw == 2

    def test_unknown_effect_raises(self, make_state):
        with pytest.raises(EffectResolutionError):
            resolve_effect(object(), make_state())

    def test_flip_coin_boundary(self):
        assert flip_coin(FixedRandom(0.4999)) == CoinFlipOutcome.HEADS
        assert flip_coin(FixedRandom(0.5)) == CoinFlipOutcome.TAILS


class TestApplyEffect:
    """Tests for apply_effect_to_game_state."""

    def _apply(self, state, effect):
        return apply_effect_to_game_state(resolve_effect(effect, state), state, rng=random.Random(0))

    def test_progress_capped_at_100(self, make_state):
        state = self._apply(make_state(progress=95), static(EffectType.ADD_PROGRESS, 10))
        assert state.resources.progress == 100

    def test_bugs_floor_at_zero(self, make_state):
        state = self._apply(make_state(bugs=1), static(EffectType.REMOVE_BUGS, 5))
        assert state.resources.bugs == 0

    def test_add_bugs(self, make_state):
        state = self._apply(make_state(bugs=1), static(EffectType.ADD_BUGS, 2))
        assert state.resources.bugs == 3

    def test_tech_debt_capped_at_20(self, make_state):
        state = self._apply(make_state(technical_debt=19), static(EffectType.ADD_TECHNICAL_DEBT, 3))
        assert state.resources.technical_debt == 20

    def test_tech_debt_floor_at_zero(self, make_state):
        state = self._apply(make_state(technical_debt=1), static(EffectType.REMOVE_TECHNICAL_DEBT, 5))
        assert state.resources.technical_debt == 0

    def test_input_state_untouched(self, make_state):
        original = make_state(progress=10)
        self._apply(original, static(EffectType.ADD_PROGRESS, 5))
        assert original.resources.progress == 10

    def test_draw_cards_moves_nothing(self, make_state, cards):
        state = make_state(hand=cards("documentation", 2))
        after = self._apply(state, static(EffectType.DRAW_CARDS, 2))
        assert len(after.piles.hand) == 2
        assert len(after.piles.deck) == len(state.piles.deck)

    def test_shuffle_discard_into_deck(self, make_state, cards):
        state = make_state(
            deck=cards("quick-bug-fix", 2, prefix="d"),
            discard=cards("documentation", 4, prefix="x"),
        )
        after = self._apply(state, static(EffectType.SHUFFLE_DISCARD_TO_DECK, 3))

        assert after.piles.discard == []
        assert len(after.piles.deck) == 6
        assert after.piles.total() == state.piles.total()
        assert len(state.piles.discard) == 4

    def test_resolution_serializes(self, make_state):
        effect = coin_flip(EffectType.ADD_BUGS, heads_value=0, tails_value=3)
        resolution = resolve_effect(effect, make_state(), predetermined_outcome="tails")
        assert EffectResolution.from_dict(resolution.to_dict()) == resolution


class TestResolveAndApply:
    """Tests for sequential resolution of a card's effects."""

    def test_order_add_then_remove(self, make_state):
        effects = [static(EffectType.ADD_BUGS, 3), static(EffectType.REMOVE_BUGS, 5)]
        state, _ = resolve_and_apply_effects(effects, make_state(bugs=0))
        assert state.resources.bugs == 0

    def test_order_remove_then_add(self, make_state):
        effects = [static(EffectType.REMOVE_BUGS, 5), static(EffectType.ADD_BUGS, 3)]
        state, _ = resolve_and_apply_effects(effects, make_state(bugs=0))
        assert state.resources.bugs == 3

    def test_predetermined_outcomes_consumed_by_coin_flips_only(self, make_state):
        effects = [
            static(EffectType.ADD_PROGRESS, 2),
            coin_flip(EffectType.ADD_PROGRESS, heads_value=5, tails_value=1),
            coin_flip(EffectType.ADD_BUGS, heads_value=0, tails_value=3),
        ]
        state, resolutions = resolve_and_apply_effects(
            effects,
            make_state(),
            predetermined_outcomes=[CoinFlipOutcome.TAILS, CoinFlipOutcome.HEADS],
        )

        assert state.resources.progress == 3
        assert state.resources.bugs == 0
        assert [r.random_outcome for r in resolutions] == [
            None, CoinFlipOutcome.TAILS, CoinFlipOutcome.HEADS,
        ]

    def test_outcomes_exhausted_fall_back_to_rng(self, make_state, caplog):
        effects = [
            coin_flip(EffectType.ADD_PROGRESS, heads_value=5, tails_value=1),
            coin_flip(EffectType.ADD_PROGRESS, heads_value=5, tails_value=1),
        ]
        with caplog.at_level(logging.WARNING, logger="shipit.engine_core.effect_resolver"):
            state, resolutions = resolve_and_apply_effects(
                effects, make_state(), predetermined_outcomes=["tails"], rng=FixedRandom(0.0)
            )
        assert [r.random_outcome for r in resolutions] == [CoinFlipOutcome.TAILS, CoinFlipOutcome.HEADS]
        assert state.resources.progress == 6
        assert "coin flips exhausted" in caplog.text

    def test_no_warning_without_predetermined_outcomes(self, make_state, caplog):
        effects = [coin_flip(EffectType.ADD_PROGRESS, heads_value=5, tails_value=1)]
        with caplog.at_level(logging.WARNING, logger="shipit.engine_core.effect_resolver"):
            resolve_and_apply_effects(effects, make_state(), rng=FixedRandom(0.0))
        assert caplog.text == ""

    def test_each_effect_sees_previous_result(self, make_state):
        effects = [static(EffectType.ADD_PROGRESS, 60), static(EffectType.ADD_PROGRESS, 60)]
        state, resolutions = resolve_and_apply_effects(effects, make_state())
        assert state.resources.progress == 100
        assert [r.resolved_value for r in resolutions] == [60, 60]
