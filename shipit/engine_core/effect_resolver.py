"""
Effect Resolver - Turns declarative card effects into state changes.

Resolution happens in two steps:
1. resolve_effect: pick the effect's value (static, or a coin flip)
2. apply_effect_to_game_state: apply that value with clamping

resolve_and_apply_effects runs both for a whole card, in declaration
order, each effect seeing the state produced by the previous one.

DRAW_CARDS is deferred to the caller: the resolution carries
cards_to_draw and no card moves. End-of-turn draws are done by the
engine itself.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence
import logging
import random

from ..cards.deck import shuffle_deck
from ..cards.models import (
    CoinFlipEffect,
    Effect,
    EffectType,
    StaticEffect,
    effect_from_dict,
)
from .state import GameState, MAX_PROGRESS, MAX_TECHNICAL_DEBT

logger = logging.getLogger(__name__)


class EffectResolutionError(Exception):
    """An effect could not be resolved. Indicates a corrupt card catalog."""


class CoinFlipOutcome(Enum):
    HEADS = "heads"
    TAILS = "tails"


@dataclass
class EffectResolution:
    """The outcome of resolving one effect."""
    effect: Effect
    resolved_value: int
    random_outcome: CoinFlipOutcome | None = None
    cards_to_draw: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "effect": self.effect.to_dict(),
            "resolved_value": self.resolved_value,
            "random_outcome": self.random_outcome.value if self.random_outcome else None,
            "cards_to_draw": self.cards_to_draw,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EffectResolution:
        outcome = data.get("random_outcome")
        return cls(
            effect=effect_from_dict(data["effect"]),
            resolved_value=int(data["resolved_value"]),
            random_outcome=CoinFlipOutcome(outcome) if outcome else None,
            cards_to_draw=data.get("cards_to_draw"),
        )


_default_rng = random.Random()


def flip_coin(rng: random.Random | None = None) -> CoinFlipOutcome:
    """50/50 coin flip."""
    rng = rng or _default_rng
    return CoinFlipOutcome.HEADS if rng.random() < 0.5 else CoinFlipOutcome.TAILS


def resolve_effect(
    effect: Effect,
    state: GameState,
    predetermined_outcome: CoinFlipOutcome | str | None = None,
    rng: random.Random | None = None,
) -> EffectResolution:
    """
    Resolve an effect's value.

    A predetermined coin-flip outcome is honored exactly and no
    randomness is drawn. The state is accepted for signature symmetry
    with apply_effect_to_game_state; no current effect depends on it.
    """
    if isinstance(effect, StaticEffect):
        value = effect.value
        outcome = None
    elif isinstance(effect, CoinFlipEffect):
        if predetermined_outcome is not None:
            outcome = CoinFlipOutcome(predetermined_outcome)
        else:
            outcome = flip_coin(rng)
        value = effect.heads_value if outcome == CoinFlipOutcome.HEADS else effect.tails_value
    else:
        raise EffectResolutionError(f"Unknown random effect type: {effect!r}")

    cards_to_draw = value if effect.type == EffectType.DRAW_CARDS else None
    return EffectResolution(
        effect=effect,
        resolved_value=value,
        random_outcome=outcome,
        cards_to_draw=cards_to_draw,
    )


def apply_effect_to_game_state(
    resolution: EffectResolution,
    state: GameState,
    rng: random.Random | None = None,
) -> GameState:
    """
    Apply a resolved effect. Returns a new state; the input is untouched.

    Raises:
        EffectResolutionError: for an effect type with no handler
    """
    value = resolution.resolved_value
    resources = state.resources
    effect_type = resolution.effect.type

    if effect_type == EffectType.ADD_PROGRESS:
        return state.with_resources(progress=min(MAX_PROGRESS, resources.progress + value))
    if effect_type == EffectType.ADD_BUGS:
        return state.with_resources(bugs=max(0, resources.bugs + value))
    if effect_type == EffectType.REMOVE_BUGS:
        return state.with_resources(bugs=max(0, resources.bugs - value))
    if effect_type == EffectType.ADD_TECHNICAL_DEBT:
        return state.with_resources(
            technical_debt=min(MAX_TECHNICAL_DEBT, resources.technical_debt + value)
        )
    if effect_type == EffectType.REMOVE_TECHNICAL_DEBT:
        return state.with_resources(technical_debt=max(0, resources.technical_debt - value))
    if effect_type == EffectType.SHUFFLE_DISCARD_TO_DECK:
        # Whole discard pile goes back; the value is informational
        piles = state.piles.copy()
        piles.deck = shuffle_deck(piles.deck + piles.discard, rng or _default_rng)
        piles.discard = []
        return state.with_piles(piles)
    if effect_type == EffectType.DRAW_CARDS:
        # Caller performs the draw using resolution.cards_to_draw
        return state

    raise EffectResolutionError(f"Unknown effect type: {effect_type}")


def resolve_and_apply_effects(
    effects: Sequence[Effect],
    state: GameState,
    predetermined_outcomes: Sequence[CoinFlipOutcome | str] | None = None,
    rng: random.Random | None = None,
) -> tuple[GameState, list[EffectResolution]]:
    """
    Resolve and apply effects in order.

    Predetermined outcomes are consumed by coin-flip effects only, in
    declaration order. Once they run out, further flips draw from rng.
    """
    forcing = predetermined_outcomes is not None
    outcomes = list(predetermined_outcomes or [])
    resolutions: list[EffectResolution] = []
    current = state

    for effect in effects:
        forced = None
        if isinstance(effect, CoinFlipEffect):
            if outcomes:
                forced = outcomes.pop(0)
            elif forcing:
                logger.warning("Predetermined coin flips exhausted; flipping %s", effect.type.value)
        resolution = resolve_effect(effect, current, predetermined_outcome=forced, rng=rng)
        current = apply_effect_to_game_state(resolution, current, rng=rng)
        resolutions.append(resolution)

    return current, resolutions
