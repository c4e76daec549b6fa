"""
Validators - Pure predicates over game state.

None of these functions mutate the state they are given.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..cards.models import CardInstance, Requirement, RequirementType
from .history import GameHistory
from .state import GameState, HAND_SIZE, MAX_PROGRESS, MAX_TECHNICAL_DEBT


@dataclass
class CardValidation:
    """Whether a card can be played, and why not."""
    can_play: bool
    reasons: list[str] = field(default_factory=list)
    missing_requirements: list[Requirement] = field(default_factory=list)


def validate_card_play(card: CardInstance, state: GameState) -> CardValidation:
    """
    Check every requirement of a card against the current state.

    Discard and graveyard requirements count the hand without the card
    being played.
    """
    reasons: list[str] = []
    missing: list[Requirement] = []
    available_in_hand = len(state.piles.hand) - 1

    for requirement in card.card.requirements:
        req_type = requirement.type
        if req_type == RequirementType.SPEND_PP:
            pp = state.resources.productivity_points
            if pp < requirement.value:
                reasons.append(f"Not enough PP: need {requirement.value}, have {pp}")
                missing.append(requirement)
        elif req_type == RequirementType.DISCARD_CARDS:
            if available_in_hand < requirement.value:
                reasons.append(
                    f"Not enough cards to discard: need {requirement.value}, "
                    f"have {available_in_hand} available"
                )
                missing.append(requirement)
        elif req_type == RequirementType.SEND_TO_GRAVEYARD:
            if available_in_hand < requirement.value:
                reasons.append(
                    f"Not enough cards to send to graveyard: need {requirement.value}, "
                    f"have {available_in_hand} available"
                )
                missing.append(requirement)
        else:
            reasons.append(f"Unknown requirement type: {req_type}")
            missing.append(requirement)

    return CardValidation(can_play=not reasons, reasons=reasons, missing_requirements=missing)


def validate_technical_debt_reduction(state: GameState, history: GameHistory) -> bool:
    """Discarding the hand is allowed only before any card is played this round."""
    if not state.piles.hand:
        return False
    return not history.has_played_card_this_round(state.stats.current_round)


def check_win_condition(state: GameState) -> bool:
    return state.resources.progress >= MAX_PROGRESS and state.resources.bugs == 0


def check_lose_condition(state: GameState) -> bool:
    """Lost once deck and discard together cannot refill a hand."""
    return len(state.piles.deck) + len(state.piles.discard) < HAND_SIZE


def validate_card_for_requirement(
    card_to_use: CardInstance,
    target_card: CardInstance,
    state: GameState,
) -> bool:
    """A discard/graveyard target must be in hand and not the card being played."""
    if card_to_use.instance_id == target_card.instance_id:
        return False
    return any(c.instance_id == target_card.instance_id for c in state.piles.hand)


def validate_game_state(state: GameState) -> list[str]:
    """
    List invariant violations. Empty means consistent.

    For tests and assertions; the engine does not call this per action.
    """
    errors: list[str] = []
    res = state.resources

    if res.progress < 0 or res.progress > MAX_PROGRESS:
        errors.append(f"Progress out of bounds: {res.progress} (should be 0-{MAX_PROGRESS})")
    if res.bugs < 0:
        errors.append(f"Bugs cannot be negative: {res.bugs}")
    if res.technical_debt < 0:
        errors.append(f"Technical debt cannot be negative: {res.technical_debt}")
    if res.technical_debt > MAX_TECHNICAL_DEBT:
        errors.append(f"Technical debt cannot exceed {MAX_TECHNICAL_DEBT}: {res.technical_debt}")
    if res.productivity_points < 0:
        errors.append(f"Productivity points cannot be negative: {res.productivity_points}")

    if state.stats.current_round < 1:
        errors.append(f"Round number must be at least 1: {state.stats.current_round}")
    if state.stats.cards_played < 0:
        errors.append(f"Cards played cannot be negative: {state.stats.cards_played}")

    seen: set[str] = set()
    piles = state.piles
    for card in piles.deck + piles.hand + piles.discard + piles.graveyard:
        if card.instance_id in seen:
            errors.append(f"Card instance appears in more than one place: {card.instance_id}")
        seen.add(card.instance_id)

    return errors
