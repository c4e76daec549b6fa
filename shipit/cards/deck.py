"""
Deck - Building, shuffling and instantiating decks.

Randomness always comes from an injected random.Random so that a
seeded game shuffles the same way every time.
"""

from __future__ import annotations
import random
import uuid
from typing import Iterable, TypeVar

from .catalog import CARD_CATALOG, DECK_COMPOSITION
from .models import Card, CardInstance

T = TypeVar("T")


def create_deck(deck_ids: Iterable[str] | None = None) -> list[Card]:
    """
    Build the deck in catalog order, with copies expanded.

    Args:
        deck_ids: Optional subset of card ids to keep

    Returns:
        Unshuffled list of card definitions
    """
    allowed = set(deck_ids) if deck_ids is not None else None
    deck: list[Card] = []
    for card in CARD_CATALOG:
        if allowed is not None and card.id not in allowed:
            continue
        deck.extend([card] * DECK_COMPOSITION.get(card.id, 1))
    return deck


def shuffle_deck(cards: list[T], rng: random.Random | None = None) -> list[T]:
    """
    Fisher-Yates shuffle. Returns a new list; the input is left alone.
    """
    rng = rng or random.Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def create_card_instance(
    card: Card,
    instance_id: str | None = None,
    rng: random.Random | None = None,
) -> CardInstance:
    """Wrap a definition with a fresh instance id."""
    if instance_id is None:
        suffix = f"{rng.getrandbits(48):012x}" if rng is not None else uuid.uuid4().hex[:12]
        instance_id = f"{card.id}_{suffix}"
    return CardInstance(card=card, instance_id=instance_id)


def instantiate_deck(cards: list[Card], rng: random.Random | None = None) -> list[CardInstance]:
    """Create one instance per card, guaranteeing unique ids within the deck."""
    instances = []
    seen: set[str] = set()
    for card in cards:
        instance = create_card_instance(card, rng=rng)
        while instance.instance_id in seen:
            instance = create_card_instance(card, rng=rng)
        seen.add(instance.instance_id)
        instances.append(instance)
    return instances
