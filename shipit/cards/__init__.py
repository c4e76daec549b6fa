"""
Cards - Card definitions, the catalog and deck construction.
"""

from .models import (
    Card,
    CardInstance,
    CoinFlipEffect,
    Effect,
    EffectType,
    RandomType,
    Requirement,
    RequirementType,
    StaticEffect,
)
from .catalog import CARD_CATALOG, DECK_COMPOSITION, get_card_by_id
from .deck import create_card_instance, create_deck, instantiate_deck, shuffle_deck

__all__ = [
    "Card",
    "CardInstance",
    "CoinFlipEffect",
    "Effect",
    "EffectType",
    "RandomType",
    "Requirement",
    "RequirementType",
    "StaticEffect",
    "CARD_CATALOG",
    "DECK_COMPOSITION",
    "get_card_by_id",
    "create_card_instance",
    "create_deck",
    "instantiate_deck",
    "shuffle_deck",
]
