"""
Card Models - Card definitions, requirements and effects.

Requirements and effects are tagged unions:
- Requirement: SPEND_PP / DISCARD_CARDS / SEND_TO_GRAVEYARD, each with a value
- Effect: an EffectType combined with a randomness mode
  (StaticEffect or CoinFlipEffect)

Definitions are immutable. A CardInstance wraps a definition with a
unique instance id so two copies of the same card can be told apart.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class RequirementType(Enum):
    """Cost kinds a card can declare."""
    SPEND_PP = "SPEND_PP"
    DISCARD_CARDS = "DISCARD_CARDS"
    SEND_TO_GRAVEYARD = "SEND_TO_GRAVEYARD"


class EffectType(Enum):
    """What an effect does to the game state."""
    ADD_PROGRESS = "ADD_PROGRESS"
    ADD_BUGS = "ADD_BUGS"
    REMOVE_BUGS = "REMOVE_BUGS"
    ADD_TECHNICAL_DEBT = "ADD_TECHNICAL_DEBT"
    REMOVE_TECHNICAL_DEBT = "REMOVE_TECHNICAL_DEBT"
    SHUFFLE_DISCARD_TO_DECK = "SHUFFLE_DISCARD_TO_DECK"
    DRAW_CARDS = "DRAW_CARDS"


class RandomType(Enum):
    """How an effect's value is determined."""
    STATIC = "STATIC"
    COIN_FLIP = "COIN_FLIP"


@dataclass(frozen=True)
class Requirement:
    """A cost paid when the card is played."""
    type: RequirementType
    value: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Requirement:
        return cls(type=RequirementType(data["type"]), value=int(data["value"]))


@dataclass(frozen=True)
class StaticEffect:
    """Effect with a fixed value."""
    type: EffectType
    value: int
    random_type: RandomType = field(default=RandomType.STATIC, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "randomType": self.random_type.value,
            "value": self.value,
        }


@dataclass(frozen=True)
class CoinFlipEffect:
    """Effect whose value depends on a 50/50 coin flip."""
    type: EffectType
    heads_value: int
    tails_value: int
    random_type: RandomType = field(default=RandomType.COIN_FLIP, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "randomType": self.random_type.value,
            "headsValue": self.heads_value,
            "tailsValue": self.tails_value,
        }


Effect = Union[StaticEffect, CoinFlipEffect]


def effect_from_dict(data: dict[str, Any]) -> Effect:
    """Rebuild an effect from its serialized form."""
    effect_type = EffectType(data["type"])
    random_type = RandomType(data["randomType"])
    if random_type == RandomType.STATIC:
        return StaticEffect(type=effect_type, value=int(data["value"]))
    if random_type == RandomType.COIN_FLIP:
        return CoinFlipEffect(
            type=effect_type,
            heads_value=int(data["headsValue"]),
            tails_value=int(data["tailsValue"]),
        )
    raise ValueError(f"Unknown random type: {random_type}")


# Builders used by the catalog

def spend_pp(amount: int) -> Requirement:
    return Requirement(RequirementType.SPEND_PP, amount)


def discard_cards(count: int) -> Requirement:
    return Requirement(RequirementType.DISCARD_CARDS, count)


def send_to_graveyard(count: int) -> Requirement:
    return Requirement(RequirementType.SEND_TO_GRAVEYARD, count)


def static(effect_type: EffectType, value: int) -> StaticEffect:
    return StaticEffect(type=effect_type, value=value)


def coin_flip(effect_type: EffectType, heads_value: int, tails_value: int) -> CoinFlipEffect:
    return CoinFlipEffect(type=effect_type, heads_value=heads_value, tails_value=tails_value)


@dataclass(frozen=True)
class Card:
    """
    A card definition from the catalog.

    Title, image and quote are cosmetic; only requirements and
    effects matter to the rules.
    """
    id: str
    title: str
    requirements: tuple[Requirement, ...] = ()
    effects: tuple[Effect, ...] = ()
    image: str = ""
    quote: str = ""

    @property
    def productivity_cost(self) -> int:
        """Total PP this card costs."""
        return sum(
            r.value for r in self.requirements
            if r.type == RequirementType.SPEND_PP
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "quote": self.quote,
            "requirements": [r.to_dict() for r in self.requirements],
            "effects": [e.to_dict() for e in self.effects],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        return cls(
            id=data["id"],
            title=data["title"],
            image=data.get("image", ""),
            quote=data.get("quote", ""),
            requirements=tuple(Requirement.from_dict(r) for r in data.get("requirements", [])),
            effects=tuple(effect_from_dict(e) for e in data.get("effects", [])),
        )


@dataclass
class CardInstance:
    """
    A card in play.

    Identity is the instance id, never the card id: a deck may hold
    several copies of the same definition.
    """
    card: Card
    instance_id: str

    def __hash__(self):
        return hash(self.instance_id)

    def __eq__(self, other):
        if not isinstance(other, CardInstance):
            return False
        return self.instance_id == other.instance_id

    def to_dict(self) -> dict[str, Any]:
        return {"card": self.card.to_dict(), "instanceId": self.instance_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardInstance:
        return cls(card=Card.from_dict(data["card"]), instance_id=data["instanceId"])
