"""
Tests for the card catalog and deck construction.

Tests:
- Catalog contents and deck composition
- Shuffle determinism and conservation
- Instance id uniqueness
- Card serialization
"""

import random
from collections import Counter

import pytest

from ..cards import (
    CARD_CATALOG,
    DECK_COMPOSITION,
    Card,
    CoinFlipEffect,
    EffectType,
    RequirementType,
    create_card_instance,
    create_deck,
    get_card_by_id,
    instantiate_deck,
    shuffle_deck,
)


class TestCatalog:
    """Tests for the card catalog."""

    def test_catalog_ids_are_unique(self):
        ids = [card.id for card in CARD_CATALOG]
        assert len(ids) == len(set(ids)) == 18

    def test_every_card_costs_pp_and_has_effects(self):
        for card in CARD_CATALOG:
            assert card.productivity_cost > 0, card.id
            assert card.effects, card.id

    def test_composition_covers_catalog(self):
        assert set(DECK_COMPOSITION) == {card.id for card in CARD_CATALOG}
        assert sum(DECK_COMPOSITION.values()) == 30

    def test_get_card_by_id(self):
        card = get_card_by_id("code-review")
        assert card is not None
        assert card.productivity_cost == 6
        assert [r.type for r in card.requirements] == [
            RequirementType.SPEND_PP,
            RequirementType.DISCARD_CARDS,
        ]

    def test_get_unknown_card(self):
        assert get_card_by_id("no-such-card") is None

    def test_coin_flip_card(self):
        card = get_card_by_id("implement-feature")
        flips = [e for e in card.effects if isinstance(e, CoinFlipEffect)]
        assert len(flips) == 1
        assert flips[0].type == EffectType.ADD_BUGS
        assert (flips[0].heads_value, flips[0].tails_value) == (0, 1)


class TestDeck:
    """Tests for deck building and shuffling."""

    def test_full_deck(self):
        deck = create_deck()
        assert len(deck) == 30
        counts = Counter(card.id for card in deck)
        assert counts == Counter(DECK_COMPOSITION)

    def test_filtered_deck(self):
        deck = create_deck(["quick-bug-fix", "all-nighter"])
        assert Counter(card.id for card in deck) == {"quick-bug-fix": 2, "all-nighter": 1}

    def test_filter_with_unknown_ids_only(self):
        assert create_deck(["nope"]) == []

    def test_shuffle_preserves_cards_and_input(self):
        deck = create_deck()
        original = list(deck)
        shuffled = shuffle_deck(deck, random.Random(1))

        assert deck == original
        assert Counter(c.id for c in shuffled) == Counter(c.id for c in deck)

    def test_shuffle_is_deterministic_for_a_seed(self):
        deck = create_deck()
        first = shuffle_deck(deck, random.Random("same"))
        second = shuffle_deck(deck, random.Random("same"))
        assert [c.id for c in first] == [c.id for c in second]

    def test_shuffle_empty_and_single(self):
        assert shuffle_deck([], random.Random(0)) == []
        assert shuffle_deck(["x"], random.Random(0)) == ["x"]


class TestInstances:
    """Tests for card instances."""

    def test_instance_ids_unique(self):
        instances = instantiate_deck(create_deck(), rng=random.Random(3))
        ids = [i.instance_id for i in instances]
        assert len(ids) == len(set(ids)) == 30

    def test_instance_id_prefix(self):
        card = get_card_by_id("rubber-duck")
        instance = create_card_instance(card)
        assert instance.instance_id.startswith("rubber-duck_")

    def test_explicit_instance_id(self):
        card = get_card_by_id("rubber-duck")
        assert create_card_instance(card, instance_id="duck-1").instance_id == "duck-1"

    def test_instances_compare_by_instance_id(self):
        card = get_card_by_id("documentation")
        a = create_card_instance(card, instance_id="doc-1")
        b = create_card_instance(card, instance_id="doc-2")
        assert a != b
        assert a == create_card_instance(card, instance_id="doc-1")


class TestSerialization:
    """Tests for card to_dict/from_dict."""

    @pytest.mark.parametrize("card_id", ["database-migration", "all-nighter"])
    def test_card_round_trip(self, card_id):
        card = get_card_by_id(card_id)
        assert Card.from_dict(card.to_dict()) == card

    def test_effect_dict_keys(self):
        data = get_card_by_id("stack-overflow").to_dict()
        effect = data["effects"][0]
        assert effect["randomType"] == "COIN_FLIP"
        assert (effect["headsValue"], effect["tailsValue"]) == (4, 1)
