"""
Card Catalog - The static table of card definitions.

Each card declares what it costs (requirements) and what it does
(effects). The engine interprets this table; flavor fields are
cosmetic.

DECK_COMPOSITION maps card ids to the number of copies in the
standard 30-card deck.
"""

from __future__ import annotations

from .models import (
    Card,
    EffectType,
    coin_flip,
    discard_cards,
    send_to_graveyard,
    spend_pp,
    static,
)


QUICK_BUG_FIX = Card(
    id="quick-bug-fix",
    title="Quick Bug Fix",
    image="/images/cards/quick-bug-fix.jpg",
    quote="It was just a missing semicolon...",
    requirements=(spend_pp(5),),
    effects=(static(EffectType.REMOVE_BUGS, 1),),
)

WRITE_UNIT_TESTS = Card(
    id="write-unit-tests",
    title="Write Unit Tests",
    image="/images/cards/unit-tests.jpg",
    quote="Test all the things!",
    requirements=(spend_pp(7),),
    effects=(
        static(EffectType.ADD_PROGRESS, 3),
        static(EffectType.REMOVE_BUGS, 2),
    ),
)

IMPLEMENT_FEATURE = Card(
    id="implement-feature",
    title="Implement Feature",
    image="/images/cards/implement-feature.jpg",
    quote="Shipping is a feature!",
    requirements=(spend_pp(8),),
    effects=(
        static(EffectType.ADD_PROGRESS, 8),
        coin_flip(EffectType.ADD_BUGS, heads_value=0, tails_value=1),
    ),
)

CODE_REVIEW = Card(
    id="code-review",
    title="Code Review",
    image="/images/cards/code-review.jpg",
    quote="Four eyes see more than two",
    requirements=(spend_pp(6), discard_cards(1)),
    effects=(
        static(EffectType.ADD_PROGRESS, 2),
        static(EffectType.REMOVE_BUGS, 1),
        static(EffectType.DRAW_CARDS, 2),
    ),
)

REFACTOR_LEGACY = Card(
    id="refactor-legacy",
    title="Refactor Legacy Code",
    image="/images/cards/refactor.jpg",
    quote="Sometimes you have to go backwards to go forwards",
    requirements=(spend_pp(7),),
    effects=(
        static(EffectType.REMOVE_TECHNICAL_DEBT, 3),
        static(EffectType.ADD_PROGRESS, 1),
    ),
)

PAIR_PROGRAMMING = Card(
    id="pair-programming",
    title="Pair Programming",
    image="/images/cards/pair-programming.jpg",
    quote="Two minds, one keyboard",
    requirements=(spend_pp(10),),
    effects=(
        static(EffectType.ADD_PROGRESS, 6),
        static(EffectType.REMOVE_BUGS, 1),
        static(EffectType.REMOVE_TECHNICAL_DEBT, 1),
    ),
)

STACK_OVERFLOW = Card(
    id="stack-overflow",
    title="Stack Overflow Research",
    image="/images/cards/stack-overflow.jpg",
    quote="Someone else has definitely solved this before",
    requirements=(spend_pp(5),),
    effects=(coin_flip(EffectType.ADD_PROGRESS, heads_value=4, tails_value=1),),
)

ALL_NIGHTER = Card(
    id="all-nighter",
    title="Pull an All-Nighter",
    image="/images/cards/all-nighter.jpg",
    quote="Coffee is a programmer's best friend",
    requirements=(spend_pp(3), send_to_graveyard(2)),
    effects=(
        static(EffectType.ADD_PROGRESS, 10),
        static(EffectType.ADD_BUGS, 2),
        static(EffectType.ADD_TECHNICAL_DEBT, 3),
    ),
)

DOCUMENTATION = Card(
    id="documentation",
    title="Documentation Sprint",
    image="/images/cards/documentation.jpg",
    quote="Future you will thank present you",
    requirements=(spend_pp(7),),
    effects=(
        static(EffectType.ADD_PROGRESS, 5),
        static(EffectType.REMOVE_TECHNICAL_DEBT, 1),
    ),
)

EMERGENCY_HOTFIX = Card(
    id="emergency-hotfix",
    title="Emergency Hotfix",
    image="/images/cards/hotfix.jpg",
    quote="Production is down! Ship it now!",
    requirements=(spend_pp(6),),
    effects=(
        static(EffectType.ADD_PROGRESS, 7),
        static(EffectType.REMOVE_BUGS, 1),
        static(EffectType.ADD_TECHNICAL_DEBT, 2),
    ),
)

COFFEE_BREAK = Card(
    id="coffee-break",
    title="Coffee Break",
    image="/images/cards/coffee-break.jpg",
    quote="Sometimes the best code is written away from the keyboard",
    requirements=(spend_pp(4),),
    effects=(
        static(EffectType.SHUFFLE_DISCARD_TO_DECK, 3),
        static(EffectType.DRAW_CARDS, 1),
    ),
)

DATABASE_MIGRATION = Card(
    id="database-migration",
    title="Database Migration",
    image="/images/cards/database-migration.jpg",
    quote="Pray to the backup gods",
    requirements=(spend_pp(9),),
    effects=(
        coin_flip(EffectType.ADD_PROGRESS, heads_value=12, tails_value=3),
        coin_flip(EffectType.ADD_BUGS, heads_value=0, tails_value=3),
    ),
)

RUBBER_DUCK = Card(
    id="rubber-duck",
    title="Rubber Duck Debugging",
    image="/images/cards/rubber-duck.jpg",
    quote="Explain it to the duck",
    requirements=(spend_pp(5),),
    effects=(
        coin_flip(EffectType.REMOVE_BUGS, heads_value=2, tails_value=1),
        static(EffectType.ADD_PROGRESS, 1),
    ),
)

TECH_DEBT_CLEANUP = Card(
    id="tech-debt-cleanup",
    title="Technical Debt Cleanup",
    image="/images/cards/tech-debt-cleanup.jpg",
    quote="Pay down the debt before it grows",
    requirements=(spend_pp(8), discard_cards(2)),
    effects=(static(EffectType.REMOVE_TECHNICAL_DEBT, 5),),
)

INTEGRATION_TESTING = Card(
    id="integration-testing",
    title="Integration Testing",
    image="/images/cards/integration-testing.jpg",
    quote="Test how the pieces fit together",
    requirements=(spend_pp(8),),
    effects=(
        static(EffectType.ADD_PROGRESS, 4),
        static(EffectType.REMOVE_BUGS, 3),
        static(EffectType.REMOVE_TECHNICAL_DEBT, 1),
    ),
)

RUSH_IMPLEMENTATION = Card(
    id="rush-implementation",
    title="Rush Implementation",
    image="/images/cards/rush-implementation.jpg",
    quote="We'll fix it in the next sprint... maybe",
    requirements=(spend_pp(6),),
    effects=(
        static(EffectType.ADD_PROGRESS, 9),
        static(EffectType.ADD_TECHNICAL_DEBT, 2),
    ),
)

COPY_PASTE_SOLUTION = Card(
    id="copy-paste-solution",
    title="Copy-Paste Solution",
    image="/images/cards/copy-paste.jpg",
    quote="Why reinvent the wheel? Ctrl+C, Ctrl+V!",
    requirements=(spend_pp(5),),
    effects=(
        static(EffectType.ADD_PROGRESS, 7),
        static(EffectType.ADD_TECHNICAL_DEBT, 1),
    ),
)

SKIP_CODE_REVIEW = Card(
    id="skip-code-review",
    title="Skip Code Review",
    image="/images/cards/skip-review.jpg",
    quote="Trust me, this code is perfect",
    requirements=(spend_pp(4),),
    effects=(
        static(EffectType.ADD_PROGRESS, 6),
        coin_flip(EffectType.ADD_TECHNICAL_DEBT, heads_value=1, tails_value=3),
    ),
)


CARD_CATALOG: tuple[Card, ...] = (
    QUICK_BUG_FIX,
    WRITE_UNIT_TESTS,
    IMPLEMENT_FEATURE,
    CODE_REVIEW,
    REFACTOR_LEGACY,
    PAIR_PROGRAMMING,
    STACK_OVERFLOW,
    ALL_NIGHTER,
    DOCUMENTATION,
    EMERGENCY_HOTFIX,
    COFFEE_BREAK,
    DATABASE_MIGRATION,
    RUBBER_DUCK,
    TECH_DEBT_CLEANUP,
    INTEGRATION_TESTING,
    RUSH_IMPLEMENTATION,
    COPY_PASTE_SOLUTION,
    SKIP_CODE_REVIEW,
)

# Copies per card in the standard deck (30 cards)
DECK_COMPOSITION: dict[str, int] = {
    "quick-bug-fix": 2,
    "write-unit-tests": 2,
    "implement-feature": 2,
    "code-review": 2,
    "refactor-legacy": 2,
    "pair-programming": 1,
    "stack-overflow": 2,
    "all-nighter": 1,
    "documentation": 2,
    "emergency-hotfix": 2,
    "coffee-break": 2,
    "database-migration": 1,
    "rubber-duck": 2,
    "tech-debt-cleanup": 1,
    "integration-testing": 1,
    "rush-implementation": 2,
    "copy-paste-solution": 2,
    "skip-code-review": 1,
}

_CARDS_BY_ID = {card.id: card for card in CARD_CATALOG}


def get_card_by_id(card_id: str) -> Card | None:
    """Look up a card definition by id."""
    return _CARDS_BY_ID.get(card_id)
