"""
Game Engine - Owns the authoritative GameState and applies actions.

The engine is the single point of state mutation:
- process_action() validates and applies a PlayerAction
- every transition builds a new GameState (previous states stay valid)
- errors never escape: failures come back as ActionResult.failure

Randomness (shuffles, coin flips, random discards) comes from one
injected random.Random. A seeded GameConfig reseeds it, which makes
a game reproducible from its seed and the actions applied to it.
Previews use a separate random source and never touch game state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence
import logging
import random
import time

from ..cards.deck import create_deck, instantiate_deck, shuffle_deck
from ..cards.models import CardInstance, CoinFlipEffect, Effect, RequirementType
from .action import (
    ActionResult,
    ActionType,
    GameConfig,
    PlayerAction,
    SaveState,
    SAVE_VERSION,
)
from .effect_resolver import CoinFlipOutcome, flip_coin, resolve_and_apply_effects
from .history import GameHistory, HistoryAction
from .scoring import GameSummary, calculate_score, summarize_game
from .state import (
    BASE_PRODUCTIVITY,
    HAND_SIZE,
    GameEndState,
    GamePhase,
    GamePiles,
    GameResources,
    GameState,
    GameStats,
)
from .validators import (
    check_lose_condition,
    check_win_condition,
    validate_card_play,
    validate_technical_debt_reduction,
)

logger = logging.getLogger(__name__)


@dataclass
class CoinFlipPreview:
    """A coin flip the UI can animate before committing a card play."""
    effect_index: int
    effect: Effect
    outcome: CoinFlipOutcome
    resolved_value: int


@dataclass
class CardPlayPreview:
    """
    What playing a card would do, computed without side effects.

    The random picks here are not reused by the real play; only coin
    flips can be carried over, via
    process_action_with_predetermined_coin_flips.
    """
    card: CardInstance
    cards_to_discard: list[CardInstance] = field(default_factory=list)
    cards_to_graveyard: list[CardInstance] = field(default_factory=list)
    coin_flip_effects: list[CoinFlipPreview] = field(default_factory=list)

    @property
    def coin_flip_outcomes(self) -> list[CoinFlipOutcome]:
        return [flip.outcome for flip in self.coin_flip_effects]


@dataclass
class EndTurnPreview:
    """What END_TURN would do to the piles."""
    cards_to_discard: list[CardInstance]
    cards_to_draw: int
    needs_reshuffle: bool
    will_lose: bool


class GameEngine:
    """
    Core game engine. One instance serves one game at a time.

    Usage:
        engine = GameEngine()
        state = engine.create_new_game(GameConfig(seed="demo"))
        result = engine.process_action(PlayerAction.play_card(state.piles.hand[0].instance_id))
        if not result.success:
            print(result.error)
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()
        self._preview_rng = random.Random()
        self._state: GameState | None = None
        self._history = GameHistory()

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    def create_new_game(self, config: GameConfig | None = None) -> GameState:
        """
        Create a fresh game and make it the current one.

        Raises:
            ValueError: deck filter leaves fewer cards than a hand,
                or an unknown starting resource is given
        """
        config = config or GameConfig()
        if config.seed is not None:
            self._rng = random.Random(config.seed)
            seed = config.seed
        else:
            seed = f"game_{int(time.time() * 1000)}_{self._rng.getrandbits(32):08x}"

        cards = create_deck(config.deck_ids)
        if len(cards) < HAND_SIZE:
            raise ValueError(
                f"Deck needs at least {HAND_SIZE} cards, got {len(cards)}"
            )

        instances = instantiate_deck(shuffle_deck(cards, self._rng), rng=self._rng)
        resources = self._starting_resources(config.starting_resources)

        state = GameState(
            resources=resources,
            stats=GameStats(current_round=1, cards_played=0, start_time=time.time()),
            piles=GamePiles(deck=instances[HAND_SIZE:], hand=instances[:HAND_SIZE]),
            seed=seed,
            phase=GamePhase.PLANNING,
            end_state=GameEndState.IN_PROGRESS,
            player_id=config.player_id,
        )

        self._state = state
        self._history.clear()
        self._history.add_entry(
            HistoryAction.ROUND_START,
            "Game started",
            None,
            state.resources,
            round=1,
        )
        logger.info("New game %s with %d cards", seed, state.piles.total())
        return state

    def _starting_resources(self, overrides: dict[str, int] | None) -> GameResources:
        resources = GameResources(
            progress=0,
            bugs=0,
            technical_debt=0,
            productivity_points=BASE_PRODUCTIVITY,
        )
        if not overrides:
            return resources
        unknown = set(overrides) - set(resources.to_dict())
        if unknown:
            raise ValueError(f"Unknown starting resources: {', '.join(sorted(unknown))}")
        return resources.copy(**overrides)

    def get_game_state(self) -> GameState | None:
        return self._state

    def get_history(self) -> GameHistory:
        return self._history

    def check_game_end(self) -> bool:
        if self._state is None:
            return False
        return self._state.end_state != GameEndState.IN_PROGRESS

    def get_save_state(self) -> SaveState | None:
        """Serializable snapshot of the current game."""
        if self._state is None:
            return None
        return SaveState(
            game_state=self._state.clone(),
            saved_at=time.time(),
            version=SAVE_VERSION,
            history=self._history.entries,
        )

    def get_game_summary(self) -> GameSummary | None:
        """Flat record for score submission."""
        if self._state is None:
            return None
        return summarize_game(self._state, self._history)

    # =========================================================================
    # Action processing
    # =========================================================================

    def process_action(self, action: PlayerAction) -> ActionResult:
        """
        Apply an action to the current game.

        Never raises: any unexpected error becomes a failed result.
        """
        return self._dispatch(action, predetermined_outcomes=None)

    def process_action_with_predetermined_coin_flips(
        self,
        action: PlayerAction,
        outcomes: Sequence[CoinFlipOutcome | str],
    ) -> ActionResult:
        """
        Play a card forcing coin-flip outcomes, in effect declaration order.

        Used after the UI has already shown a flip so the engine applies
        exactly what was displayed. A card with more coin flips than
        outcomes supplied is rejected. Other action kinds are processed
        normally.
        """
        return self._dispatch(action, predetermined_outcomes=list(outcomes))

    def _dispatch(
        self,
        action: PlayerAction,
        predetermined_outcomes: list[CoinFlipOutcome | str] | None,
    ) -> ActionResult:
        try:
            action_type = self._coerce_action_type(action.action_type)

            if action_type == ActionType.START_NEW_GAME:
                return ActionResult.success_with_state(self.create_new_game(action.config))
            if action_type == ActionType.LOAD_GAME:
                return self._handle_load_game(action.save_state)

            if action_type is None:
                return ActionResult.failure(f"Unknown action type: {action.action_type}")
            if self._state is None:
                return ActionResult.failure("No game in progress")

            if action_type == ActionType.PLAY_CARD:
                result = self._handle_play_card(action.card_instance_id, predetermined_outcomes)
            elif action_type == ActionType.DISCARD_ALL_FOR_TD_REDUCTION:
                result = self._handle_technical_debt_reduction()
            elif action_type == ActionType.END_TURN:
                result = self._handle_end_turn()
            else:
                result = ActionResult.failure(f"Unknown action type: {action.action_type}")

            if not result.success:
                logger.debug("Rejected %s: %s", action_type.value, result.error)
            return result
        except Exception as e:
            logger.exception("Error processing action %s", action.action_type)
            return ActionResult.failure(str(e) or e.__class__.__name__)

    @staticmethod
    def _coerce_action_type(raw: ActionType | str) -> ActionType | None:
        if isinstance(raw, ActionType):
            return raw
        try:
            return ActionType(raw)
        except ValueError:
            return None

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_play_card(
        self,
        card_instance_id: str | None,
        predetermined_outcomes: list[CoinFlipOutcome | str] | None = None,
    ) -> ActionResult:
        state = self._state
        card = state.piles.find_in_hand(card_instance_id) if card_instance_id else None
        if card is None:
            return ActionResult.failure("Card not found in hand")

        if state.phase != GamePhase.PLANNING:
            return ActionResult.failure("Cannot play cards in current phase")

        validation = validate_card_play(card, state)
        if not validation.can_play:
            return ActionResult.failure(f"Cannot play card: {', '.join(validation.reasons)}")

        if predetermined_outcomes is not None:
            flips = sum(1 for e in card.card.effects if isinstance(e, CoinFlipEffect))
            if len(predetermined_outcomes) < flips:
                return ActionResult.failure(
                    f"Expected {flips} coin flip outcomes, got {len(predetermined_outcomes)}"
                )

        new_state, discarded, sacrificed = self._pay_requirements(card, state)

        piles = new_state.piles.copy()
        piles.hand.remove(card)
        piles.graveyard.append(card)
        new_state = new_state.with_piles(piles)

        new_state, resolutions = resolve_and_apply_effects(
            card.card.effects,
            new_state,
            predetermined_outcomes=predetermined_outcomes,
            rng=self._rng,
        )
        new_state = new_state.with_stats(cards_played=new_state.stats.cards_played + 1)

        self._history.add_entry(
            HistoryAction.CARD_PLAYED,
            f"Played {card.card.title}",
            state.resources,
            new_state.resources,
            round=new_state.stats.current_round,
            card_id=card.card.id,
            effect_resolutions=resolutions,
        )

        if check_win_condition(new_state):
            new_state = self._end_game(new_state, GameEndState.WON, "Project shipped")
        elif check_lose_condition(new_state):
            new_state = self._end_game(
                new_state, GameEndState.LOST_NO_CARDS, "Not enough cards left for a full hand"
            )

        self._state = new_state
        return ActionResult.success_with_state(
            new_state,
            applied_effects=resolutions,
            cards_to_draw=sum(r.cards_to_draw or 0 for r in resolutions),
            discarded_cards=[c.instance_id for c in discarded],
            graveyard_cards=[c.instance_id for c in sacrificed],
        )

    def _pay_requirements(
        self,
        card: CardInstance,
        state: GameState,
    ) -> tuple[GameState, list[CardInstance], list[CardInstance]]:
        """
        Spend PP and remove random hand cards for discard/graveyard costs.

        The card being played is never picked. Each pick draws fresh
        randomness.
        """
        piles = state.piles.copy()
        pp = state.resources.productivity_points
        discarded: list[CardInstance] = []
        sacrificed: list[CardInstance] = []

        for requirement in card.card.requirements:
            if requirement.type == RequirementType.SPEND_PP:
                pp -= requirement.value
            elif requirement.type == RequirementType.DISCARD_CARDS:
                for picked in self._pick_random_from_hand(piles, card, requirement.value):
                    piles.discard.append(picked)
                    discarded.append(picked)
            elif requirement.type == RequirementType.SEND_TO_GRAVEYARD:
                for picked in self._pick_random_from_hand(piles, card, requirement.value):
                    piles.graveyard.append(picked)
                    sacrificed.append(picked)
            else:
                raise ValueError(f"Unknown requirement type: {requirement.type}")

        new_state = state.with_piles(piles).with_resources(productivity_points=max(0, pp))
        return new_state, discarded, sacrificed

    def _pick_random_from_hand(
        self,
        piles: GamePiles,
        played: CardInstance,
        count: int,
    ) -> list[CardInstance]:
        """Remove up to count random cards (never the played one) from piles.hand."""
        picked = []
        for _ in range(count):
            candidates = [c for c in piles.hand if c.instance_id != played.instance_id]
            if not candidates:
                break
            choice = candidates[self._rng.randrange(len(candidates))]
            piles.hand.remove(choice)
            picked.append(choice)
        return picked

    def _handle_technical_debt_reduction(self) -> ActionResult:
        state = self._state
        if state.is_over:
            return ActionResult.failure("Game is over")
        if not validate_technical_debt_reduction(state, self._history):
            return ActionResult.failure("Cannot reduce technical debt")

        piles = state.piles.copy()
        piles.discard.extend(piles.hand)
        piles.hand = []

        new_state = (
            state.with_piles(piles)
            .with_resources(technical_debt=max(0, state.resources.technical_debt - 2))
            .with_stats(tech_debt_reductions=state.stats.tech_debt_reductions + 1)
        )
        self._history.add_entry(
            HistoryAction.TECH_DEBT_REDUCTION,
            "Discarded all cards to reduce technical debt",
            state.resources,
            new_state.resources,
            round=state.stats.current_round,
        )
        self._state = new_state

        result = self._handle_end_turn()
        if result.success:
            result.data["technical_debt_reduced"] = (
                state.resources.technical_debt - new_state.resources.technical_debt
            )
        return result

    def _handle_end_turn(self) -> ActionResult:
        state = self._state
        if state.is_over:
            return ActionResult.failure("Game is over")

        discarded = state.piles.copy()
        discarded.discard.extend(discarded.hand)
        discarded.hand = []

        piles = discarded.copy()
        drawn, reshuffled = self._draw_into_hand(piles, HAND_SIZE)

        if drawn < HAND_SIZE:
            reason = f"Cannot draw {HAND_SIZE} cards, only {drawn} available"
            new_state = self._end_game(
                state.with_piles(discarded), GameEndState.LOST_NO_CARDS, reason
            )
            self._state = new_state
            return ActionResult.success_with_state(new_state, error=reason)

        closing_round = state.stats.current_round
        self._history.add_entry(
            HistoryAction.ROUND_END,
            f"Ended round {closing_round}",
            state.resources,
            state.resources,
            round=closing_round,
        )

        new_state = (
            state.with_piles(piles)
            .with_stats(current_round=closing_round + 1)
            .with_resources(
                productivity_points=max(0, BASE_PRODUCTIVITY - state.resources.technical_debt)
            )
        )
        self._history.add_entry(
            HistoryAction.ROUND_START,
            f"Started round {closing_round + 1}",
            state.resources,
            new_state.resources,
            round=closing_round + 1,
        )

        self._state = new_state
        return ActionResult.success_with_state(new_state, reshuffled=reshuffled, cards_drawn=drawn)

    def _handle_load_game(self, save_state: SaveState | None) -> ActionResult:
        if save_state is None:
            return ActionResult.failure("No save state provided")
        if save_state.version != SAVE_VERSION:
            return ActionResult.failure(
                f"Incompatible save version: {save_state.version} (expected {SAVE_VERSION})"
            )

        state = save_state.game_state.clone()
        self._state = state
        if save_state.history:
            self._history.replace(save_state.history)
        else:
            self._history.clear()
            self._history.add_entry(
                HistoryAction.ROUND_START,
                "Game loaded",
                None,
                state.resources,
                round=state.stats.current_round,
            )
        logger.debug("Loaded game %s at round %d", state.seed, state.stats.current_round)
        return ActionResult.success_with_state(state)

    # =========================================================================
    # Drawing
    # =========================================================================

    def draw_cards(self, count: int) -> ActionResult:
        """
        Draw cards requested by a DRAW_CARDS effect.

        Card plays only report cards_to_draw; the caller runs the draw
        (typically after an animation) through this method. Draws as
        many as are available, reshuffling the discard pile if needed.
        """
        if self._state is None:
            return ActionResult.failure("No game in progress")
        if self._state.is_over:
            return ActionResult.failure("Game is over")
        if count < 0:
            return ActionResult.failure(f"Cannot draw a negative number of cards: {count}")

        piles = self._state.piles.copy()
        drawn, reshuffled = self._draw_into_hand(piles, count)
        self._state = self._state.with_piles(piles)
        return ActionResult.success_with_state(self._state, cards_drawn=drawn, reshuffled=reshuffled)

    def _draw_into_hand(self, piles: GamePiles, count: int) -> tuple[int, bool]:
        """
        Move up to count cards from deck to hand, in place on piles.

        When the deck runs out the whole discard pile is shuffled in.
        Returns (cards drawn, whether a reshuffle happened).
        """
        drawn = 0
        reshuffled = False
        while drawn < count:
            if not piles.deck:
                if not piles.discard or reshuffled:
                    break
                piles.deck = shuffle_deck(piles.discard, self._rng)
                piles.discard = []
                reshuffled = True
            piles.hand.append(piles.deck.pop(0))
            drawn += 1
        return drawn, reshuffled

    # =========================================================================
    # Game end
    # =========================================================================

    def _end_game(self, state: GameState, end_state: GameEndState, reason: str) -> GameState:
        """Transition to GAME_OVER, stamping end time and (if won) score."""
        over = state._copy_with(
            phase=GamePhase.GAME_OVER,
            end_state=end_state,
            stats=state.stats.copy(end_time=time.time()),
        )
        if end_state == GameEndState.WON:
            over = over.with_stats(final_score=calculate_score(over))

        self._history.add_entry(
            HistoryAction.GAME_END,
            reason,
            state.resources,
            over.resources,
            round=over.stats.current_round,
        )
        logger.info(
            "Game %s over: %s after %d rounds (score=%s)",
            over.seed, end_state.value, over.stats.current_round, over.stats.final_score,
        )
        return over

    # =========================================================================
    # Previews
    # =========================================================================

    def prepare_card_play(self, card_instance_id: str) -> CardPlayPreview | None:
        """
        Preview a card play for animation. Side-effect free.

        Returns None if the card is not in hand.
        """
        if self._state is None:
            return None
        card = self._state.piles.find_in_hand(card_instance_id)
        if card is None:
            return None

        pool = [c for c in self._state.piles.hand if c.instance_id != card.instance_id]
        preview = CardPlayPreview(card=card)

        for requirement in card.card.requirements:
            if requirement.type == RequirementType.DISCARD_CARDS:
                target = preview.cards_to_discard
            elif requirement.type == RequirementType.SEND_TO_GRAVEYARD:
                target = preview.cards_to_graveyard
            else:
                continue
            for _ in range(min(requirement.value, len(pool))):
                target.append(pool.pop(self._preview_rng.randrange(len(pool))))

        for index, effect in enumerate(card.card.effects):
            if isinstance(effect, CoinFlipEffect):
                outcome = flip_coin(self._preview_rng)
                value = effect.heads_value if outcome == CoinFlipOutcome.HEADS else effect.tails_value
                preview.coin_flip_effects.append(
                    CoinFlipPreview(
                        effect_index=index,
                        effect=effect,
                        outcome=outcome,
                        resolved_value=value,
                    )
                )

        return preview

    def prepare_end_turn(self) -> EndTurnPreview | None:
        """Preview END_TURN: which cards leave the hand and whether a hand can be drawn."""
        if self._state is None:
            return None
        piles = self._state.piles
        available = len(piles.deck) + len(piles.discard) + len(piles.hand)
        return EndTurnPreview(
            cards_to_discard=list(piles.hand),
            cards_to_draw=min(HAND_SIZE, available),
            needs_reshuffle=len(piles.deck) < HAND_SIZE,
            will_lose=available < HAND_SIZE,
        )
