"""
Digu engine implementation.

This module provides the DiguEngine class, which owns the deck, hands, discard
pile, turn state and score table of a Digu session and is the only thing that
changes them. The human seat acts through :meth:`DiguEngine.draw` and
:meth:`DiguEngine.discard`; automated seats act in a background task that runs
after the human hands over the turn.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import asyncio
import logging
import random
import time

from digu.adapters import PlatformAdapter
from digu.common.card import Card
from digu.engine.base import GameEngine
from digu.events import EngineEventType
from digu.game.constants import (
    AUTOMATED_TURN_DELAY,
    DEFAULT_PLAYER_NAMES,
    DISCARD_PREVIEW,
    EMPTY_PILE_RESHUFFLE,
    EXTRA_CARD_SEAT,
    HAND_SIZE,
    HUMAN_SEAT,
    WIN_BONUS,
)
from digu.game.melds import is_meld
from digu.game.state import (
    ActionResult,
    DiguRules,
    GameStage,
    GameState,
    RejectionReason,
)
from digu.game.strategy import DiscardStrategy, get_strategy
from digu.game.transitions import StateTransitionEngine

logger = logging.getLogger("digu.engine")


class DiguEngine(GameEngine):
    """
    Engine implementation for Digu.

    All mutations are serialised by an ``asyncio.Lock``. While an automated
    seat is active, human actions are refused with ``NOT_YOUR_TURN`` rather
    than queued.

    Example:
        ```python
        engine = DiguEngine(DummyAdapter(), {"automated_turn_delay": 0})
        await engine.initialize()
        await engine.start_round()
        await engine.draw()
        result = await engine.discard(engine.state.players[0].hand[0])
        await engine.wait_for_human_turn()
        ```
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[random.Random] = None,
        strategy: Union[str, DiscardStrategy, None] = None,
    ):
        """
        Initialize the Digu engine.

        Args:
            adapter: Platform adapter to use for rendering
            config: Configuration options for the game
            rng: Random source for shuffles; seeded from ``config["seed"]``
                when omitted
            strategy: Discard strategy for automated seats, as a callable or
                a registered name; overrides ``config["strategy"]``
        """
        super().__init__(adapter, config)

        # Apply default configuration
        default_config = {
            "hand_size": HAND_SIZE,
            "extra_card_seat": EXTRA_CARD_SEAT,
            "win_bonus": WIN_BONUS,
            "empty_pile_policy": EMPTY_PILE_RESHUFFLE,
            "max_draws_per_turn": 0,  # 0 means unlimited
            "automated_turn_delay": AUTOMATED_TURN_DELAY,
            "discard_preview": DISCARD_PREVIEW,
            "player_names": DEFAULT_PLAYER_NAMES,
            "strategy": "first_card",
            "seed": None,
        }

        # Merge with provided config
        if config:
            default_config.update(config)

        self.config = default_config

        # Create the rules
        self.rules = DiguRules(
            hand_size=self.config["hand_size"],
            extra_card_seat=self.config["extra_card_seat"],
            win_bonus=self.config["win_bonus"],
            empty_pile_policy=self.config["empty_pile_policy"],
            max_draws_per_turn=self.config["max_draws_per_turn"],
            automated_turn_delay=self.config["automated_turn_delay"],
            discard_preview=self.config["discard_preview"],
            player_names=tuple(self.config["player_names"]),
        )

        self.rng = rng if rng is not None else random.Random(self.config["seed"])
        self.strategy = get_strategy(strategy or self.config["strategy"])

        self._state = StateTransitionEngine.new_game(self.rules)
        self._lock = asyncio.Lock()
        self._automated_task: Optional[asyncio.Task] = None
        self._pending_events: List[Tuple[str, Dict[str, Any]]] = []
        self._unsubscribe = None

    @property
    def state(self) -> GameState:
        """Read-only snapshot of the current game state."""
        return self._state

    @property
    def automated_turn_pending(self) -> bool:
        return self._automated_task is not None and not self._automated_task.done()

    async def initialize(self) -> None:
        """
        Initialize the engine and start forwarding events to the adapter.
        """
        await super().initialize()

        if self._unsubscribe is None:
            self._unsubscribe = self.event_bus.on_any(self._collect_event)

        self.event_bus.emit(
            EngineEventType.ENGINE_INIT,
            {
                "game_id": self._state.id,
                "engine_type": "digu",
                "config": self.config,
                "timestamp": time.time(),
            },
        )
        await self._flush_events()
        logger.info("Digu engine initialized for game %s", self._state.id)

    async def shutdown(self) -> None:
        """
        Let any automated turn finish, then shut down the engine.
        """
        await self.wait_for_human_turn()

        self.event_bus.emit(
            EngineEventType.ENGINE_SHUTDOWN,
            {"game_id": self._state.id, "timestamp": time.time()},
        )
        await self._flush_events()

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        logger.info("Digu engine shut down for game %s", self._state.id)
        await super().shutdown()

    async def start_round(self) -> GameState:
        """
        Shuffle, deal and hand the first turn to the human.

        An automated turn still in flight is allowed to finish first.

        Returns:
            The freshly dealt state
        """
        await self.wait_for_human_turn()

        async with self._lock:
            self._state = StateTransitionEngine.start_round(self._state, self.rng)
            await self.render_state()
            return self._state

    async def draw(self) -> ActionResult:
        """
        Draw the top card of the draw pile into the human's hand.

        The turn does not pass. If the draw pile is exhausted the
        ``empty_pile_policy`` applies, which may end the round drawn.

        Returns:
            ActionResult carrying the drawn card, or the rejection reason
        """
        async with self._lock:
            rejection = self._check_human_turn()
            if rejection is None:
                limit = self._state.rules.max_draws_per_turn
                if limit and self._state.draws_this_turn >= limit:
                    rejection = RejectionReason.DRAW_LIMIT_REACHED
            if rejection is not None:
                return await self._reject("draw", rejection)

            before = self._state.players[HUMAN_SEAT].hand
            self._state = StateTransitionEngine.draw_card(
                self._state, HUMAN_SEAT, self.rng
            )
            hand = self._state.players[HUMAN_SEAT].hand
            card = hand[-1] if len(hand) > len(before) else None

            await self.render_state()
            return self._result(card)

    async def discard(self, card: Card) -> ActionResult:
        """
        Discard a card from the human's hand.

        Emptying the hand wins the round. Otherwise the turn passes to the
        automated seats, which play in the background; use
        :meth:`wait_for_human_turn` to wait for them.

        Args:
            card: A card currently held by the human

        Returns:
            ActionResult with the updated hand and discard pile
        """
        async with self._lock:
            rejection = self._check_human_turn()
            if rejection is None and card not in self._state.players[HUMAN_SEAT].hand:
                rejection = RejectionReason.CARD_NOT_IN_HAND
            if rejection is not None:
                return await self._reject("discard", rejection, card=card)

            self._state = StateTransitionEngine.discard_card(
                self._state, HUMAN_SEAT, card
            )

            if self._state.stage == GameStage.AUTOMATED_TURN:
                self._schedule_automated_turns()

            await self.render_state()
            return self._result(card)

    async def check_meld(self, cards: Iterable[Card]) -> bool:
        """
        Check whether the cards form a legal meld. Nothing is changed.

        The result is forwarded to the adapter before this returns.

        Args:
            cards: Candidate cards, usually a selection from the human's hand

        Returns:
            True for a legal set or sequence
        """
        cards = list(cards)
        valid = is_meld(cards)
        logger.debug("Meld check %s -> %s", [str(c) for c in cards], valid)

        self.event_bus.emit(
            EngineEventType.MELD_CHECKED,
            {
                "game_id": self._state.id,
                "cards": [str(card) for card in cards],
                "valid": valid,
                "timestamp": time.time(),
            },
        )
        await self._flush_events()
        return valid

    async def reset_scores(self) -> GameState:
        """
        Zero the score table.

        Returns:
            The updated state
        """
        async with self._lock:
            self._state = StateTransitionEngine.reset_scores(self._state)
            await self.render_state()
            return self._state

    async def execute_player_action(self, action: str, **kwargs) -> Any:
        """
        Execute a human action given by name.

        Args:
            action: DRAW, DISCARD or CHECK_MELD
            **kwargs: ``card`` for DISCARD, ``cards`` for CHECK_MELD

        Returns:
            ActionResult for DRAW and DISCARD, bool for CHECK_MELD

        Raises:
            ValueError: If the action is unknown or its parameters are missing
        """
        match action.upper():
            case "DRAW":
                return await self.draw()
            case "DISCARD":
                card = kwargs.get("card")
                if card is None:
                    raise ValueError("Missing card to discard")
                return await self.discard(card)
            case "CHECK_MELD":
                return await self.check_meld(kwargs.get("cards", []))
            case _:
                raise ValueError(f"Unknown action: {action}")

    async def wait_for_human_turn(self) -> GameState:
        """
        Wait until scheduled automated turns have run to completion.

        Returns:
            The state once control is back with the human, or the round is over
        """
        task = self._automated_task
        if task is not None and not task.done():
            await task
        return self._state

    async def render_state(self) -> None:
        """
        Forward pending events and render the current state.

        Adapter failures are logged and reported as ERROR events; they never
        undo or stall the state change being rendered.
        """
        await self._flush_events()
        try:
            await self.adapter.render_game_state(self._state.to_adapter_format())
        except Exception as e:
            self._report_adapter_error("render_game_state", e)

    def _check_human_turn(self) -> Optional[RejectionReason]:
        if not self._state.round_in_progress:
            return RejectionReason.ROUND_NOT_IN_PROGRESS
        if self._state.stage != GameStage.HUMAN_TURN:
            return RejectionReason.NOT_YOUR_TURN
        return None

    async def _reject(
        self, action: str, reason: RejectionReason, card: Optional[Card] = None
    ) -> ActionResult:
        logger.warning(
            "Rejected %s%s: %s (stage %s, active seat %d)",
            action,
            f" {card}" if card is not None else "",
            reason.name,
            self._state.stage.name,
            self._state.active_player_index,
        )
        self.event_bus.emit(
            EngineEventType.ACTION_REJECTED,
            {
                "game_id": self._state.id,
                "action": action,
                "reason": reason.name,
                "card": str(card) if card is not None else None,
                "active_player_index": self._state.active_player_index,
                "timestamp": time.time(),
            },
        )
        await self._flush_events()
        return ActionResult(
            accepted=False,
            reason=reason,
            card=card,
            hand=self._state.players[HUMAN_SEAT].hand,
            discard_pile=self._state.discard_pile,
        )

    def _result(self, card: Optional[Card]) -> ActionResult:
        round_ended = self._state.stage == GameStage.ROUND_OVER
        return ActionResult(
            accepted=True,
            card=card,
            hand=self._state.players[HUMAN_SEAT].hand,
            discard_pile=self._state.discard_pile,
            round_ended=round_ended,
            outcome=self._state.outcome if round_ended else None,
        )

    def _schedule_automated_turns(self) -> None:
        self._automated_task = asyncio.create_task(self._run_automated_turns())
        self.event_bus.emit(
            EngineEventType.AUTOMATED_TURN_SCHEDULED,
            {
                "game_id": self._state.id,
                "player_index": self._state.active_player_index,
                "delay": self.rules.automated_turn_delay,
                "timestamp": time.time(),
            },
        )

    async def _run_automated_turns(self) -> None:
        while self._state.stage == GameStage.AUTOMATED_TURN:
            await asyncio.sleep(self.rules.automated_turn_delay)
            async with self._lock:
                self._state = StateTransitionEngine.play_automated_turn(
                    self._state, self._choose_discard, self.rng
                )
                await self.render_state()

    def _choose_discard(self, hand: Sequence[Card], state: GameState) -> Card:
        try:
            return self.strategy(hand, state)
        except Exception as e:
            logger.error(
                "Discard strategy failed for seat %d: %s",
                state.active_player_index,
                e,
                exc_info=True,
            )
            self.event_bus.emit(
                EngineEventType.ERROR,
                {
                    "game_id": state.id,
                    "player_index": state.active_player_index,
                    "error": str(e),
                    "timestamp": time.time(),
                },
            )
            return hand[0]

    def _collect_event(self, event: Tuple[str, Dict[str, Any]]) -> None:
        event_type, data = event
        if data.get("game_id") == self._state.id:
            self._pending_events.append((event_type, data))

    async def _flush_events(self) -> None:
        pending, self._pending_events = self._pending_events, []
        for event_type, data in pending:
            try:
                await self.adapter.notify_game_event(event_type, data)
            except Exception as e:
                # reported on the next flush
                self._report_adapter_error("notify_game_event", e)

    def _report_adapter_error(self, call: str, error: Exception) -> None:
        logger.error(
            "Adapter %s failed for game %s: %s",
            call,
            self._state.id,
            error,
            exc_info=True,
        )
        self.event_bus.emit(
            EngineEventType.ERROR,
            {
                "game_id": self._state.id,
                "player_index": None,
                "error": str(error),
                "source": call,
                "timestamp": time.time(),
            },
        )
