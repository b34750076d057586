"""
Digu API module.

This module provides a high-level, platform-agnostic API for presentation code
driving a Digu session, supporting both synchronous and asynchronous operation.
Cards may be given as ``Card`` objects or in their text form (``"10♥"``).
"""

from typing import Any, Dict, Iterable, Optional, Union
import random

from digu.adapters import PlatformAdapter
from digu.common.card import Card
from digu.engine import DiguEngine
from digu.events import EngineEventType
from digu.game.state import ActionResult, GameState
from digu.game.strategy import DiscardStrategy
from digu.api.base import CardGame

CardLike = Union[Card, str]


def _to_card(card: CardLike) -> Card:
    return card if isinstance(card, Card) else Card.from_string(card)


class DiguGame(CardGame):
    """
    High-level API for Digu games.

    Example:
        ```python
        # Async usage
        game = DiguGame(config={"automated_turn_delay": 0.5})
        await game.initialize()
        await game.start_round()
        await game.draw()
        result = await game.discard("10♥")
        state = await game.wait_for_human_turn()
        await game.shutdown()

        # Sync usage; automated seats finish before each call returns
        game = DiguGame()
        game.initialize_sync()
        game.start_round_sync()
        game.draw_sync()
        game.discard_sync("10♥")
        ```
    """

    def __init__(
        self,
        adapter: Optional[PlatformAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[random.Random] = None,
        strategy: Union[str, DiscardStrategy, None] = None,
    ):
        """
        Initialize a new Digu game.

        Args:
            adapter: Platform adapter to use for rendering.
                   If None, a console adapter will be used.
            config: Configuration options passed to the engine
            rng: Random source for shuffles
            strategy: Discard strategy for automated seats
        """
        super().__init__(adapter, config)
        self._rng = rng
        self._strategy = strategy
        self.engine: Optional[DiguEngine] = None
        self.rounds_completed = 0

    async def initialize(self) -> None:
        """
        Initialize the adapter and engine. Calling it again is a no-op.
        """
        if self.engine is not None:
            return

        self.engine = DiguEngine(
            self.adapter, self.config, rng=self._rng, strategy=self._strategy
        )
        self._game_id = self.engine.state.id
        await self.engine.initialize()

        self.on(EngineEventType.ROUND_ENDED, self._on_round_ended)

    async def shutdown(self) -> None:
        """
        Shut down the engine and drop event handlers.
        """
        self.remove_handlers()
        if self.engine is not None:
            await self.engine.shutdown()

    async def start_round(self) -> GameState:
        return await self.engine.start_round()

    async def draw(self) -> ActionResult:
        """Draw a card for the human seat."""
        return await self.engine.draw()

    async def discard(
        self, card: CardLike, wait_for_automated: bool = False
    ) -> ActionResult:
        """
        Discard a card from the human seat's hand.

        Args:
            card: The card, as a Card or text such as ``"Q♣"``
            wait_for_automated: Return only after the automated seats have
                played and the turn is back with the human

        Raises:
            ValueError: If ``card`` is text that does not name a card
        """
        result = await self.engine.discard(_to_card(card))
        if wait_for_automated:
            await self.engine.wait_for_human_turn()
        return result

    async def check_meld(self, cards: Iterable[CardLike]) -> bool:
        """Check whether the cards form a legal meld."""
        return await self.engine.check_meld(_to_card(card) for card in cards)

    async def reset_scores(self) -> GameState:
        return await self.engine.reset_scores()

    async def wait_for_human_turn(self) -> GameState:
        return await self.engine.wait_for_human_turn()

    async def get_state(self) -> GameState:
        """
        Get the current game state snapshot.
        """
        return self.engine.state

    def get_scores(self) -> Dict[str, int]:
        """Score table keyed by display name."""
        return {player.name: player.score for player in self.engine.state.players}

    def _on_round_ended(self, data: Dict[str, Any]) -> None:
        if data.get("game_id") == self._game_id:
            self.rounds_completed += 1

    # Synchronous API wrappers

    def draw_sync(self) -> ActionResult:
        return self._run_async(self.draw())

    def discard_sync(self, card: CardLike) -> ActionResult:
        """
        Synchronous wrapper for discard; waits for the automated seats.
        """
        return self._run_async(self.discard(card, wait_for_automated=True))

    def check_meld_sync(self, cards: Iterable[CardLike]) -> bool:
        return self._run_async(self.check_meld(cards))

    def reset_scores_sync(self) -> GameState:
        return self._run_async(self.reset_scores())
