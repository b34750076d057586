"""
Base engine class for the Digu package.

This module provides the abstract base class for game engines. It defines the
common interface an engine offers to its presentation collaborators.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from digu.adapters import PlatformAdapter
from digu.events import EventBus


class GameEngine(ABC):
    """
    Abstract base class for game engines.

    This class defines the common interface that game engines must implement,
    providing methods for starting rounds, handling player actions, and
    rendering the game state through an adapter.
    """

    def __init__(self, adapter: PlatformAdapter, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine.

        Args:
            adapter: Platform adapter to use for rendering
            config: Configuration options for the game
        """
        self.adapter = adapter
        self.config = config or {}
        self.event_bus = EventBus.get_instance()

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the engine and prepare for a game.
        """
        await self.adapter.initialize()

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Shut down the engine and clean up resources.
        """
        await self.adapter.shutdown()

    @abstractmethod
    async def start_round(self) -> Any:
        """
        Deal a new round.
        """
        pass

    @abstractmethod
    async def execute_player_action(self, action: str, **kwargs) -> Any:
        """
        Execute a player action given by name.

        Args:
            action: Action to perform
            **kwargs: Action-specific parameters
        """
        pass

    @abstractmethod
    async def render_state(self) -> None:
        """
        Render the current game state.
        """
        pass
