"""
Base adapter interface for the Digu engine.

This module defines the interface that platform-specific adapters must implement
to present the Digu engine's state to a user.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Union
import asyncio
from enum import Enum


class PlatformAdapter(ABC):
    """
    Base interface for platform-specific adapters.

    Adapters only read state: they are handed serialised snapshots to render
    and event notifications to react to. All game actions go through the
    engine, never through an adapter.
    """

    @abstractmethod
    async def render_game_state(self, state: Dict[str, Any]) -> None:
        """
        Render the current game state to the platform.

        Args:
            state: The current game state in adapter format
        """
        pass

    @abstractmethod
    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        """
        Notify the platform of a game event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    # The following methods have default implementations but can be overridden

    async def initialize(self) -> None:
        """
        Initialize the adapter.

        This method is called when the adapter is first connected to the engine.
        """
        pass

    async def shutdown(self) -> None:
        """
        Shutdown the adapter.

        This method is called when the engine is shutting down.
        """
        pass

    def get_sync_methods(self) -> Dict[str, callable]:
        """
        Get a dictionary of synchronous methods for platforms that don't support async.

        Returns:
            A dictionary mapping method names to synchronous wrapper functions
        """
        methods = {}

        def wrap_async(async_func):
            def sync_wrapper(*args, **kwargs):
                loop = asyncio.new_event_loop()
                try:
                    return loop.run_until_complete(async_func(*args, **kwargs))
                finally:
                    loop.close()

            return sync_wrapper

        for name in [
            "render_game_state",
            "notify_game_event",
            "initialize",
            "shutdown",
        ]:
            methods[name] = wrap_async(getattr(self, name))

        return methods
