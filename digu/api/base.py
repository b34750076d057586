"""
Base API module for Digu.

This module provides the abstract base class for platform-agnostic game APIs
that wrap an engine, with event helpers and synchronous wrappers for callers
that do not run an event loop of their own.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar, Union
import threading
import time
import uuid

from digu.adapters import PlatformAdapter, ConsoleAdapter
from digu.events import EventBus, EngineEventType, EventPriority

# Type variable for game-specific state types
T = TypeVar("T")


class CardGame(ABC):
    """
    Abstract base class for card game APIs.

    Attributes:
        adapter: The platform adapter used for presentation
        config: Game configuration options
        event_bus: The event bus for event-based communication
        event_handlers: Unsubscribe functions of handlers registered here
    """

    def __init__(
        self,
        adapter: Optional[PlatformAdapter] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a new card game.

        Args:
            adapter: Platform adapter to use for rendering.
                    If None, a console adapter will be used.
            config: Configuration options for the game
        """
        self.adapter = adapter or ConsoleAdapter()
        self.config = config or {}
        self.event_bus = EventBus.get_instance()
        self.event_handlers = {}
        self._loop = None  # Event loop for the synchronous wrappers
        self._async_lock = threading.Lock()
        self._game_id = str(uuid.uuid4())

    @abstractmethod
    async def initialize(self) -> None:
        """
        Initialize the game and prepare for play.
        """
        await self.adapter.initialize()

    @abstractmethod
    async def shutdown(self) -> None:
        """
        Shut down the game and clean up resources.
        """
        await self.adapter.shutdown()

    @abstractmethod
    async def start_round(self) -> T:
        """
        Deal a new round.
        """
        pass

    @abstractmethod
    async def get_state(self) -> T:
        """
        Get the current game state.
        """
        pass

    @staticmethod
    def _resolve_event_type(
        event_type: Union[str, EngineEventType]
    ) -> Union[str, EngineEventType]:
        # Convert string event types to enum if possible
        if isinstance(event_type, str):
            try:
                return EngineEventType[event_type.upper()]
            except KeyError:
                pass
        return event_type

    def on(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Register an event handler.

        Args:
            event_type: Type of event to listen for
            handler: Event handler function
            priority: Priority level for the handler

        Returns:
            Function to call to unsubscribe the handler
        """
        event_type = self._resolve_event_type(event_type)
        unsubscribe_func = self.event_bus.on(event_type, handler, priority)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    def once(
        self,
        event_type: Union[str, EngineEventType],
        handler: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Register an event handler that will be called only once.

        Args:
            event_type: Type of event to listen for
            handler: Event handler function
            priority: Priority level for the handler

        Returns:
            Function to call to unsubscribe the handler
        """
        event_type = self._resolve_event_type(event_type)
        unsubscribe_func = self.event_bus.once(event_type, handler, priority)
        self.event_handlers.setdefault(event_type, []).append(unsubscribe_func)
        return unsubscribe_func

    def emit(
        self, event_type: Union[str, EngineEventType], data: Dict[str, Any]
    ) -> None:
        """
        Emit an event to the event bus.

        Args:
            event_type: Type of event to emit
            data: Event data
        """
        data.setdefault("game_id", self._game_id)
        data.setdefault("timestamp", time.time())
        self.event_bus.emit(self._resolve_event_type(event_type), data)

    def remove_handlers(self) -> None:
        """Unsubscribe every handler registered through this game."""
        for unsubscribe_funcs in self.event_handlers.values():
            for unsubscribe in unsubscribe_funcs:
                unsubscribe()
        self.event_handlers.clear()

    # Synchronous API wrappers

    def initialize_sync(self) -> None:
        """
        Synchronous wrapper for initialize method.
        """
        return self._run_async(self.initialize())

    def shutdown_sync(self) -> None:
        """
        Synchronous wrapper for shutdown method.
        """
        try:
            return self._run_async(self.shutdown())
        finally:
            with self._async_lock:
                if self._loop is not None and not self._loop.is_closed():
                    self._loop.close()
                self._loop = None

    def start_round_sync(self) -> T:
        """
        Synchronous wrapper for start_round method.
        """
        return self._run_async(self.start_round())

    def get_state_sync(self) -> T:
        """
        Synchronous wrapper for get_state method.
        """
        return self._run_async(self.get_state())

    # Utility methods for async/sync conversion

    def _run_async(self, coro):
        """
        Run an async coroutine from a synchronous context.

        Every call runs on the same private event loop so that background
        tasks created by one call can be awaited by the next.

        Args:
            coro: Coroutine to run

        Returns:
            Result of the coroutine
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            coro.close()
            raise RuntimeError(
                "Attempting to use synchronous method in async mode. "
                "Use the async version of this method instead."
            )

        with self._async_lock:
            if self._loop is None or self._loop.is_closed():
                self._loop = asyncio.new_event_loop()
            return self._loop.run_until_complete(coro)
