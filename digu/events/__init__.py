"""
Event system for the Digu engine.

This package provides the event bus that the engine publishes to and that
presentation collaborators subscribe to.
"""

from digu.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
