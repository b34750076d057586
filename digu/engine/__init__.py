"""
Core engine for the Digu package.

This package provides the game engine that owns a Digu session and drives
automated seats, implementing the game flow in a platform-agnostic way.
"""

from digu.engine.base import GameEngine
from digu.engine.digu import DiguEngine

__all__ = ["GameEngine", "DiguEngine"]
