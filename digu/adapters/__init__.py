"""
Platform adapters for the Digu engine.

This package provides adapters that translate between the game-state engine
and the platforms that present it (console, tests, a GUI, ...).
"""

from digu.adapters.base import PlatformAdapter
from digu.adapters.cli import ConsoleAdapter
from digu.adapters.dummy import DummyAdapter

__all__ = ["PlatformAdapter", "ConsoleAdapter", "DummyAdapter"]
