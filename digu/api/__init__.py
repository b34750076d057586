"""
API module for Digu.

This module provides high-level, platform-agnostic APIs for working with the
Digu engine, supporting both synchronous and asynchronous operation.
"""

from digu.api.base import CardGame
from digu.api.digu import DiguGame

__all__ = ["CardGame", "DiguGame"]
