"""
Command-line interface adapter for the Digu engine.

This module provides a text view of the table for console sessions and
simulations.
"""

import sys
from typing import Dict, Any, Optional, TextIO, Union
from enum import Enum

from digu.adapters.base import PlatformAdapter

# Events worth a line of output; the rest are only visible through rendering
_ANNOUNCED = {
    "ROUND_STARTED",
    "DRAW_PILE_REPLENISHED",
    "ROUND_ENDED",
    "ACTION_REJECTED",
}


class ConsoleAdapter(PlatformAdapter):
    """
    Console adapter that prints the table after every engine update.

    Only the human's hand is shown; automated seats show their card count.
    """

    def __init__(self, stream: Optional[TextIO] = None, show_states: bool = True):
        """
        Initialize the console adapter.

        Args:
            stream: Where to write; defaults to stdout
            show_states: Print every rendered state, not just announcements
        """
        self.stream = stream or sys.stdout
        self.show_states = show_states

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        if not self.show_states:
            return

        self._write(
            f"--- Round {state['round_number']} | {state['stage']} | "
            f"turn: {state['active_player']} | draw pile: {state['deck_remaining']}"
        )
        discard = " ".join(state["discard_pile"]) or "(empty)"
        self._write(f"Discard pile: {discard}")
        for player in state["players"]:
            if player["cards"]:
                cards = " ".join(player["cards"])
            else:
                cards = f"{player['hand_size']} cards"
            self._write(f"  {player['name']:<10} {player['score']:>5} pts  {cards}")

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        name = event_type.name if isinstance(event_type, Enum) else event_type
        if name not in _ANNOUNCED:
            return

        if name == "ROUND_STARTED":
            self._write(f"== Round {data['round_number']} ==")
        elif name == "DRAW_PILE_REPLENISHED":
            self._write(f"Draw pile empty: reshuffled {data['cards_recycled']} discards")
        elif name == "ROUND_ENDED":
            if data["winner_name"] is None:
                self._write("Round ended in a draw: no cards left to draw")
            else:
                self._write(f"{data['winner_name']} won the round!")
        elif name == "ACTION_REJECTED":
            self._write(f"Action {data['action']} rejected: {data['reason']}")
