"""
State transition functions for the Digu card game.

This module provides pure functions for transitioning between game states,
without modifying the original state objects. Illegal transitions return the
original state unchanged; callers detect a refusal by identity.
"""

from typing import Optional
from dataclasses import replace
import logging
import random
import time

from digu.common.card import Card
from digu.common.deck import build_deck, shuffle
from digu.events import EventBus, EngineEventType
from digu.game.constants import EMPTY_PILE_RESHUFFLE, HUMAN_SEAT, NUM_PLAYERS
from digu.game.dealing import deal
from digu.game.scoring import apply_outcome, drawn_round, score_round
from digu.game.state import DiguRules, GameStage, GameState, PlayerState
from digu.game.strategy import DiscardStrategy, discard_first_card

logger = logging.getLogger("digu.game.transitions")


class StateTransitionEngine:
    """
    Pure functions for state transitions in Digu.

    This class contains static methods that implement game state transitions.
    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def new_game(rules: Optional[DiguRules] = None) -> GameState:
        """
        Create a session with four empty seats and zeroed scores.

        Args:
            rules: Rules for the session (defaults when omitted)

        Returns:
            Game state waiting for the first deal
        """
        game_rules = rules or DiguRules()
        players = tuple(
            PlayerState(index=i, name=name)
            for i, name in enumerate(game_rules.player_names)
        )
        return GameState(players=players, rules=game_rules)

    @staticmethod
    def start_round(state: GameState, rng: Optional[random.Random] = None) -> GameState:
        """
        Shuffle a fresh deck and deal a new round.

        Scores carry over; hands, draw pile and discard pile are replaced.

        Args:
            state: Current game state
            rng: Random source for the shuffle

        Returns:
            New game state with the human to act
        """
        cards = shuffle(build_deck(), rng)
        result = deal(
            cards,
            hand_size=state.rules.hand_size,
            num_players=NUM_PLAYERS,
            extra_card_seat=state.rules.extra_card_seat,
        )

        new_players = tuple(
            replace(player, hand=hand)
            for player, hand in zip(state.players, result.hands)
        )
        new_state = replace(
            state,
            players=new_players,
            draw_pile=result.draw_pile,
            discard_pile=result.discard_pile,
            stage=GameStage.HUMAN_TURN,
            active_player_index=HUMAN_SEAT,
            draws_this_turn=0,
            round_number=state.round_number + 1,
            outcome=None,
            timestamp=time.time(),
        )

        logger.info(
            "Round %d dealt, %d cards in the draw pile",
            new_state.round_number,
            new_state.deck_size,
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": state.id,
                "round_number": new_state.round_number,
                "timestamp": new_state.timestamp,
            },
        )
        event_bus.emit(
            EngineEventType.CARDS_DEALT,
            {
                "game_id": state.id,
                "round_number": new_state.round_number,
                "hand_sizes": [len(hand) for hand in new_state.hands],
                "deck_remaining": new_state.deck_size,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def replenish_draw_pile(
        state: GameState, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Turn the discard pile, minus its top card, into a new draw pile.

        Only applies under the "reshuffle" policy and when the draw pile is
        empty; otherwise the original state is returned.

        Args:
            state: Current game state
            rng: Random source for the shuffle

        Returns:
            New game state with a replenished draw pile
        """
        if state.draw_pile or state.rules.empty_pile_policy != EMPTY_PILE_RESHUFFLE:
            return state
        if len(state.discard_pile) <= 1:
            return state

        top = state.discard_pile[0]
        recycled = shuffle(list(state.discard_pile[1:]), rng)
        new_state = replace(
            state,
            draw_pile=tuple(recycled),
            discard_pile=(top,),
            timestamp=time.time(),
        )

        logger.warning(
            "Draw pile exhausted in round %d, recycled %d discards",
            state.round_number,
            len(recycled),
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.DRAW_PILE_REPLENISHED,
            {
                "game_id": state.id,
                "round_number": state.round_number,
                "cards_recycled": len(recycled),
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def draw_card(
        state: GameState, player_index: int, rng: Optional[random.Random] = None
    ) -> GameState:
        """
        Move the top card of the draw pile into a player's hand.

        An empty draw pile is handled by the rules' ``empty_pile_policy``: it
        is replenished from the discard pile, or the round ends drawn when
        that is not possible or not allowed.

        Args:
            state: Current game state
            player_index: Seat drawing the card
            rng: Random source used if the discard pile must be reshuffled

        Returns:
            New game state with the card drawn, or the original state if the
            draw is not legal
        """
        if not state.round_in_progress or state.active_player_index != player_index:
            return state
        limit = state.rules.max_draws_per_turn
        if limit and state.draws_this_turn >= limit:
            return state

        if not state.draw_pile:
            state = StateTransitionEngine.replenish_draw_pile(state, rng)
            if not state.draw_pile:
                return StateTransitionEngine.end_round_drawn(state)

        card = state.draw_pile[-1]
        player = state.players[player_index]
        new_players = list(state.players)
        new_players[player_index] = replace(player, hand=player.hand + (card,))

        new_state = replace(
            state,
            players=tuple(new_players),
            draw_pile=state.draw_pile[:-1],
            draws_this_turn=state.draws_this_turn + 1,
            timestamp=time.time(),
        )

        logger.debug("%s drew %s", player.name, card)

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.CARD_DRAWN,
            {
                "game_id": state.id,
                "player_index": player_index,
                "player_name": player.name,
                # automated seats draw face down
                "card": str(card) if player.is_human else None,
                "deck_remaining": new_state.deck_size,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def discard_card(state: GameState, player_index: int, card: Card) -> GameState:
        """
        Move a card from a player's hand to the top of the discard pile.

        Emptying the hand wins the round; otherwise the turn passes on.

        Args:
            state: Current game state
            player_index: Seat discarding
            card: Card to discard

        Returns:
            New game state, or the original state if the discard is not legal
        """
        if not state.round_in_progress or state.active_player_index != player_index:
            return state
        player = state.players[player_index]
        if card not in player.hand:
            return state

        hand = list(player.hand)
        hand.remove(card)
        new_players = list(state.players)
        new_players[player_index] = replace(player, hand=tuple(hand))

        new_state = replace(
            state,
            players=tuple(new_players),
            discard_pile=(card,) + state.discard_pile,
            timestamp=time.time(),
        )

        logger.debug("%s discarded %s", player.name, card)

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.CARD_DISCARDED,
            {
                "game_id": state.id,
                "player_index": player_index,
                "player_name": player.name,
                "card": str(card),
                "cards_left": len(hand),
                "timestamp": new_state.timestamp,
            },
        )

        if not hand:
            return StateTransitionEngine.end_round(new_state, player_index)
        return StateTransitionEngine.advance_turn(new_state)

    @staticmethod
    def advance_turn(state: GameState) -> GameState:
        """
        Pass the turn to the next seat, wrapping from 3 back to 0.

        Args:
            state: Current game state

        Returns:
            New game state with the next seat active
        """
        if not state.round_in_progress:
            return state

        next_index = (state.active_player_index + 1) % NUM_PLAYERS
        stage = GameStage.HUMAN_TURN if next_index == HUMAN_SEAT else GameStage.AUTOMATED_TURN
        new_state = replace(
            state,
            active_player_index=next_index,
            stage=stage,
            draws_this_turn=0,
            timestamp=time.time(),
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.TURN_CHANGED,
            {
                "game_id": state.id,
                "previous_player_index": state.active_player_index,
                "player_index": next_index,
                "player_name": new_state.active_player.name,
                "stage": stage.name,
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def play_automated_turn(
        state: GameState,
        strategy: DiscardStrategy = discard_first_card,
        rng: Optional[random.Random] = None,
    ) -> GameState:
        """
        Play one full turn for the active automated seat: draw, then discard.

        Args:
            state: Current game state
            strategy: Picks the card to discard from the hand after drawing
            rng: Random source used if the discard pile must be reshuffled

        Returns:
            New game state after the turn, or the original state when no
            automated seat is due to act
        """
        if state.stage != GameStage.AUTOMATED_TURN:
            return state

        player_index = state.active_player_index
        drawn = StateTransitionEngine.draw_card(state, player_index, rng)
        if drawn is state or not drawn.round_in_progress:
            return drawn

        hand = drawn.players[player_index].hand
        choice = strategy(hand, drawn)
        if choice not in hand:
            logger.warning(
                "Strategy chose %s which %s does not hold; discarding %s",
                choice,
                drawn.players[player_index].name,
                hand[0],
            )
            choice = hand[0]

        return StateTransitionEngine.discard_card(drawn, player_index, choice)

    @staticmethod
    def end_round(state: GameState, winner_index: int) -> GameState:
        """
        Finish the round with a winner and update the score table.

        Args:
            state: Current game state
            winner_index: Seat that emptied its hand

        Returns:
            New game state with the outcome recorded and scores applied
        """
        outcome = score_round(
            state.hands,
            winner_index,
            win_bonus=state.rules.win_bonus,
            labels=state.rules.player_names,
        )
        new_scores = apply_outcome(state.scores, outcome)
        new_players = tuple(
            replace(player, score=score)
            for player, score in zip(state.players, new_scores)
        )
        new_state = replace(
            state,
            players=new_players,
            stage=GameStage.ROUND_OVER,
            outcome=outcome,
            timestamp=time.time(),
        )

        logger.info(
            "Round %d won by %s, scores now %s",
            state.round_number,
            outcome.winner_label,
            list(new_scores),
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "round_number": state.round_number,
                "winner_index": winner_index,
                "winner_name": outcome.winner_label,
                "reason": outcome.reason.name,
                "penalties": list(outcome.penalties),
                "timestamp": new_state.timestamp,
            },
        )
        event_bus.emit(
            EngineEventType.SCORES_UPDATED,
            {
                "game_id": state.id,
                "round_number": state.round_number,
                "scores": list(new_scores),
                "deltas": list(outcome.score_deltas),
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def end_round_drawn(state: GameState) -> GameState:
        """
        Finish the round without a winner because no card can be drawn.

        The score table is left untouched.

        Args:
            state: Current game state

        Returns:
            New game state with a drawn outcome
        """
        outcome = drawn_round(len(state.players))
        new_state = replace(
            state, stage=GameStage.ROUND_OVER, outcome=outcome, timestamp=time.time()
        )

        logger.warning(
            "Round %d ended drawn: draw pile exhausted (policy %s)",
            state.round_number,
            state.rules.empty_pile_policy,
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.ROUND_ENDED,
            {
                "game_id": state.id,
                "round_number": state.round_number,
                "winner_index": None,
                "winner_name": None,
                "reason": outcome.reason.name,
                "penalties": list(outcome.penalties),
                "timestamp": new_state.timestamp,
            },
        )

        return new_state

    @staticmethod
    def reset_scores(state: GameState) -> GameState:
        """
        Zero every seat's cumulative score.

        Args:
            state: Current game state

        Returns:
            New game state with a fresh score table
        """
        new_players = tuple(replace(player, score=0) for player in state.players)
        new_state = replace(state, players=new_players, timestamp=time.time())

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.SCORES_RESET,
            {"game_id": state.id, "timestamp": new_state.timestamp},
        )

        return new_state
