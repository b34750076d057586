"""
Command line for Digu.

``python -m digu play`` simulates rounds with a scripted human seat and prints
the results; ``python -m digu verify-shuffle`` runs the shuffle uniformity
check.
"""

import argparse
import asyncio
import logging
import random
import sys
from typing import List, Optional

from digu.adapters import ConsoleAdapter
from digu.api import DiguGame
from digu.game.constants import EMPTY_PILE_POLICIES, EMPTY_PILE_RESHUFFLE, HUMAN_SEAT
from digu.game.strategy import STRATEGIES, get_strategy
from digu.verification import shuffle_uniformity

logger = logging.getLogger("digu.cli")

COMMANDS = ("play", "verify-shuffle")
DRAW_POLICIES = ("always", "never", "alternate")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="show log output (-v for info, -vv for debug)",
    )

    parser = argparse.ArgumentParser(
        prog="digu", description="Simulate Digu rounds or verify the shuffle."
    )
    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser(
        "play", parents=[common], help="simulate rounds (default)"
    )
    play.add_argument(
        "-r", "--rounds", type=int, default=3, help="rounds to play (default: 3)"
    )
    play.add_argument("-s", "--seed", type=int, default=None, help="shuffle seed")
    play.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        default="first_card",
        help="discard strategy for every seat (default: first_card)",
    )
    play.add_argument(
        "--policy",
        choices=EMPTY_PILE_POLICIES,
        default=EMPTY_PILE_RESHUFFLE,
        help="what happens when the draw pile runs out (default: reshuffle)",
    )
    play.add_argument(
        "--draw",
        choices=DRAW_POLICIES,
        default="alternate",
        help="when the scripted human seat draws before discarding (default: alternate)",
    )
    play.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="seconds automated seats wait before acting (default: 0)",
    )
    play.add_argument(
        "--turn-limit",
        type=int,
        default=500,
        help="human turns before an unfinished round is abandoned (default: 500)",
    )
    play.add_argument(
        "--quiet", action="store_true", help="only print round results"
    )

    verify = subparsers.add_parser(
        "verify-shuffle",
        parents=[common],
        help="chi-square check of shuffle uniformity",
    )
    verify.add_argument(
        "-t", "--trials", type=int, default=5000, help="decks to shuffle (default: 5000)"
    )
    verify.add_argument("-s", "--seed", type=int, default=None, help="shuffle seed")
    verify.add_argument(
        "--alpha", type=float, default=0.01, help="significance level (default: 0.01)"
    )

    argv = list(sys.argv[1:] if argv is None else argv)
    # "play" is the default command
    if not set(argv) & set(COMMANDS + ("-h", "--help")):
        argv.insert(0, "play")
    return parser.parse_args(argv)


def _should_draw(policy: str, turn: int) -> bool:
    if policy == "always":
        return True
    if policy == "never":
        return False
    return turn % 2 == 0


async def play(args: argparse.Namespace) -> int:
    """
    Play ``args.rounds`` rounds with the human seat scripted by the strategy.
    """
    strategy = get_strategy(args.strategy)
    game = DiguGame(
        adapter=ConsoleAdapter(show_states=not args.quiet),
        config={
            "empty_pile_policy": args.policy,
            "automated_turn_delay": args.delay,
        },
        rng=random.Random(args.seed),
        strategy=strategy,
    )
    await game.initialize()

    try:
        for _ in range(args.rounds):
            state = await game.start_round()
            turn = 0
            while state.round_in_progress and turn < args.turn_limit:
                if _should_draw(args.draw, turn):
                    await game.draw()
                    state = await game.get_state()
                    if not state.round_in_progress:
                        break
                hand = state.players[HUMAN_SEAT].hand
                await game.discard(strategy(hand, state), wait_for_automated=True)
                state = await game.get_state()
                turn += 1

            if state.round_in_progress:
                logger.warning("Round %d abandoned after %d turns", state.round_number, turn)
                print(f"Round {state.round_number}: abandoned after {turn} turns")
            elif state.outcome.is_draw:
                print(f"Round {state.round_number}: drawn, draw pile exhausted")
            else:
                print(f"Round {state.round_number}: {state.outcome.winner_label} won")

        print("Final scores:")
        for name, score in game.get_scores().items():
            print(f"  {name:<10} {score:>6}")
    finally:
        await game.shutdown()

    return 0


def verify_shuffle(args: argparse.Namespace) -> int:
    report = shuffle_uniformity(args.trials, random.Random(args.seed))
    print(f"Shuffled {report.trials} decks")
    print(
        f"chi-square = {report.chi_square:.1f} on {report.degrees_of_freedom} "
        f"degrees of freedom, p = {report.p_value:.4f}"
    )
    print(f"smallest per-card p = {report.min_card_p_value:.4f}")
    passed = report.passed(args.alpha)
    print("uniform" if passed else f"NOT uniform at alpha = {args.alpha}")
    return 0 if passed else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    level = {0: logging.ERROR, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(
        level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    if args.command == "verify-shuffle":
        return verify_shuffle(args)
    return asyncio.run(play(args))
