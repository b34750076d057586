"""
Tests for the command line.
"""

import pytest

from digu.cli import main, parse_args


def test_play_is_default_command():
    args = parse_args(["--rounds", "2"])
    assert args.command == "play"
    assert args.rounds == 2
    assert args.policy == "reshuffle"
    assert args.delay == 0.0


def test_parse_verify_shuffle():
    args = parse_args(["verify-shuffle", "-t", "100", "-s", "4", "-vv"])
    assert args.command == "verify-shuffle"
    assert args.trials == 100
    assert args.seed == 4
    assert args.verbose == 2


def test_unknown_strategy_is_refused():
    with pytest.raises(SystemExit):
        parse_args(["play", "--strategy", "psychic"])


def test_play_rounds(capsys):
    assert main(["play", "--rounds", "2", "--seed", "5", "--quiet"]) == 0
    output = capsys.readouterr().out
    assert "== Round 1 ==" in output
    assert "Round 2: " in output
    assert "Final scores:" in output
    assert "You" in output


def test_play_never_drawing_human_wins(capsys):
    main(["play", "--rounds", "1", "--seed", "5", "--draw", "never", "--quiet"])
    assert "Round 1: You won" in capsys.readouterr().out


def test_play_end_round_policy(capsys):
    main(
        [
            "play",
            "--rounds",
            "1",
            "--seed",
            "5",
            "--draw",
            "always",
            "--policy",
            "end_round",
            "--quiet",
        ]
    )
    assert "Round 1: drawn" in capsys.readouterr().out


def test_play_turn_limit(capsys):
    main(["play", "-r", "1", "-s", "5", "--draw", "always", "--turn-limit", "3", "--quiet"])
    assert "Round 1: abandoned after 3 turns" in capsys.readouterr().out


def test_verify_shuffle(capsys):
    status = main(["verify-shuffle", "--trials", "300", "--seed", "9", "--alpha", "0"])
    output = capsys.readouterr().out
    assert status == 0
    assert "Shuffled 300 decks" in output
    assert "uniform" in output
