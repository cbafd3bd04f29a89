import pytest

from rps_arena.utils.constants import Gesture, Outcome, MatchMode, GESTURES
from rps_arena.utils.errors import MatchDecidedError, RoundInProgressError
from rps_arena.game.game_logic import MatchController, determine_winner
from rps_arena.game.opponent import OpponentEngine

ROCK, PAPER, SCISSORS = Gesture.ROCK, Gesture.PAPER, Gesture.SCISSORS
WINNING_PAIRS = {(ROCK, SCISSORS), (PAPER, ROCK), (SCISSORS, PAPER)}


def play(controller, player, computer):
    controller.begin_round()
    record = controller.play_round(player, computer)
    return record, controller.check_match_winner()


def test_no_gesture_always_loses():
    for computer in GESTURES:
        assert determine_winner(None, computer) == Outcome.LOSE


def test_same_gesture_ties():
    for gesture in GESTURES:
        assert determine_winner(gesture, gesture) == Outcome.TIE


def test_cyclic_dominance():
    for player in GESTURES:
        for computer in GESTURES:
            outcome = determine_winner(player, computer)
            if (player, computer) in WINNING_PAIRS:
                assert outcome == Outcome.WIN
            elif player != computer:
                assert outcome == Outcome.LOSE


def test_round_scores_and_counter():
    controller = MatchController(MatchMode.ENDLESS)
    record, _ = play(controller, ROCK, SCISSORS)
    assert record.outcome == Outcome.WIN
    assert record.round_number == 1
    assert (record.player_score, record.computer_score) == (1, 0)

    play(controller, ROCK, ROCK)
    play(controller, None, PAPER)
    assert controller.state.player_wins == 1
    assert controller.state.computer_wins == 1
    assert controller.state.round_number == 4
    assert not controller.state.active


def test_best_of_three_decided_for_player():
    controller = MatchController("3")
    assert controller.wins_needed == 2
    _, result = play(controller, PAPER, ROCK)
    assert result is None
    _, result = play(controller, SCISSORS, ROCK)
    assert result is None
    _, result = play(controller, SCISSORS, PAPER)
    assert result.winner_is_player
    assert (result.player_score, result.computer_score) == (2, 1)
    assert result.rounds_played == 3


def test_best_of_five_decided_for_computer():
    controller = MatchController("5")
    assert controller.wins_needed == 3
    for _ in range(2):
        _, result = play(controller, ROCK, PAPER)
        assert result is None
    _, result = play(controller, ROCK, PAPER)
    assert result is not None
    assert not result.winner_is_player


def test_player_checked_before_computer():
    controller = MatchController("3")
    controller.state.player_wins = 2
    controller.state.computer_wins = 2
    assert controller.check_match_winner().winner_is_player


def test_decided_match_stays_decided():
    controller = MatchController("3")
    play(controller, ROCK, SCISSORS)
    _, result = play(controller, ROCK, SCISSORS)
    controller.state.computer_wins = 5
    assert controller.check_match_winner() is result


def test_endless_never_decides():
    controller = MatchController(MatchMode.ENDLESS)
    assert controller.wins_needed is None
    for _ in range(10):
        _, result = play(controller, ROCK, SCISSORS)
        assert result is None


def test_single_round_in_flight():
    controller = MatchController("3")
    controller.begin_round()
    with pytest.raises(RoundInProgressError):
        controller.begin_round()
    controller.play_round(ROCK, ROCK)
    controller.begin_round()


def test_no_rounds_after_match_until_new_match():
    controller = MatchController("3")
    play(controller, ROCK, SCISSORS)
    play(controller, ROCK, SCISSORS)
    with pytest.raises(MatchDecidedError):
        controller.begin_round()

    controller.new_match()
    assert not controller.match_decided
    assert controller.state.round_number == 1
    assert controller.match_number == 2
    controller.begin_round()


def test_mode_change_resets_everything():
    opponent = OpponentEngine()
    opponent.record(ROCK)
    controller = MatchController("3", opponent=opponent)
    play(controller, ROCK, SCISSORS)

    controller.set_mode("5")
    assert controller.state.mode == MatchMode.BEST_OF_5
    assert (controller.state.player_wins, controller.state.computer_wins) == (0, 0)
    assert controller.state.round_number == 1
    assert controller.current_round is None
    assert len(opponent.history) == 0


def test_rounds_are_kept_across_matches():
    controller = MatchController("3")
    play(controller, ROCK, SCISSORS)
    controller.reset()
    play(controller, PAPER, PAPER)
    assert [r.match_number for r in controller.rounds] == [1, 2]
    assert controller.rounds[1].to_dict()["player"] == "paper"


def test_get_results():
    controller = MatchController("5")
    play(controller, None, ROCK)
    assert controller.get_results() == {
        "mode": "5",
        "player_score": 0,
        "computer_score": 1,
        "rounds_played": 1,
        "round": 2,
    }
