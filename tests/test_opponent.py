import pytest

from rps_arena.utils.constants import Gesture, Difficulty, COUNTER_MOVES
from rps_arena.game.opponent import OpponentEngine, choose_move, most_common_gesture

from conftest import ScriptedRng

ROCK, PAPER, SCISSORS = Gesture.ROCK, Gesture.PAPER, Gesture.SCISSORS


def test_counter_moves():
    assert COUNTER_MOVES == {ROCK: PAPER, PAPER: SCISSORS, SCISSORS: ROCK}


def test_easy_is_uniform_choice():
    rng = ScriptedRng(choices=[SCISSORS])
    assert choose_move(ROCK, Difficulty.EASY, [], rng=rng) == SCISSORS
    assert rng.random_calls == 0


def test_medium_counters_player_sometimes():
    assert choose_move(ROCK, "medium", [], rng=ScriptedRng(randoms=[0.29])) == PAPER
    assert choose_move(ROCK, "medium", [], rng=ScriptedRng(randoms=[0.3], choices=[ROCK])) == ROCK


def test_medium_without_player_gesture_is_random():
    rng = ScriptedRng(randoms=[0.0], choices=[SCISSORS])
    assert choose_move(None, Difficulty.MEDIUM, [], rng=rng) == SCISSORS
    assert rng.random_calls == 0


def test_hard_counters_the_habit():
    history = [SCISSORS, SCISSORS, PAPER]
    assert choose_move(PAPER, Difficulty.HARD, history, rng=ScriptedRng(randoms=[0.5])) == ROCK


def test_hard_falls_back_to_countering_current_move():
    history = [SCISSORS, SCISSORS, PAPER]
    rng = ScriptedRng(randoms=[0.6, 0.39])
    assert choose_move(PAPER, Difficulty.HARD, history, rng=rng) == SCISSORS
    assert rng.random_calls == 2


def test_hard_with_short_history_skips_pattern():
    rng = ScriptedRng(randoms=[0.1])
    assert choose_move(ROCK, Difficulty.HARD, [PAPER, PAPER], rng=rng) == PAPER
    assert rng.random_calls == 1


def test_hard_without_anything_to_go_on_is_random():
    rng = ScriptedRng(randoms=[0.9], choices=[PAPER])
    assert choose_move(None, Difficulty.HARD, [ROCK], rng=rng) == PAPER


def test_unknown_difficulty_is_rejected():
    with pytest.raises(ValueError):
        choose_move(ROCK, "impossible", [], rng=ScriptedRng())


def test_most_common_tie_keeps_first_seen():
    assert most_common_gesture([PAPER, ROCK, ROCK, PAPER]) == PAPER
    assert most_common_gesture([SCISSORS, ROCK, ROCK]) == ROCK
    assert most_common_gesture([]) is None


def test_history_is_bounded_and_skips_missing_gestures():
    opponent = OpponentEngine(rng=ScriptedRng())
    for gesture in [ROCK, None, PAPER, SCISSORS, ROCK, PAPER, SCISSORS]:
        opponent.record(gesture)
    assert list(opponent.history) == [PAPER, SCISSORS, ROCK, PAPER, SCISSORS]

    opponent.reset()
    assert len(opponent.history) == 0


def test_engine_uses_its_history():
    opponent = OpponentEngine(rng=ScriptedRng(randoms=[0.0]))
    for gesture in [ROCK, ROCK, PAPER]:
        opponent.record(gesture)
    assert opponent.choose(SCISSORS, Difficulty.HARD) == PAPER


def test_from_config():
    opponent = OpponentEngine.from_config({"opponent": {"history_length": 2, "medium_counter_chance": 1.0}},
                                          rng=ScriptedRng(randoms=[0.99]))
    assert opponent.history.maxlen == 2
    assert opponent.choose(ROCK, Difficulty.MEDIUM) == PAPER
