import random
from collections import deque

from ..utils.constants import *


def most_common_gesture(history):
    """Most frequent gesture in history; on a tie the first-seen gesture wins."""
    counts = {}
    for gesture in history:
        counts[gesture] = counts.get(gesture, 0) + 1

    most_common, max_count = None, 0
    for gesture, count in counts.items():
        if count > max_count:
            most_common, max_count = gesture, count
    return most_common


def choose_move(player_gesture, difficulty, history, rng=random,
                medium_counter_chance=MEDIUM_COUNTER_CHANCE,
                hard_pattern_chance=HARD_PATTERN_CHANCE,
                hard_counter_chance=HARD_COUNTER_CHANCE,
                min_pattern_history=MIN_PATTERN_HISTORY):
    """Pick the computer's move for one round"""
    difficulty = Difficulty(difficulty)

    if difficulty == Difficulty.MEDIUM:
        # Sometimes counter the player's current move
        if player_gesture is not None and rng.random() < medium_counter_chance:
            return COUNTER_MOVES[player_gesture]

    elif difficulty == Difficulty.HARD:
        # Pattern learning: counter the player's habit
        if len(history) >= min_pattern_history:
            habit = most_common_gesture(history)
            if habit is not None and rng.random() < hard_pattern_chance:
                return COUNTER_MOVES[habit]
        if player_gesture is not None and rng.random() < hard_counter_chance:
            return COUNTER_MOVES[player_gesture]

    return rng.choice(GESTURES)


class OpponentEngine:
    """Computer player. Owns the bounded history of the player's resolved gestures."""

    def __init__(self, rng=None, history_length=MAX_HISTORY_LENGTH,
                 min_pattern_history=MIN_PATTERN_HISTORY,
                 medium_counter_chance=MEDIUM_COUNTER_CHANCE,
                 hard_pattern_chance=HARD_PATTERN_CHANCE,
                 hard_counter_chance=HARD_COUNTER_CHANCE):
        self.rng = rng or random.Random()
        self.history = deque(maxlen=history_length)
        self.min_pattern_history = min_pattern_history
        self.medium_counter_chance = medium_counter_chance
        self.hard_pattern_chance = hard_pattern_chance
        self.hard_counter_chance = hard_counter_chance

    @classmethod
    def from_config(cls, cfg, rng=None):
        o = (cfg or {}).get("opponent", {})
        return cls(
            rng=rng,
            history_length=o.get("history_length", MAX_HISTORY_LENGTH),
            min_pattern_history=o.get("min_pattern_history", MIN_PATTERN_HISTORY),
            medium_counter_chance=o.get("medium_counter_chance", MEDIUM_COUNTER_CHANCE),
            hard_pattern_chance=o.get("hard_pattern_chance", HARD_PATTERN_CHANCE),
            hard_counter_chance=o.get("hard_counter_chance", HARD_COUNTER_CHANCE),
        )

    def choose(self, player_gesture, difficulty):
        return choose_move(
            player_gesture,
            difficulty,
            self.history,
            rng=self.rng,
            medium_counter_chance=self.medium_counter_chance,
            hard_pattern_chance=self.hard_pattern_chance,
            hard_counter_chance=self.hard_counter_chance,
            min_pattern_history=self.min_pattern_history,
        )

    def record(self, player_gesture):
        if player_gesture is not None:
            self.history.append(player_gesture)

    def reset(self):
        self.history.clear()
