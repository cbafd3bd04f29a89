import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..utils.constants import *
from ..utils.errors import MatchDecidedError, RoundInProgressError

logger = logging.getLogger(__name__)


def determine_winner(player_gesture, computer_gesture):
    """Outcome of a round from the player's side. No player gesture is a loss."""
    if player_gesture is None:
        return Outcome.LOSE
    if player_gesture == computer_gesture:
        return Outcome.TIE
    if GESTURE_RULES[player_gesture] == computer_gesture:
        return Outcome.WIN
    return Outcome.LOSE


@dataclass
class RoundRecord:
    round_number: int
    player_gesture: Optional[Gesture]
    computer_gesture: Gesture
    outcome: Outcome
    player_score: int = 0
    computer_score: int = 0
    match_number: int = 1

    def to_dict(self):
        return {
            "round": self.round_number,
            "player": self.player_gesture.value if self.player_gesture else None,
            "computer": self.computer_gesture.value,
            "outcome": self.outcome.value,
            "player_score": self.player_score,
            "computer_score": self.computer_score,
            "match": self.match_number,
        }


@dataclass
class MatchState:
    mode: MatchMode = MatchMode.BEST_OF_3
    player_wins: int = 0
    computer_wins: int = 0
    round_number: int = 1
    active: bool = False


@dataclass(frozen=True)
class MatchResult:
    winner_is_player: bool
    player_score: int
    computer_score: int
    mode: MatchMode
    rounds_played: int


class MatchController:
    """Round and match lifecycle: scores, round counter, best-of-N termination.

    Only one round may be in flight at a time. Once a best-of match is
    decided no round can start until ``new_match`` or ``reset``.
    """

    def __init__(self, mode=MatchMode.BEST_OF_3, opponent=None):
        self.state = MatchState(mode=MatchMode(mode))
        self.opponent = opponent
        self.result: Optional[MatchResult] = None
        self.current_round: Optional[RoundRecord] = None
        self.rounds: List[RoundRecord] = []
        self.match_number = 1

    @property
    def wins_needed(self):
        if self.state.mode == MatchMode.ENDLESS:
            return None
        return math.ceil(int(self.state.mode.value) / 2)

    @property
    def match_decided(self):
        return self.result is not None

    def begin_round(self):
        if self.state.active:
            raise RoundInProgressError("a round is already in progress")
        if self.match_decided:
            raise MatchDecidedError("the match is over, start a new match first")
        self.state.active = True
        self.current_round = None

    def play_round(self, player_gesture, computer_gesture):
        """Score one round, advance the counter and release the in-flight guard"""
        outcome = determine_winner(player_gesture, computer_gesture)

        if outcome == Outcome.WIN:
            self.state.player_wins += 1
        elif outcome == Outcome.LOSE:
            self.state.computer_wins += 1

        record = RoundRecord(
            round_number=self.state.round_number,
            player_gesture=player_gesture,
            computer_gesture=computer_gesture,
            outcome=outcome,
            player_score=self.state.player_wins,
            computer_score=self.state.computer_wins,
            match_number=self.match_number,
        )
        self.rounds.append(record)
        self.current_round = record
        self.state.round_number += 1
        self.state.active = False

        logger.info(
            "Round %d: %s vs %s -> %s (%d-%d)",
            record.round_number,
            player_gesture.value if player_gesture else "none",
            computer_gesture.value,
            outcome.value,
            self.state.player_wins,
            self.state.computer_wins,
        )
        return record

    def check_match_winner(self):
        """Decide the match if either side reached the wins needed. Player is checked first."""
        if self.match_decided:
            return self.result
        wins_needed = self.wins_needed
        if wins_needed is None:
            return None

        if self.state.player_wins >= wins_needed:
            winner_is_player = True
        elif self.state.computer_wins >= wins_needed:
            winner_is_player = False
        else:
            return None

        self.result = MatchResult(
            winner_is_player=winner_is_player,
            player_score=self.state.player_wins,
            computer_score=self.state.computer_wins,
            mode=self.state.mode,
            rounds_played=self.state.round_number - 1,
        )
        p, c = self.state.player_wins, self.state.computer_wins
        logger.info(
            "Match decided: %s wins %d-%d",
            "player" if winner_is_player else "computer",
            p if winner_is_player else c,
            c if winner_is_player else p,
        )
        return self.result

    def get_results(self):
        return {
            "mode": self.state.mode.value,
            "player_score": self.state.player_wins,
            "computer_score": self.state.computer_wins,
            "rounds_played": self.state.round_number - 1,
            "round": self.state.round_number,
        }

    def set_mode(self, mode):
        self.state.mode = MatchMode(mode)
        self.reset()

    def new_match(self):
        self.reset()

    def reset(self):
        if self.state.round_number > 1:
            self.match_number += 1
        self.state = MatchState(mode=self.state.mode)
        self.result = None
        self.current_round = None
        if self.opponent is not None:
            self.opponent.reset()
