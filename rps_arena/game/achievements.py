import json
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Set

from ..utils.constants import *
from ..utils.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    unlocked: bool = False
    progress: int = 0
    target: int = 1

    def progress_fraction(self):
        if self.unlocked:
            return 1.0
        if self.target <= 0:
            return 0.0
        return max(0.0, min(1.0, self.progress / self.target))

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data, fallback):
        """Build from saved data, filling missing fields from the catalog entry."""
        return cls(
            id=data.get("id", fallback.id),
            title=data.get("title", fallback.title),
            description=data.get("description", fallback.description),
            icon=data.get("icon", fallback.icon),
            unlocked=bool(data.get("unlocked", False)),
            progress=int(data.get("progress", 0) or 0),
            target=int(data.get("target", fallback.target) or fallback.target),
        )


ACHIEVEMENT_CATALOG = [
    Achievement("first_win", "First Victory", "Win your first round", "🏆", target=1),
    Achievement("winning_streak", "Hot Streak", "Win 3 rounds in a row", "🔥", target=STREAK_TARGET),
    Achievement("match_winner", "Match Champion", "Win a Best-of match", "👑", target=1),
    Achievement("gesture_master", "Gesture Master", "Win with each gesture type", "🎯", target=len(GESTURES)),
    Achievement("hard_mode_win", "Challenge Accepted", "Win on Hard difficulty", "💪", target=1),
    Achievement("perfect_match", "Perfect Match", "Win a Best-of match without losing", "⭐", target=1),
    Achievement("veteran", "Veteran Player", "Play 50 rounds", "🎮", target=VETERAN_ROUNDS),
    Achievement("comeback", "Never Give Up", "Win after being behind 0-2", "💫", target=1),
]


def default_achievements():
    return [Achievement(**a.to_dict()) for a in ACHIEVEMENT_CATALOG]


@dataclass
class AchievementStats:
    total_rounds: int = 0
    win_streak: int = 0
    max_win_streak: int = 0
    gesture_wins: Set[Gesture] = field(default_factory=set)
    comeback_in_progress: bool = False

    def to_dict(self):
        # Saved with the same keys and shapes as the browser version
        return {
            "totalRounds": self.total_rounds,
            "winStreak": self.win_streak,
            "maxWinStreak": self.max_win_streak,
            "gestureWins": {g.value: g in self.gesture_wins for g in GESTURES},
            "comebackInProgress": self.comeback_in_progress,
        }

    @classmethod
    def from_dict(cls, data):
        wins = data.get("gestureWins") or {}
        if isinstance(wins, dict):
            names = [name for name, won in wins.items() if won]
        else:
            names = list(wins)
        gesture_wins = {g for g in GESTURES if g.value in names}
        return cls(
            total_rounds=int(data.get("totalRounds", 0) or 0),
            win_streak=int(data.get("winStreak", 0) or 0),
            max_win_streak=int(data.get("maxWinStreak", 0) or 0),
            gesture_wins=gesture_wins,
            comeback_in_progress=bool(data.get("comebackInProgress", False)),
        )


def parse_achievements(raw):
    """Saved achievements are accepted when they are a list of the catalog's length."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error("Failed to load achievements: %s", e)
        return None
    if not isinstance(parsed, list) or len(parsed) != len(ACHIEVEMENT_CATALOG):
        logger.warning("Invalid achievements data, using defaults")
        return None
    if not all(isinstance(item, dict) for item in parsed):
        logger.warning("Invalid achievements data, using defaults")
        return None
    try:
        return [Achievement.from_dict(item, fallback) for item, fallback in zip(parsed, ACHIEVEMENT_CATALOG)]
    except (TypeError, ValueError) as e:
        logger.warning("Invalid achievements data, using defaults: %s", e)
        return None


def parse_stats(raw):
    """Saved stats are accepted when they are an object holding totalRounds."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error("Failed to load stats: %s", e)
        return None
    if not isinstance(parsed, dict) or "totalRounds" not in parsed:
        logger.warning("Invalid stats data, using defaults")
        return None
    try:
        return AchievementStats.from_dict(parsed)
    except (TypeError, ValueError) as e:
        logger.warning("Invalid stats data, using defaults: %s", e)
        return None


class AchievementEngine:
    """Tracks achievement progress across rounds and matches.

    Unlocks are monotonic. Every update is saved to the store; a failed save
    is logged and progress carries on in memory for the session.
    """

    def __init__(self, store=None):
        self.store = store
        self.achievements: List[Achievement] = default_achievements()
        self.stats = AchievementStats()
        self.load()

    def load(self):
        if self.store is None:
            return
        try:
            raw_achievements = self.store.get(ACHIEVEMENTS_KEY)
            raw_stats = self.store.get(STATS_KEY)
        except StorageError as e:
            logger.error("Failed to load achievements: %s", e)
            return
        self.achievements = parse_achievements(raw_achievements) or default_achievements()
        self.stats = parse_stats(raw_stats) or AchievementStats()

    def save(self):
        if self.store is None:
            return
        try:
            self.store.set(ACHIEVEMENTS_KEY, json.dumps([a.to_dict() for a in self.achievements], ensure_ascii=False))
            self.store.set(STATS_KEY, json.dumps(self.stats.to_dict()))
        except StorageError as e:
            logger.error("Failed to save achievements, progress will not persist: %s", e)

    def get(self, achievement_id) -> Optional[Achievement]:
        for achievement in self.achievements:
            if achievement.id == achievement_id:
                return achievement
        return None

    def _unlock(self, achievement_id, unlocks, progress=1):
        achievement = self.get(achievement_id)
        if achievement is None or achievement.unlocked:
            return
        achievement.unlocked = True
        achievement.progress = progress
        unlocks.append(achievement)
        logger.info("Achievement unlocked: %s", achievement.title)

    def _track(self, achievement_id, progress, unlocks):
        """Update progress while locked and unlock once the target is reached"""
        achievement = self.get(achievement_id)
        if achievement is None or achievement.unlocked:
            return
        achievement.progress = progress
        if progress >= achievement.target:
            self._unlock(achievement_id, unlocks, progress)

    def on_round_resolved(self, outcome, player_gesture, computer_gesture, difficulty,
                          player_score, computer_score):
        """Update stats for one resolved round. Returns the achievements unlocked by it."""
        stats = self.stats
        unlocks = []

        stats.total_rounds += 1

        if outcome == Outcome.WIN:
            stats.win_streak += 1
            stats.max_win_streak = max(stats.max_win_streak, stats.win_streak)

            self._unlock("first_win", unlocks)
            self._track("winning_streak", stats.win_streak, unlocks)

            if player_gesture is not None:
                stats.gesture_wins.add(Gesture(player_gesture))
            self._track("gesture_master", len(stats.gesture_wins), unlocks)

            if Difficulty(difficulty) == Difficulty.HARD:
                self._unlock("hard_mode_win", unlocks)

            if stats.comeback_in_progress and player_score > computer_score:
                self._unlock("comeback", unlocks)
                stats.comeback_in_progress = False
        else:
            stats.win_streak = 0
            if computer_score - player_score >= COMEBACK_DEFICIT:
                stats.comeback_in_progress = True

        self._track("veteran", stats.total_rounds, unlocks)

        self.save()
        return unlocks

    def on_match_resolved(self, winner_is_player, computer_score):
        unlocks = []
        if winner_is_player:
            self._unlock("match_winner", unlocks)
            if computer_score == 0:
                self._unlock("perfect_match", unlocks)

        self.save()
        return unlocks

    def unlocked_count(self):
        return sum(1 for a in self.achievements if a.unlocked)
