import logging
import time
from collections import defaultdict

from ..utils.constants import *
from ..utils.config import DEFAULT_CONFIG, merge_config
from ..utils.errors import MatchDecidedError, RoundInProgressError
from ..gesture.gesture_processor import GestureClassifier, NO_GESTURE
from ..gesture.stabilizer import GestureStabilizer
from ..game.opponent import OpponentEngine
from ..game.game_logic import MatchController
from ..game.achievements import AchievementEngine

logger = logging.getLogger(__name__)

# Event names for subscribers
GESTURE_CHANGED = "gesture_changed"
PHASE_CHANGED = "phase_changed"
ROUND_RESOLVED = "round_resolved"
MATCH_DECIDED = "match_decided"
ACHIEVEMENTS_UNLOCKED = "achievements_unlocked"

# Phase order after the countdown
NEXT_PHASE = {
    Phase.CAPTURE: Phase.REVEAL,
    Phase.REVEAL: Phase.RESOLVE,
    Phase.RESOLVE: Phase.COOLDOWN,
    Phase.COOLDOWN: Phase.IDLE,
}


class GameEngine:
    """Drives the frame pipeline and the round sequence.

    Frames go through the classifier and stabilizer on every tick. A round
    runs Idle -> Countdown -> Capture -> Reveal -> Resolve -> Cooldown -> Idle,
    moved along either by ``advance()`` or by ``tick(now)`` against the
    configured durations. Renderers subscribe to events and never hold state
    of their own.
    """

    def __init__(self, cfg=None, store=None, rng=None, classifier=None, stabilizer=None,
                 opponent=None, achievements=None):
        cfg = merge_config(DEFAULT_CONFIG, cfg)
        self.cfg = cfg
        game = cfg["game"]
        timing = cfg["timing"]

        self.classifier = classifier or GestureClassifier.from_config(cfg)
        self.stabilizer = stabilizer or GestureStabilizer.from_config(cfg)
        self.opponent = opponent or OpponentEngine.from_config(cfg, rng=rng)
        self.match = MatchController(mode=game["mode"], opponent=self.opponent)
        self.achievements = achievements or AchievementEngine(store)

        self.difficulty = Difficulty(game["difficulty"])
        self.practice = bool(game["practice"])

        self.countdown_start = int(timing["countdown_start"])
        self.countdown_step = float(timing["countdown_step"])
        self.reveal_delay = float(timing["reveal_delay"])
        self.resolve_delay = float(timing["resolve_delay"])
        self.match_result_delay = float(timing["match_result_delay"])

        self.listeners = defaultdict(list)

        self.detected_gesture = None
        self.quality = 0.0

        self.phase = Phase.IDLE
        self.phase_started = None
        self.countdown = None
        self.player_gesture = None
        self.computer_gesture = None
        self.last_record = None
        self.pending_result = None
        self.last_unlocks = []

    # ---------- events ----------
    def subscribe(self, event, callback):
        self.listeners[event].append(callback)

    def _emit(self, event, *args):
        for callback in list(self.listeners[event]):
            callback(*args)

    # ---------- frame pipeline ----------
    def process_landmarks(self, landmarks):
        """Feed one landmark frame (or None when no hand is visible). Returns the stable gesture."""
        if landmarks is None:
            estimate = NO_GESTURE
        else:
            estimate = self.classifier.process_landmarks(landmarks)
        self.quality = estimate.confidence

        stable = self.stabilizer.push(estimate)
        if stable != self.detected_gesture:
            logger.debug("Stable gesture: %s", stable.value if stable else "none")
            self.detected_gesture = stable
            self._emit(GESTURE_CHANGED, stable, self.quality)
        return stable

    # ---------- settings ----------
    def set_difficulty(self, difficulty):
        self.difficulty = Difficulty(difficulty)

    def set_practice(self, enabled):
        self.practice = bool(enabled)

    def change_mode(self, mode):
        self.match.set_mode(mode)
        self._clear_round()

    def new_match(self):
        self.match.new_match()
        self._clear_round()

    def reset(self):
        self.match.reset()
        self._clear_round()

    def _clear_round(self):
        self.phase = Phase.IDLE
        self.phase_started = None
        self.countdown = None
        self.player_gesture = None
        self.computer_gesture = None
        self.last_record = None
        self.pending_result = None
        self._emit(PHASE_CHANGED, self.phase, None)

    # ---------- round sequence ----------
    def start_round(self, now=None):
        """Begin the countdown. Returns False in practice mode, mid-round or after a decided match."""
        if self.practice:
            return False
        if self.phase != Phase.IDLE:
            logger.debug("Round not started: phase is %s", self.phase.name)
            return False
        try:
            self.match.begin_round()
        except (RoundInProgressError, MatchDecidedError) as e:
            logger.debug("Round not started: %s", e)
            return False

        self.player_gesture = None
        self.computer_gesture = None
        self.last_record = None
        self.countdown = self.countdown_start
        self._enter(Phase.COUNTDOWN, now, self.countdown)
        return True

    def _enter(self, phase, now, payload=None):
        self.phase = phase
        self.phase_started = time.monotonic() if now is None else now
        self._emit(PHASE_CHANGED, phase, payload)

    def phase_duration(self):
        if self.phase == Phase.COUNTDOWN:
            return self.countdown_step
        if self.phase == Phase.REVEAL:
            return self.resolve_delay
        if self.phase == Phase.RESOLVE and self.match.match_decided:
            return self.match_result_delay
        return 0.0

    def advance(self, now=None):
        """Step the round sequence by one transition. Returns the new phase."""
        if self.phase == Phase.IDLE:
            return self.phase

        if self.phase == Phase.COUNTDOWN:
            if self.countdown > 0:
                # Counts down to 0, shown as "SHOW!"
                self.countdown -= 1
                self._enter(Phase.COUNTDOWN, now, self.countdown)
            else:
                self._capture(now)
            return self.phase

        next_phase = NEXT_PHASE[self.phase]
        if next_phase == Phase.RESOLVE:
            self._resolve(now)
        elif next_phase == Phase.COOLDOWN:
            self._cooldown(now)
        else:
            self._enter(next_phase, now, self.last_record)
        return self.phase

    def tick(self, now=None):
        """Advance every phase whose duration has elapsed by ``now``"""
        now = time.monotonic() if now is None else now
        while self.phase != Phase.IDLE:
            deadline = self.phase_started + self.phase_duration()
            if now < deadline:
                break
            self.advance(deadline)
        return self.phase

    def _capture(self, now):
        self.player_gesture = self.detected_gesture
        self.computer_gesture = self.opponent.choose(self.player_gesture, self.difficulty)
        self.opponent.record(self.player_gesture)
        self.countdown = None
        self._enter(Phase.CAPTURE, now, (self.player_gesture, self.computer_gesture))

    def _resolve(self, now):
        record = self.match.play_round(self.player_gesture, self.computer_gesture)
        self.last_record = record
        self._enter(Phase.RESOLVE, now, record)
        self._emit(ROUND_RESOLVED, record, self.match.state)

        # No detected gesture still scores as a loss but does not feed achievements
        unlocks = []
        if record.player_gesture is not None:
            unlocks = self.achievements.on_round_resolved(
                record.outcome,
                record.player_gesture,
                record.computer_gesture,
                self.difficulty,
                self.match.state.player_wins,
                self.match.state.computer_wins,
            )
        self._notify_unlocks(unlocks)

        self.pending_result = self.match.check_match_winner()

    def _cooldown(self, now):
        result = self.pending_result
        self.pending_result = None
        self._enter(Phase.COOLDOWN, now, result)
        if result is not None:
            self._emit(MATCH_DECIDED, result)
            unlocks = self.achievements.on_match_resolved(result.winner_is_player, result.computer_score)
            self._notify_unlocks(unlocks)

    def _notify_unlocks(self, unlocks):
        self.last_unlocks = list(unlocks)
        if unlocks:
            self._emit(ACHIEVEMENTS_UNLOCKED, list(unlocks))

    # ---------- views ----------
    @property
    def state(self):
        return self.match.state

    @property
    def match_result(self):
        return self.match.result

    def get_results(self):
        results = self.match.get_results()
        results["difficulty"] = self.difficulty.value
        return results

    def session_summary(self):
        """Everything a report needs about this session"""
        return {
            "results": self.get_results(),
            "rounds": list(self.match.rounds),
            "achievements": list(self.achievements.achievements),
            "stats": self.achievements.stats,
        }
