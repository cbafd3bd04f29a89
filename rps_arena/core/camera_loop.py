import logging
import time

import cv2

from ..utils.constants import *
from ..gesture.landmark_source import HandLandmarkSource, draw_hand
from ..report.report_generator import ReportGenerator
from ..ui.screens import (HudScreen, CountdownScreen, ResultScreen, MatchScreen,
                          AchievementToasts, AchievementsScreen)
from .game_engine import GameEngine, ACHIEVEMENTS_UNLOCKED

logger = logging.getLogger(__name__)

MODES = list(MatchMode)
DIFFICULTIES = list(Difficulty)


def next_in_cycle(options, current):
    return options[(options.index(current) + 1) % len(options)]


class CameraGame:
    """OpenCV window around a GameEngine fed by the camera landmark source"""

    def __init__(self, engine: GameEngine, source=None, camera_index=0, report_dir="reports"):
        self.engine = engine
        self.source = source
        self.camera_index = camera_index
        self.report_generator = ReportGenerator(report_dir)

        self.hud = HudScreen()
        self.countdown_screen = CountdownScreen()
        self.result_screen = ResultScreen()
        self.match_screen = MatchScreen()
        self.achievements_screen = AchievementsScreen()
        self.toasts = AchievementToasts()
        self.show_achievements = False

        engine.subscribe(ACHIEVEMENTS_UNLOCKED, self.toasts.push)

    def handle_key(self, key, now=None):
        """Apply one key press. Returns False when the game should quit."""
        engine = self.engine
        if key in (27, ord('q')):
            return False
        if key == 32:  # SPACE
            engine.start_round(now)
        elif key == ord('n'):
            engine.new_match()
        elif key == ord('m'):
            engine.change_mode(next_in_cycle(MODES, engine.state.mode))
            logger.info("Mode: %s", engine.state.mode.value)
        elif key == ord('d'):
            engine.set_difficulty(next_in_cycle(DIFFICULTIES, engine.difficulty))
            logger.info("Difficulty: %s", engine.difficulty.value)
        elif key == ord('p'):
            engine.set_practice(not engine.practice)
        elif key == ord('a'):
            self.show_achievements = not self.show_achievements
        elif key == ord('r'):
            try:
                self.report_generator.generate_report(engine.session_summary())
            except OSError as e:
                logger.error("Failed to write report: %s", e)
        return True

    def render(self, frame, now=None):
        now = time.monotonic() if now is None else now
        engine = self.engine
        self.hud.draw(frame, engine)

        if engine.phase == Phase.COUNTDOWN:
            self.countdown_screen.draw(frame, engine.countdown)
        elif engine.phase in (Phase.CAPTURE, Phase.REVEAL, Phase.RESOLVE, Phase.COOLDOWN) or engine.last_record:
            reveal_elapsed = None
            if engine.phase in (Phase.CAPTURE, Phase.REVEAL) and engine.phase_started is not None:
                reveal_elapsed = now - engine.phase_started
            self.result_screen.draw(frame, engine.player_gesture, engine.computer_gesture,
                                    engine.last_record, reveal_elapsed, engine.reveal_delay)

        if engine.match_result is not None and engine.phase == Phase.IDLE:
            self.match_screen.draw(frame, engine.match_result)
        if self.show_achievements:
            self.achievements_screen.draw(frame, engine.achievements.achievements)
        self.toasts.draw(frame, now)
        return frame

    def run(self):
        source = self.source or HandLandmarkSource(self.camera_index)
        cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(WINDOW_NAME, WINDOW_WIDTH, WINDOW_HEIGHT)
        try:
            while True:
                frame, landmarks = source.read()
                if frame is None:
                    logger.warning("Camera stopped delivering frames")
                    break

                now = time.monotonic()
                self.engine.process_landmarks(landmarks)
                self.engine.tick(now)

                draw_hand(frame, landmarks)
                self.render(frame, now)
                cv2.imshow(WINDOW_NAME, frame)

                key = cv2.waitKey(1) & 0xFF
                if key != 255 and not self.handle_key(key, now):
                    break
        finally:
            source.release()
            cv2.destroyAllWindows()
