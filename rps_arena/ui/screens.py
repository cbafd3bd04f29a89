import time

import cv2

from ..utils.constants import *

FONT = cv2.FONT_HERSHEY_SIMPLEX
WHITE = (255, 255, 255)
GREEN = (80, 200, 80)
RED = (60, 60, 230)
YELLOW = (0, 215, 255)
GREY = (180, 180, 180)


def _label(gesture):
    return gesture.value.capitalize() if gesture is not None else "Not detected"


def _centered(frame, text, y, scale, color, thickness=2):
    size = cv2.getTextSize(text, FONT, scale, thickness)[0]
    x = (frame.shape[1] - size[0]) // 2
    cv2.putText(frame, text, (x, y), FONT, scale, color, thickness, cv2.LINE_AA)


class HudScreen:
    def draw(self, frame, engine):
        state = engine.state
        mode = "Best of " + state.mode.value if state.mode != MatchMode.ENDLESS else "Endless"
        cv2.putText(frame, f"You {state.player_wins} - {state.computer_wins} Computer", (20, 40),
                    FONT, 1, WHITE, 2, cv2.LINE_AA)
        cv2.putText(frame, f"Round {state.round_number} | {mode} | {engine.difficulty.value.capitalize()}",
                    (20, 75), FONT, 0.6, GREY, 1, cv2.LINE_AA)
        if engine.practice:
            cv2.putText(frame, "PRACTICE", (20, 105), FONT, 0.6, YELLOW, 2, cv2.LINE_AA)

        if engine.detected_gesture is not None:
            text = f"Detected: {_label(engine.detected_gesture)}"
        else:
            text = "Show your hand to the camera"
        h = frame.shape[0]
        cv2.putText(frame, text, (20, h - 60), FONT, 0.8, WHITE, 2, cv2.LINE_AA)
        self.draw_quality(frame, engine.quality, (20, h - 40))
        return frame

    def draw_quality(self, frame, quality, origin, width=200, height=14):
        x, y = origin
        percentage = int(round(quality * 100))
        cv2.rectangle(frame, (x, y), (x + width, y + height), GREY, 1)
        fill = int(width * max(0.0, min(1.0, quality)))
        if fill > 0:
            color = GREEN if quality >= CONFIDENCE_THRESHOLD else YELLOW
            cv2.rectangle(frame, (x + 1, y + 1), (x + fill, y + height - 1), color, -1)
        text = f"{percentage}%" if quality > 0 else "--"
        cv2.putText(frame, text, (x + width + 10, y + height), FONT, 0.5, WHITE, 1, cv2.LINE_AA)
        return frame


class CountdownScreen:
    def draw(self, frame, countdown):
        text = str(countdown) if countdown > 0 else "SHOW!"
        _centered(frame, text, frame.shape[0] // 2 + 20, 4, WHITE, 5)
        return frame


class ResultScreen:
    def draw(self, frame, player_gesture, computer_gesture, record=None, reveal_elapsed=None,
             reveal_delay=REVEAL_DELAY):
        h, w = frame.shape[:2]
        cv2.putText(frame, f"You: {_label(player_gesture)}", (40, h // 2), FONT, 1, WHITE, 2, cv2.LINE_AA)

        # Slot-machine spin before the computer move is shown
        if reveal_elapsed is not None and reveal_elapsed < reveal_delay:
            spin = GESTURES[int(reveal_elapsed / 0.08) % len(GESTURES)]
            computer_text = f"Computer: {_label(spin)} ???"
        else:
            computer_text = f"Computer: {_label(computer_gesture)}"
        size = cv2.getTextSize(computer_text, FONT, 1, 2)[0]
        cv2.putText(frame, computer_text, (w - size[0] - 40, h // 2), FONT, 1, WHITE, 2, cv2.LINE_AA)

        if record is not None:
            if record.player_gesture is None:
                text, color = "No gesture detected - Computer wins!", RED
            elif record.outcome == Outcome.WIN:
                text, color = "You win this round!", GREEN
            elif record.outcome == Outcome.TIE:
                text, color = "It's a tie!", YELLOW
            else:
                text, color = "Computer wins this round!", RED
            _centered(frame, text, h // 2 + 70, 1.2, color, 3)
        return frame


class MatchScreen:
    def draw(self, frame, result):
        h = frame.shape[0]
        if result.winner_is_player:
            title = "You Win the Match!"
            winner, loser = result.player_score, result.computer_score
        else:
            title = "Computer Wins the Match!"
            winner, loser = result.computer_score, result.player_score
        _centered(frame, title, h // 2 - 60, 1.5, GREEN if result.winner_is_player else RED, 3)
        _centered(frame, f"Final Score: {winner} - {loser}", h // 2 - 15, 1, WHITE, 2)
        _centered(frame, "Press N for a new match", h // 2 + 20, 0.7, GREY, 1)
        return frame


class AchievementToasts:
    """Queue of unlock notifications, each shown for a few seconds"""

    def __init__(self, duration=3.0, stagger=0.5):
        self.duration = duration
        self.stagger = stagger
        self.toasts = []

    def push(self, achievements, now=None):
        now = time.monotonic() if now is None else now
        for i, achievement in enumerate(achievements):
            start = now + i * self.stagger
            self.toasts.append((achievement, start, start + self.duration))

    def active(self, now=None):
        now = time.monotonic() if now is None else now
        self.toasts = [t for t in self.toasts if t[2] > now]
        return [t[0] for t in self.toasts if t[1] <= now]

    def draw(self, frame, now=None):
        w = frame.shape[1]
        for i, achievement in enumerate(self.active(now)):
            y = 30 + i * 60
            cv2.rectangle(frame, (w - 380, y), (w - 20, y + 50), (40, 40, 40), -1)
            cv2.putText(frame, "Achievement Unlocked!", (w - 370, y + 20), FONT, 0.5, YELLOW, 1, cv2.LINE_AA)
            cv2.putText(frame, achievement.title, (w - 370, y + 42), FONT, 0.7, WHITE, 2, cv2.LINE_AA)
        return frame


class AchievementsScreen:
    def draw(self, frame, achievements):
        overlay = frame.copy()
        cv2.rectangle(overlay, (0, 0), (frame.shape[1], frame.shape[0]), (0, 0, 0), -1)
        cv2.addWeighted(overlay, 0.7, frame, 0.3, 0, frame)
        _centered(frame, "ACHIEVEMENTS", 60, 1.2, YELLOW, 2)
        for i, a in enumerate(achievements):
            y = 110 + i * 45
            color = GREEN if a.unlocked else GREY
            status = "UNLOCKED" if a.unlocked else f"{a.progress}/{a.target}"
            cv2.putText(frame, f"{a.title} - {a.description}", (60, y), FONT, 0.6, color, 1, cv2.LINE_AA)
            cv2.putText(frame, status, (frame.shape[1] - 200, y), FONT, 0.6, color, 1, cv2.LINE_AA)
        return frame
