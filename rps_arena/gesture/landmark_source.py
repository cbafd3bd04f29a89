"""
Camera landmark source using the MediaPipe Tasks Hand Landmarker over OpenCV.

The model file 'hand_landmarker.task' is downloaded on first use.
"""

import logging
import os
import time
import urllib.request

import cv2

from ..utils.errors import CameraError

logger = logging.getLogger(__name__)

MODEL_PATH = "hand_landmarker.task"
MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
)

# Connections between the 21 hand landmarks for drawing
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # index
    (0, 9), (9, 10), (10, 11), (11, 12),     # middle
    (0, 13), (13, 14), (14, 15), (15, 16),   # ring
    (0, 17), (17, 18), (18, 19), (19, 20),   # pinky
    (5, 9), (9, 13), (13, 17),               # palm
]


def landmarks_from_result(result):
    """Return the first hand as a list of (x, y, z) tuples, or None when no hand is visible.

    Points with a missing coordinate are passed through as None so that the
    validator rejects the frame instead of treating it as an absent hand.
    """
    hands = getattr(result, "hand_landmarks", None)
    if not hands:
        return None
    points = []
    for lm in hands[0]:
        x = getattr(lm, "x", None)
        y = getattr(lm, "y", None)
        if x is None or y is None:
            points.append(None)
        else:
            points.append((x, y, getattr(lm, "z", 0.0) or 0.0))
    return points


def _ensure_model(path=MODEL_PATH):
    if not os.path.exists(path):
        logger.info("Downloading hand landmark model from MediaPipe CDN")
        try:
            urllib.request.urlretrieve(MODEL_URL, path)
        except OSError as e:
            raise CameraError(f"could not download hand landmark model: {e}")
        logger.info("Model saved to '%s'", path)


class HandLandmarkSource:
    """Reads camera frames and yields (frame, landmarks) pairs for a single hand."""

    def __init__(self, camera_index=0, model_path=MODEL_PATH, width=1280, height=720):
        # Imported here so the core stays importable without the model runtime
        import mediapipe as mp
        from mediapipe.tasks import python as mp_python
        from mediapipe.tasks.python import vision as mp_vision

        self._mp = mp
        _ensure_model(model_path)

        self.cap = cv2.VideoCapture(camera_index)
        if not self.cap.isOpened():
            raise CameraError(f"could not open camera {camera_index}")
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        options = mp_vision.HandLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=model_path),
            running_mode=mp_vision.RunningMode.VIDEO,
            num_hands=1,
            min_hand_detection_confidence=0.5,
            min_tracking_confidence=0.5,
        )
        self._landmarker = mp_vision.HandLandmarker.create_from_options(options)
        self._start_ms = int(time.time() * 1000)
        self._last_ms = -1

    def read(self):
        """Return (mirrored BGR frame, landmarks or None), or (None, None) when the camera stops."""
        ret, frame = self.cap.read()
        if not ret:
            return None, None
        frame = cv2.flip(frame, 1)

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=rgb)
        # Timestamps must be strictly increasing in VIDEO mode
        timestamp_ms = max(int(time.time() * 1000) - self._start_ms, self._last_ms + 1)
        self._last_ms = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        return frame, landmarks_from_result(result)

    def release(self):
        if self.cap is not None and self.cap.isOpened():
            self.cap.release()
        self._landmarker.close()


def draw_hand(frame, landmarks):
    """Draw the hand skeleton from normalized landmarks onto a BGR frame"""
    if not landmarks:
        return frame
    h, w = frame.shape[:2]
    pts = [None if p is None else (int(p[0] * w), int(p[1] * h)) for p in landmarks]
    for start, end in HAND_CONNECTIONS:
        if start < len(pts) and end < len(pts) and pts[start] and pts[end]:
            cv2.line(frame, pts[start], pts[end], (0, 255, 0), 3)
    for pt in pts:
        if pt:
            cv2.circle(frame, pt, 4, (0, 0, 255), -1)
    return frame
