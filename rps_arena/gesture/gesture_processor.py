import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..utils.constants import *
from ..utils.errors import InvalidFrameError
from .landmarks import validate_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GestureEstimate:
    gesture: Optional[Gesture]
    confidence: float


NO_GESTURE = GestureEstimate(None, 0.0)


class GestureClassifier:
    """Turns one validated landmark frame into a (gesture, confidence) estimate.

    The rules are biased toward permissive detection: each positive match
    gets a confidence floor (0.1 rock, 0.2 paper, 0.3 scissors) and the
    temporal stabilizer is relied on to filter the resulting false positives.
    """

    def __init__(self, extension_threshold=EXTENSION_THRESHOLD,
                 thumb_confidence_gain=THUMB_CONFIDENCE_GAIN,
                 finger_confidence_gain=FINGER_CONFIDENCE_GAIN):
        self.extension_threshold = extension_threshold
        self.thumb_confidence_gain = thumb_confidence_gain
        self.finger_confidence_gain = finger_confidence_gain

    @classmethod
    def from_config(cls, cfg):
        c = (cfg or {}).get("classifier", {})
        return cls(
            extension_threshold=c.get("extension_threshold", EXTENSION_THRESHOLD),
            thumb_confidence_gain=c.get("thumb_confidence_gain", THUMB_CONFIDENCE_GAIN),
            finger_confidence_gain=c.get("finger_confidence_gain", FINGER_CONFIDENCE_GAIN),
        )

    def finger_states(self, coords):
        """Return (extended, confidences) as length-5 arrays ordered thumb..pinky."""
        tips = coords[FINGER_TIPS]
        pips = coords[FINGER_PIPS]
        mcps = coords[FINGER_MCPS]

        extended = np.zeros(5, dtype=bool)
        confidences = np.zeros(5, dtype=float)

        # Thumb moves sideways; front camera is mirrored so extended means tip right of IP joint
        thumb_dx = tips[0, 0] - pips[0, 0]
        extended[0] = thumb_dx > 0
        confidences[0] = min(1.0, self.thumb_confidence_gain * abs(thumb_dx))

        reach = np.abs(tips[1:, 1] - mcps[1:, 1])
        extended[1:] = (tips[1:, 1] < pips[1:, 1]) & (reach > self.extension_threshold)
        confidences[1:] = np.minimum(1.0, self.finger_confidence_gain * reach)
        return extended, confidences

    def classify(self, coords) -> GestureEstimate:
        extended, confidences = self.finger_states(coords)
        count = int(extended.sum())
        avg_confidence = float(confidences.mean())

        if count == 0 or (count == 1 and extended[0]):
            gesture = Gesture.ROCK
            confidence = avg_confidence * 0.9 + 0.1
        elif count >= 4:
            gesture = Gesture.PAPER
            confidence = avg_confidence * 0.8 + 0.2
        elif extended[1] and extended[2] and count <= 3:
            gesture = Gesture.SCISSORS
            confidence = (confidences[1] + confidences[2]) / 2 * 0.7 + 0.3
        else:
            return NO_GESTURE

        return GestureEstimate(gesture, float(np.clip(confidence, 0.0, 1.0)))

    def process_landmarks(self, frame) -> GestureEstimate:
        """Validate a raw frame and classify it. Invalid frames count as no gesture."""
        try:
            coords = validate_frame(frame)
        except InvalidFrameError as e:
            logger.debug("Rejected landmark frame: %s", e)
            return NO_GESTURE
        return self.classify(coords)
