from collections import deque

from ..utils.constants import STABILITY_FRAMES, CONFIDENCE_THRESHOLD, STABILITY_RATIO


class GestureStabilizer:
    """Debounce per-frame estimates into a stable gesture.

    The window only fills with an unbroken run of detections: any frame
    without a gesture clears it. Once full, the window must clear a mean
    confidence bar and the most frequent label must hold a supermajority.
    """

    def __init__(self, window=STABILITY_FRAMES, confidence_threshold=CONFIDENCE_THRESHOLD,
                 stability_ratio=STABILITY_RATIO):
        self.window = deque(maxlen=window)
        self.confidence_threshold = confidence_threshold
        self.stability_ratio = stability_ratio

    @classmethod
    def from_config(cls, cfg):
        s = (cfg or {}).get("stabilizer", {})
        return cls(
            window=s.get("window", STABILITY_FRAMES),
            confidence_threshold=s.get("confidence_threshold", CONFIDENCE_THRESHOLD),
            stability_ratio=s.get("stability_ratio", STABILITY_RATIO),
        )

    def push(self, estimate):
        if estimate is None or estimate.gesture is None:
            self.window.clear()
            return None

        self.window.append(estimate)
        if len(self.window) < self.window.maxlen:
            return None

        counts = {}
        total_confidence = 0.0
        for item in self.window:
            counts[item.gesture] = counts.get(item.gesture, 0) + 1
            total_confidence += item.confidence

        mean_confidence = total_confidence / len(self.window)
        if not mean_confidence >= self.confidence_threshold:
            return None

        # Ties keep the first-seen label among those with the highest count
        dominant, dominant_count = None, 0
        for gesture, count in counts.items():
            if count > dominant_count:
                dominant, dominant_count = gesture, count

        if dominant_count / len(self.window) >= self.stability_ratio:
            return dominant
        return None

    def reset(self):
        self.window.clear()
