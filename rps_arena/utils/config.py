import copy
import json
import logging
import os

from .constants import *

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "classifier": {
        "extension_threshold": EXTENSION_THRESHOLD,
        "thumb_confidence_gain": THUMB_CONFIDENCE_GAIN,
        "finger_confidence_gain": FINGER_CONFIDENCE_GAIN,
    },
    "stabilizer": {
        "window": STABILITY_FRAMES,
        "confidence_threshold": CONFIDENCE_THRESHOLD,
        "stability_ratio": STABILITY_RATIO,
    },
    "opponent": {
        "history_length": MAX_HISTORY_LENGTH,
        "min_pattern_history": MIN_PATTERN_HISTORY,
        "medium_counter_chance": MEDIUM_COUNTER_CHANCE,
        "hard_pattern_chance": HARD_PATTERN_CHANCE,
        "hard_counter_chance": HARD_COUNTER_CHANCE,
    },
    "timing": {
        "countdown_start": COUNTDOWN_START,
        "countdown_step": COUNTDOWN_STEP,
        "reveal_delay": REVEAL_DELAY,
        "resolve_delay": RESOLVE_DELAY,
        "match_result_delay": MATCH_RESULT_DELAY,
    },
    "game": {
        "difficulty": Difficulty.MEDIUM.value,
        "mode": MatchMode.BEST_OF_3.value,
        "practice": False,
    },
    "storage": {
        "path": DEFAULT_STORE_PATH,
    },
    "logging": {
        "level": "INFO",
        "dir": None,
    },
}


def merge_config(base, override):
    """Deep-merge override into a copy of base. Unknown keys are kept."""
    merged = copy.deepcopy(base)
    if not override:
        return merged
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=DEFAULT_CONFIG_PATH):
    """Load a JSON config file over the defaults. Falls back to defaults on any problem."""
    if not path or not os.path.exists(path):
        logger.debug("Config '%s' not found, using defaults", path)
        return merge_config(DEFAULT_CONFIG, None)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to load config '%s': %s", path, e)
        return merge_config(DEFAULT_CONFIG, None)

    if not isinstance(data, dict):
        logger.warning("Config '%s' is not a JSON object, using defaults", path)
        return merge_config(DEFAULT_CONFIG, None)
    return merge_config(DEFAULT_CONFIG, data)
