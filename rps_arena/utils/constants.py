from enum import Enum


class Gesture(str, Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class Outcome(str, Enum):
    WIN = "win"
    LOSE = "lose"
    TIE = "tie"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MatchMode(str, Enum):
    BEST_OF_3 = "3"
    BEST_OF_5 = "5"
    ENDLESS = "endless"


class Phase(Enum):
    IDLE = 0
    COUNTDOWN = 1
    CAPTURE = 2
    REVEAL = 3
    RESOLVE = 4
    COOLDOWN = 5


# Game constants
GESTURES = [Gesture.ROCK, Gesture.PAPER, Gesture.SCISSORS]

# Game rules: each gesture maps to the gesture it beats
GESTURE_RULES = {
    Gesture.ROCK: Gesture.SCISSORS,
    Gesture.PAPER: Gesture.ROCK,
    Gesture.SCISSORS: Gesture.PAPER,
}

# The move that defeats each gesture
COUNTER_MOVES = {
    Gesture.ROCK: Gesture.PAPER,
    Gesture.PAPER: Gesture.SCISSORS,
    Gesture.SCISSORS: Gesture.ROCK,
}

# Hand landmark layout (MediaPipe numbering)
NUM_LANDMARKS = 21
FINGER_TIPS = [4, 8, 12, 16, 20]
FINGER_PIPS = [3, 6, 10, 14, 18]
FINGER_MCPS = [2, 5, 9, 13, 17]
FINGER_NAMES = ["thumb", "index", "middle", "ring", "pinky"]

# Classifier thresholds
EXTENSION_THRESHOLD = 0.03
THUMB_CONFIDENCE_GAIN = 5.0
FINGER_CONFIDENCE_GAIN = 8.0

# Stabilizer
STABILITY_FRAMES = 5
CONFIDENCE_THRESHOLD = 0.8
STABILITY_RATIO = 0.6

# Opponent
MAX_HISTORY_LENGTH = 5
MIN_PATTERN_HISTORY = 3
MEDIUM_COUNTER_CHANCE = 0.3
HARD_PATTERN_CHANCE = 0.6
HARD_COUNTER_CHANCE = 0.4

# Round timing (seconds)
COUNTDOWN_START = 3
COUNTDOWN_STEP = 1.0
REVEAL_DELAY = 0.4
RESOLVE_DELAY = 0.5
MATCH_RESULT_DELAY = 1.5

# Achievements
VETERAN_ROUNDS = 50
STREAK_TARGET = 3
COMEBACK_DEFICIT = 2

# Storage keys
ACHIEVEMENTS_KEY = "achievements"
STATS_KEY = "achievementStats"
DEFAULT_STORE_PATH = "rps_arena_store.json"
DEFAULT_CONFIG_PATH = "config.json"

# UI constants
WINDOW_NAME = "Rock Paper Scissors Arena"
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
