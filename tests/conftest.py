import pytest

from rps_arena.utils.constants import *
from rps_arena.gesture.gesture_processor import GestureEstimate
from rps_arena.game.storage import MemoryStore

FINGERS = {
    "index": (8, 6, 5),
    "middle": (12, 10, 9),
    "ring": (16, 14, 13),
    "pinky": (20, 18, 17),
}


def make_hand(index=False, middle=False, ring=False, pinky=False, thumb=False, folded=False):
    """Build a 21-point frame of (x, y, z) tuples with the given fingers raised.

    Lowered fingers sit just below their middle joint (weak confidence) unless
    ``folded`` tucks them well below the base joint (strong confidence).
    """
    points = [[0.5, 0.5, 0.0] for _ in range(NUM_LANDMARKS)]
    points[4][0] = 0.7 if thumb else 0.45

    raised = {"index": index, "middle": middle, "ring": ring, "pinky": pinky}
    for name, (tip, pip, mcp) in FINGERS.items():
        points[mcp][1] = 0.6
        points[pip][1] = 0.5
        if raised[name]:
            points[tip][1] = 0.3
        elif folded:
            points[tip][1] = 0.9
        else:
            points[tip][1] = 0.58
    return [tuple(p) for p in points]


def rock_hand():
    return make_hand()


def strong_rock_hand():
    return make_hand(thumb=True, folded=True)


def paper_hand():
    return make_hand(index=True, middle=True, ring=True, pinky=True, thumb=True)


def scissors_hand():
    return make_hand(index=True, middle=True)


def estimate(gesture, confidence=1.0):
    return GestureEstimate(gesture, confidence)


class ScriptedRng:
    """Stand-in for random.Random that replays scripted values"""

    def __init__(self, randoms=None, choices=None):
        self.randoms = list(randoms or [])
        self.choices = list(choices or [])
        self.random_calls = 0

    def random(self):
        self.random_calls += 1
        if self.randoms:
            return self.randoms.pop(0)
        return 0.99

    def choice(self, seq):
        if self.choices:
            return self.choices.pop(0)
        return seq[0]


class FailingStore(MemoryStore):
    def set(self, key, value):
        from rps_arena.utils.errors import StorageError
        raise StorageError("disk full")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine_factory(store):
    from rps_arena.core.game_engine import GameEngine

    def factory(choices=None, randoms=None, difficulty="easy", mode="3", practice=False, engine_store=None):
        cfg = {"game": {"difficulty": difficulty, "mode": mode, "practice": practice}}
        rng = ScriptedRng(randoms=randoms, choices=choices)
        return GameEngine(cfg, store=engine_store if engine_store is not None else store, rng=rng)

    return factory


def feed(engine, frame, times=STABILITY_FRAMES):
    for _ in range(times):
        engine.process_landmarks(frame)
    return engine.detected_gesture


def play_round(engine, frame, now=None):
    """Stabilize a gesture and run one full round through every phase"""
    if frame is None:
        engine.process_landmarks(None)
    else:
        feed(engine, frame)
    assert engine.start_round(now)
    while engine.phase != Phase.IDLE:
        engine.advance(now)
    return engine.last_record
