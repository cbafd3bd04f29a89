class RPSArenaError(Exception):
    """Base class for all errors raised by the game core."""


class InvalidFrameError(RPSArenaError):
    """A landmark frame is missing, has the wrong length or a missing coordinate."""


class StorageError(RPSArenaError):
    """The key-value store could not be read or written."""


class RoundInProgressError(RPSArenaError):
    """A round was started while another round is still in flight."""


class MatchDecidedError(RPSArenaError):
    """A round was started after the match was decided."""


class CameraError(RPSArenaError):
    """The camera or the hand landmark model could not be opened."""
