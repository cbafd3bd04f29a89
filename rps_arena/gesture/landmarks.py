"""Landmark frame validation.

A landmark frame is the 21-point hand skeleton produced by the external
landmark source. Points may be MediaPipe landmark objects (``.x``/``.y``),
dicts with ``"x"``/``"y"`` keys, or plain ``(x, y[, z])`` sequences. A valid
frame is returned as a ``(21, 2)`` float numpy array of normalized image
coordinates.
"""

import math
from collections.abc import Mapping, Sequence

import numpy as np

from ..utils.constants import NUM_LANDMARKS
from ..utils.errors import InvalidFrameError


def _coordinate(point, axis, index):
    if isinstance(point, Mapping):
        value = point.get(axis)
    elif hasattr(point, axis):
        value = getattr(point, axis)
    elif isinstance(point, (Sequence, np.ndarray)) and not isinstance(point, str):
        position = 0 if axis == "x" else 1
        value = point[position] if len(point) > position else None
    else:
        value = None

    if value is None:
        raise InvalidFrameError(f"landmark {index} has no {axis} coordinate")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidFrameError(f"landmark {index} has a non-numeric {axis} coordinate")
    if not math.isfinite(value):
        raise InvalidFrameError(f"landmark {index} has a non-finite {axis} coordinate")
    return value


def validate_frame(frame):
    """Return the frame as a (21, 2) array or raise InvalidFrameError.

    No side effects. Partial frames emitted during occlusion are rejected
    rather than repaired.
    """
    if frame is None:
        raise InvalidFrameError("no landmark frame")

    # MediaPipe NormalizedLandmarkList wraps its points in .landmark
    points = getattr(frame, "landmark", frame)
    try:
        count = len(points)
    except TypeError:
        raise InvalidFrameError("landmark frame is not a sequence")
    if count != NUM_LANDMARKS:
        raise InvalidFrameError(f"expected {NUM_LANDMARKS} landmarks, got {count}")

    coords = np.empty((NUM_LANDMARKS, 2), dtype=float)
    for i, point in enumerate(points):
        if point is None:
            raise InvalidFrameError(f"landmark {i} is missing")
        coords[i, 0] = _coordinate(point, "x", i)
        coords[i, 1] = _coordinate(point, "y", i)
    return coords


def is_valid_frame(frame):
    try:
        validate_frame(frame)
    except InvalidFrameError:
        return False
    return True
