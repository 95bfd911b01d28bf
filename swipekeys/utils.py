"""
Shared utilities.
"""

import math
import numpy as np
from typing import Tuple


def log(msg: str):
    """Print with immediate flush so diagnostics interleave with key events."""
    print(msg, flush=True)


def angle_between(incoming: Tuple[float, float], outgoing: Tuple[float, float]) -> float:
    """Absolute heading change between two vectors, in degrees within [0, 180]."""
    a1 = math.atan2(incoming[1], incoming[0])
    a2 = math.atan2(outgoing[1], outgoing[0])
    diff = abs(a1 - a2)
    if diff > math.pi:
        diff = 2 * math.pi - diff
    return math.degrees(diff)


def resample_path(xy: np.ndarray, num_points: int) -> np.ndarray:
    """
    Resample a polyline to num_points equally spaced by arc length.

    Args:
        xy: Array of shape (n, 2)

    Returns:
        Array of shape (num_points, 2); zeros for an empty polyline
    """
    if len(xy) == 0:
        return np.zeros((num_points, 2))
    if len(xy) == 1:
        return np.tile(xy[0], (num_points, 1))

    seg_lengths = np.sqrt(np.sum(np.diff(xy, axis=0)**2, axis=1))
    cumulative = np.concatenate([[0.0], np.cumsum(seg_lengths)])
    total = cumulative[-1]
    if total <= 0:
        return np.tile(xy[0], (num_points, 1))

    targets = np.linspace(0.0, total, num_points)
    x = np.interp(targets, cumulative, xy[:, 0])
    y = np.interp(targets, cumulative, xy[:, 1])
    return np.stack([x, y], axis=1)
