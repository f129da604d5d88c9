"""
Geometry helpers and seeding for the survival simulation
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def vec_len(x: float, y: float) -> float:
    """Calculate vector length (magnitude)"""
    return math.hypot(x, y)


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def intersects(a, b) -> bool:
    """
    Check if two circles overlap.

    Works on anything with ``x``, ``y`` and ``radius`` attributes. Touching
    circles (distance == r1 + r2) do not count as a hit.
    """
    dx = a.x - b.x
    dy = a.y - b.y
    return math.hypot(dx, dy) < a.radius + b.radius


def heading(from_x: float, from_y: float, to_x: float, to_y: float) -> float:
    """Angle in radians of the direction from one point to another"""
    return math.atan2(to_y - from_y, to_x - from_x)


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
