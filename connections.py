# connections.py
"""
Proximity connections between particles.

Finds every pair of particles closer than the connection threshold and
draws a jittered cubic Bezier between them. Three pairings are rendered
each frame: light-light, dark-dark and the light x dark cross product, the
last one in a hue that cycles with time.
"""
import logging
from typing import Dict, Any, List, Tuple

import numpy as np
from numba import jit

from constants import (
    MAX_DISTANCE, CONTROL_POINT_RATIO, CURVE_JITTER, CURVE_ALPHA,
    LIGHT_CURVE_GRAY, DARK_CURVE_GRAY, SAME_CURVE_WEIGHT, CROSS_CURVE_WEIGHT,
    HUE_CYCLE_DIVISOR, CROSS_CURVE_SATURATION, CROSS_CURVE_BRIGHTNESS,
    BEZIER_SEGMENTS
)
from particle import Particle

# --- Data Contracts ---
#
# find_pairs(a, b, max_distance, same) -> np.ndarray:
#   - Inputs: (N, 2) and (M, 2) float64 position arrays. When `same` is
#     True, `b` must be `a` and only pairs i < j are considered.
#   - Outputs: (K, 2) int64 array of (i, j) index pairs whose distance is
#     strictly below max_distance, ordered by i then j.
#
# control_points(p0, p1, jitter) -> Tuple[np.ndarray, np.ndarray]:
#   - Inputs: (K, 2) endpoint arrays and a (K, 4) jitter array.
#   - Outputs: (K, 2) arrays for the first and second control points.
#
# class ConnectionRenderer:
#   - draw(now, light, dark, canvas) -> Dict[str, int]
#     - Side Effects: Issues stroke/bezier calls on the canvas. The colour
#       mode is "hsb" only while the cross pairing is drawn and is "rgb"
#       again on return.
#     - Outputs: Number of curves drawn per pairing.


@jit(nopython=True)
def _find_pairs_numba(a, b, max_distance_sq, same):
    """
    Numba-jitted brute force pair search.

    Returns a preallocated index buffer and the number of rows filled.
    """
    n = a.shape[0]
    m = b.shape[0]
    pairs = np.empty((n * m, 2), dtype=np.int64)
    count = 0
    for i in range(n):
        start = i + 1 if same else 0
        for j in range(start, m):
            dx = b[j, 0] - a[i, 0]
            dy = b[j, 1] - a[i, 1]
            if dx * dx + dy * dy < max_distance_sq:
                pairs[count, 0] = i
                pairs[count, 1] = j
                count += 1
    return pairs, count


def positions_of(particles: List[Particle]) -> np.ndarray:
    if not particles:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([p.position for p in particles], dtype=np.float64)


def find_pairs(a: np.ndarray, b: np.ndarray, max_distance: float, same: bool = False) -> np.ndarray:
    """Index pairs (i, j) with |a[i] - b[j]| < max_distance."""
    pairs, count = _find_pairs_numba(
        np.ascontiguousarray(a, dtype=np.float64),
        np.ascontiguousarray(b, dtype=np.float64),
        float(max_distance) ** 2,
        same,
    )
    return pairs[:count]


def control_points(p0: np.ndarray, p1: np.ndarray, jitter: np.ndarray,
                   ratio: float = CONTROL_POINT_RATIO) -> Tuple[np.ndarray, np.ndarray]:
    """Control points pulled `ratio` of the way in from each end, then jittered."""
    delta = p1 - p0
    cp1 = p0 + delta * ratio + jitter[:, 0:2]
    cp2 = p1 - delta * ratio + jitter[:, 2:4]
    return cp1, cp2


def bezier_points(p0, cp1, cp2, p1, segments: int = BEZIER_SEGMENTS) -> np.ndarray:
    """Samples a cubic Bezier into `segments + 1` points, endpoints included."""
    t = np.linspace(0.0, 1.0, segments + 1)[:, np.newaxis]
    u = 1.0 - t
    return (
        (u ** 3) * np.asarray(p0, dtype=np.float64)
        + 3 * (u ** 2) * t * np.asarray(cp1, dtype=np.float64)
        + 3 * u * (t ** 2) * np.asarray(cp2, dtype=np.float64)
        + (t ** 3) * np.asarray(p1, dtype=np.float64)
    )


def cycle_hue(now: float) -> float:
    return (now / HUE_CYCLE_DIVISOR) % 360


class ConnectionRenderer:
    """
    Draws the three classes of proximity curves.
    """
    def __init__(self, params: Dict[str, Any], rng: np.random.Generator):
        self.max_distance = float(params.get('max_distance', MAX_DISTANCE))
        self.jitter = float(params.get('curve_jitter', CURVE_JITTER))
        self.rng = rng
        logging.info(f"ConnectionRenderer initialized (max distance {self.max_distance:.0f}).")

    def _draw_pairs(self, a: np.ndarray, b: np.ndarray, same: bool, canvas) -> int:
        if len(a) == 0 or len(b) == 0:
            return 0
        pairs = find_pairs(a, b, self.max_distance, same)
        if len(pairs) == 0:
            return 0
        p0 = a[pairs[:, 0]]
        p1 = b[pairs[:, 1]]
        # Resampled every frame so the curves shimmer.
        jitter = self.rng.uniform(-self.jitter, self.jitter, size=(len(pairs), 4))
        cp1, cp2 = control_points(p0, p1, jitter)
        for k in range(len(pairs)):
            canvas.bezier(tuple(p0[k]), tuple(cp1[k]), tuple(cp2[k]), tuple(p1[k]))
        return len(pairs)

    def draw(self, now: float, light: List[Particle], dark: List[Particle], canvas) -> Dict[str, int]:
        light_pos = positions_of(light)
        dark_pos = positions_of(dark)
        counts = {}

        canvas.no_fill()
        canvas.stroke(LIGHT_CURVE_GRAY, CURVE_ALPHA)
        canvas.stroke_weight(SAME_CURVE_WEIGHT)
        counts['light'] = self._draw_pairs(light_pos, light_pos, True, canvas)

        canvas.stroke(DARK_CURVE_GRAY, CURVE_ALPHA)
        canvas.stroke_weight(SAME_CURVE_WEIGHT)
        counts['dark'] = self._draw_pairs(dark_pos, dark_pos, True, canvas)

        canvas.color_mode("hsb")
        try:
            canvas.stroke(cycle_hue(now), CROSS_CURVE_SATURATION, CROSS_CURVE_BRIGHTNESS, CURVE_ALPHA)
            canvas.stroke_weight(CROSS_CURVE_WEIGHT)
            counts['cross'] = self._draw_pairs(light_pos, dark_pos, False, canvas)
        finally:
            canvas.color_mode("rgb")
        return counts
