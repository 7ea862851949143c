# spheres.py
"""
Motion models for the two emitting spheres.

The light sphere bounces at constant speed inside an inset boundary. The
dark sphere is pulled toward the viewport centre by a damped spring. Both
are drawn as a stack of translucent concentric discs that read as a soft
glow.
"""
import logging
import math
from typing import Dict, Any, Optional, Tuple

import numpy as np

from constants import (
    SPHERE_RADIUS, SPHERE_RING_STEP, SPHERE_OUTER_ALPHA,
    LIGHT_SPHERE_INNER_ALPHA, DARK_SPHERE_INNER_ALPHA,
    LIGHT_SPHERE_GRAY, DARK_SPHERE_GRAY, LIGHT_SPHERE_SPEED,
    SPRING_CONSTANT, DAMPING, DARK_SPHERE_OFFSET
)

# --- Data Contracts ---
#
# class Sphere:
#   - advance(width, height) -> None
#     - Invariants: After the call, position lies within
#       [radius, width - radius] x [radius, height - radius].
#   - surface_point(angle) -> Tuple[float, float]
#   - draw(canvas) -> None
#   - reset(width, height) -> None: Moves the sphere to its home position
#     for a viewport of the given size. Velocity is left untouched.


class Sphere:
    """Base class holding the state and glow rendering shared by both spheres."""
    gray = LIGHT_SPHERE_GRAY
    inner_alpha = LIGHT_SPHERE_INNER_ALPHA

    def __init__(self, width: float, height: float, radius: float = SPHERE_RADIUS):
        self.radius = float(radius)
        self.position = np.zeros(2, dtype=np.float64)
        self.velocity = np.zeros(2, dtype=np.float64)
        self.reset(width, height)

    def home(self, width: float, height: float) -> np.ndarray:
        return np.array([width / 2, height / 2], dtype=np.float64)

    def reset(self, width: float, height: float) -> None:
        self.position = self.home(width, height)

    def advance(self, width: float, height: float) -> None:
        raise NotImplementedError

    def _bounds(self, width: float, height: float) -> Tuple[np.ndarray, np.ndarray]:
        low = np.array([self.radius, self.radius])
        high = np.array([width - self.radius, height - self.radius])
        return low, high

    def surface_point(self, angle: float) -> Tuple[float, float]:
        return (
            self.position[0] + math.cos(angle) * self.radius,
            self.position[1] + math.sin(angle) * self.radius,
        )

    def ring_alphas(self):
        """Yields (radius, alpha) from the outermost ring inwards."""
        radii = np.arange(self.radius, 0, -SPHERE_RING_STEP)
        if len(radii) == 1:
            yield radii[0], self.inner_alpha
            return
        span = radii[0] - radii[-1]
        for r in radii:
            t = (radii[0] - r) / span
            yield r, SPHERE_OUTER_ALPHA + t * (self.inner_alpha - SPHERE_OUTER_ALPHA)

    def draw(self, canvas) -> None:
        canvas.no_stroke()
        for r, alpha in self.ring_alphas():
            canvas.fill(self.gray, alpha)
            canvas.ellipse(self.position[0], self.position[1], r * 2)


class LightSphere(Sphere):
    """
    Moves at a constant speed and reflects off the inset boundary. Unlike
    the particles, its position is clamped back inside on reflection.
    """
    gray = LIGHT_SPHERE_GRAY
    inner_alpha = LIGHT_SPHERE_INNER_ALPHA

    def __init__(
        self,
        width: float,
        height: float,
        rng: np.random.Generator,
        speed: float = LIGHT_SPHERE_SPEED,
        radius: float = SPHERE_RADIUS,
    ):
        super().__init__(width, height, radius)
        angle = rng.uniform(0.0, 2.0 * math.pi)
        self.velocity = np.array([math.cos(angle), math.sin(angle)]) * speed

    def advance(self, width: float, height: float) -> None:
        self.position += self.velocity
        low, high = self._bounds(width, height)
        for axis in range(2):
            if self.position[axis] < low[axis] or self.position[axis] > high[axis]:
                self.velocity[axis] *= -1
                self.position[axis] = min(max(self.position[axis], low[axis]), high[axis])


class DarkSphere(Sphere):
    """
    Spring-damper wanderer drawn toward the viewport centre. Starts at rest
    offset from the centre and settles in a decaying oscillation.
    """
    gray = DARK_SPHERE_GRAY
    inner_alpha = DARK_SPHERE_INNER_ALPHA

    def __init__(
        self,
        width: float,
        height: float,
        spring_constant: float = SPRING_CONSTANT,
        damping: float = DAMPING,
        radius: float = SPHERE_RADIUS,
        offset: Optional[Tuple[float, float]] = None,
    ):
        self.offset = np.array(offset if offset is not None else DARK_SPHERE_OFFSET, dtype=np.float64)
        self.spring_constant = spring_constant
        self.damping = damping
        super().__init__(width, height, radius)

    def home(self, width: float, height: float) -> np.ndarray:
        return super().home(width, height) + self.offset

    def advance(self, width: float, height: float) -> None:
        centre = np.array([width / 2, height / 2])
        force = (centre - self.position) * self.spring_constant
        self.velocity = (self.velocity + force) * self.damping
        self.position += self.velocity
        low, high = self._bounds(width, height)
        np.clip(self.position, low, high, out=self.position)


def build_spheres(params: Dict[str, Any], width: float, height: float, rng: np.random.Generator):
    """Creates the (light, dark) sphere pair from simulation parameters."""
    radius = params.get('sphere_radius', SPHERE_RADIUS)
    light = LightSphere(
        width, height, rng,
        speed=params.get('light_sphere_speed', LIGHT_SPHERE_SPEED),
        radius=radius,
    )
    dark = DarkSphere(
        width, height,
        spring_constant=params.get('spring_constant', SPRING_CONSTANT),
        damping=params.get('damping', DAMPING),
        radius=radius,
    )
    logging.info(
        f"Spheres placed: light at ({light.position[0]:.0f}, {light.position[1]:.0f}), "
        f"dark at ({dark.position[0]:.0f}, {dark.position[1]:.0f})."
    )
    return light, dark
