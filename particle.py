# particle.py
"""
Manages the state of all particles in the animation.

This module defines the Particle record, the Population tag that selects
its intensity range and connection colour, and the ParticleSystem class
which owns the two population lists and advances, renders and culls them
once per frame.
"""
import logging
import math
from enum import Enum
from typing import Dict, Any, List, Optional

import numpy as np

from constants import (
    LIFESPAN_MS, PARTICLE_SPEED_RANGE, PARTICLE_RADIUS_RANGE,
    LIGHT_INTENSITY_RANGE, DARK_INTENSITY_RANGE
)

# --- Data Contracts ---
#
# class Particle:
#   - create(x, y, population, now, rng, lifespan) -> Particle
#     - Invariants: velocity magnitude in PARTICLE_SPEED_RANGE, radius in
#       PARTICLE_RADIUS_RANGE, intensity in the population's range. None of
#       these change after creation.
#   - advance(width, height, now) -> None
#     - Side Effects: Integrates position, reflects velocity once the
#       position has left [0, width] x [0, height] (no clamping), and
#       recomputes opacity.
#   - is_expired(now) -> bool: True iff now - birth_time > lifespan.
#
# class ParticleSystem:
#   - update(now, width, height, canvas) -> int
#     - Side Effects: Advances and draws every particle, then drops the
#       expired ones. Each particle alive at the start of the call is
#       visited exactly once.
#     - Outputs: Number of particles culled across both populations.


class Population(Enum):
    """The two particle classes."""
    LIGHT = "light"
    DARK = "dark"

    @property
    def intensity_range(self):
        return LIGHT_INTENSITY_RANGE if self is Population.LIGHT else DARK_INTENSITY_RANGE


class Particle:
    """
    A short-lived point that drifts, bounces off the viewport walls and
    fades out linearly over its lifespan.
    """
    __slots__ = (
        "position", "velocity", "radius", "intensity", "opacity",
        "birth_time", "population", "lifespan"
    )

    def __init__(
        self,
        position: np.ndarray,
        velocity: np.ndarray,
        radius: float,
        intensity: float,
        population: Population,
        birth_time: float,
        lifespan: float = LIFESPAN_MS,
    ):
        self.position = np.asarray(position, dtype=np.float64)
        self.velocity = np.asarray(velocity, dtype=np.float64)
        self.radius = float(radius)
        self.intensity = float(intensity)
        self.population = population
        self.birth_time = float(birth_time)
        self.lifespan = float(lifespan)
        self.opacity = 255.0

    @classmethod
    def create(
        cls,
        x: float,
        y: float,
        population: Population,
        now: float,
        rng: np.random.Generator,
        lifespan: float = LIFESPAN_MS,
    ) -> "Particle":
        """Samples a new particle at (x, y) born at `now`."""
        angle = rng.uniform(0.0, 2.0 * math.pi)
        speed = rng.uniform(*PARTICLE_SPEED_RANGE)
        velocity = np.array([math.cos(angle), math.sin(angle)]) * speed
        radius = rng.uniform(*PARTICLE_RADIUS_RANGE)
        intensity = rng.uniform(*population.intensity_range)
        return cls((x, y), velocity, radius, intensity, population, now, lifespan)

    def age(self, now: float) -> float:
        return now - self.birth_time

    def opacity_at(self, now: float) -> float:
        """Linear fade from 255 at birth to 0 at the end of the lifespan."""
        return max(0.0, 255.0 * (1.0 - self.age(now) / self.lifespan))

    def advance(self, width: float, height: float, now: float) -> None:
        self.position += self.velocity
        # Reflect only after the wall has been crossed; the overshoot is kept.
        if self.position[0] < 0 or self.position[0] > width:
            self.velocity[0] *= -1
        if self.position[1] < 0 or self.position[1] > height:
            self.velocity[1] *= -1
        self.opacity = self.opacity_at(now)

    def is_expired(self, now: float) -> bool:
        return self.age(now) > self.lifespan

    def draw(self, canvas) -> None:
        canvas.no_stroke()
        canvas.fill(self.intensity, self.opacity)
        canvas.ellipse(self.position[0], self.position[1], self.radius * 2)

    def __repr__(self):
        return (
            f"Particle({self.population.value}, pos=({self.position[0]:.1f}, "
            f"{self.position[1]:.1f}), born={self.birth_time:.0f})"
        )


class ParticleSystem:
    """
    A container for both particle populations.
    """
    def __init__(self, params: Dict[str, Any], rng: Optional[np.random.Generator] = None):
        """
        Initializes the particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            rng (np.random.Generator): Shared random source. A new one seeded
                from params['seed'] is created when omitted.
        """
        self.lifespan = float(params.get('lifespan_ms', LIFESPAN_MS))
        self.rng = rng if rng is not None else np.random.default_rng(params.get('seed'))
        self.populations: Dict[Population, List[Particle]] = {
            Population.LIGHT: [],
            Population.DARK: [],
        }
        logging.info(f"ParticleSystem initialized with a {self.lifespan:.0f} ms lifespan.")

    @property
    def light(self) -> List[Particle]:
        return self.populations[Population.LIGHT]

    @property
    def dark(self) -> List[Particle]:
        return self.populations[Population.DARK]

    def spawn(self, x: float, y: float, population: Population, now: float) -> Particle:
        particle = Particle.create(x, y, population, now, self.rng, self.lifespan)
        self.populations[population].append(particle)
        return particle

    def update(self, now: float, width: float, height: float, canvas) -> int:
        """Advances, draws and culls both populations (light first)."""
        culled = 0
        for population in (Population.LIGHT, Population.DARK):
            particles = self.populations[population]
            for particle in particles:
                particle.advance(width, height, now)
                particle.draw(canvas)
            # Rebuild rather than splice so no survivor is skipped.
            survivors = [p for p in particles if not p.is_expired(now)]
            culled += len(particles) - len(survivors)
            particles[:] = survivors
        return culled

    def counts(self) -> Dict[str, int]:
        return {population.value: len(particles) for population, particles in self.populations.items()}
