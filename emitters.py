# emitters.py
"""
Time-gated particle emitters.

Each emitter keeps its own last-fired timestamp. Idle emitters shed single
particles from a sphere's surface at a randomised interval; the pointer
emitter releases small bursts while the pointer is held and once more on
every press.
"""
import logging
import math

from constants import (
    IDLE_SPAWN_MIN_MS, IDLE_SPAWN_MAX_MS, HOLD_SPAWN_INTERVAL_MS,
    BURST_SIZE, BURST_JITTER
)
from particle import ParticleSystem, Population

# --- Data Contracts ---
#
# class IdleEmitter:
#   - update(now) -> bool
#     - Side Effects: Spawns one particle on the sphere surface when
#       now - last_fired exceeds a gate drawn uniformly from
#       [min_interval, max_interval] on every call.
#     - Outputs: True if it fired.
#
# class PointerEmitter:
#   - press(x, y, now) -> None: Emits one burst unconditionally.
#   - hold(x, y, now) -> bool: Emits one burst when now - last_fired
#     exceeds the hold interval. press() does not reset this clock.


class IdleEmitter:
    """Spawns single particles on a sphere's surface at random intervals."""

    def __init__(
        self,
        particles: ParticleSystem,
        sphere,
        population: Population,
        min_interval: float = IDLE_SPAWN_MIN_MS,
        max_interval: float = IDLE_SPAWN_MAX_MS,
    ):
        self.particles = particles
        self.sphere = sphere
        self.population = population
        self.min_interval = min_interval
        self.max_interval = max_interval
        self.last_fired = 0.0

    def update(self, now: float) -> bool:
        rng = self.particles.rng
        if now - self.last_fired > rng.uniform(self.min_interval, self.max_interval):
            x, y = self.sphere.surface_point(rng.uniform(0.0, 2.0 * math.pi))
            self.particles.spawn(x, y, self.population, now)
            self.last_fired = now
            return True
        return False


class PointerEmitter:
    """Emits bursts of light particles around the pointer."""

    def __init__(
        self,
        particles: ParticleSystem,
        interval: float = HOLD_SPAWN_INTERVAL_MS,
        burst_size: int = BURST_SIZE,
        jitter: float = BURST_JITTER,
    ):
        self.particles = particles
        self.interval = interval
        self.burst_size = burst_size
        self.jitter = jitter
        self.last_fired = 0.0

    def burst(self, x: float, y: float, now: float) -> None:
        offsets = self.particles.rng.uniform(-self.jitter, self.jitter, size=(self.burst_size, 2))
        for dx, dy in offsets:
            self.particles.spawn(x + dx, y + dy, Population.LIGHT, now)

    def press(self, x: float, y: float, now: float) -> None:
        logging.debug(f"Pointer pressed at ({x:.0f}, {y:.0f}).")
        self.burst(x, y, now)

    def hold(self, x: float, y: float, now: float) -> bool:
        if now - self.last_fired > self.interval:
            self.burst(x, y, now)
            self.last_fired = now
            return True
        return False
