# simulation.py
"""
Handles the per-frame simulation and render loop.

This module defines the Simulation class, which owns every piece of
mutable state (both particle populations, both spheres and the four
emitter clocks) and advances it by one frame, issuing drawing calls
against a canvas supplied by the host.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple

import numpy as np

from constants import (
    BACKGROUND_GRAY, LIFESPAN_MS, IDLE_SPAWN_MIN_MS, IDLE_SPAWN_MAX_MS,
    HOLD_SPAWN_INTERVAL_MS, BURST_SIZE, BURST_JITTER
)
from particle import ParticleSystem, Population
from spheres import build_spheres
from emitters import IdleEmitter, PointerEmitter
from connections import ConnectionRenderer

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, params: Dict[str, Any], width: float, height: float):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         Every key is optional.
#       - width, height: Initial viewport size.
#     - Side Effects: Validates the parameters (ValueError on bad values),
#       places both spheres and creates the emitters.
#
#   - resize(self, width: float, height: float) -> None:
#     - Side Effects: Re-centres both spheres. Must be called between
#       frames, never during step().
#
#   - step(self, now: float, frame_input: FrameInput, canvas) -> Dict[str, int]:
#     - Inputs: Clock sample in ms, input snapshot and the host canvas.
#     - Outputs: Number of curves drawn per pairing.
#     - Side Effects: Runs exactly one frame in the fixed order
#       background, spheres, emitters, particles, connections.


@dataclass
class FrameInput:
    """Input snapshot sampled once per frame."""
    pointer: Tuple[float, float] = (0.0, 0.0)
    held: bool = False
    pressed: bool = False
    # Where the pointer went down, when that differs from the sampled pointer.
    press_position: Optional[Tuple[float, float]] = None
    resized: Optional[Tuple[int, int]] = None
    quit: bool = False


class Simulation:
    """
    Orchestrates one frame of the animation at a time.
    """
    def __init__(self, params: Dict[str, Any], width: float, height: float,
                 rng: Optional[np.random.Generator] = None):
        """
        Initializes the simulation state.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): The viewport width.
            height (float): The viewport height.
            rng (np.random.Generator): Optional random source; one is seeded
                from params['seed'] when omitted.
        """
        self._validate(params)
        self.width = float(width)
        self.height = float(height)
        self.rng = rng if rng is not None else np.random.default_rng(params.get('seed'))

        self.particles = ParticleSystem(params, self.rng)
        self.light_sphere, self.dark_sphere = build_spheres(params, self.width, self.height, self.rng)

        idle_min = params.get('idle_spawn_min_ms', IDLE_SPAWN_MIN_MS)
        idle_max = params.get('idle_spawn_max_ms', IDLE_SPAWN_MAX_MS)
        self.idle_light = IdleEmitter(self.particles, self.light_sphere, Population.LIGHT, idle_min, idle_max)
        self.idle_dark = IdleEmitter(self.particles, self.dark_sphere, Population.DARK, idle_min, idle_max)
        self.pointer_emitter = PointerEmitter(
            self.particles,
            interval=params.get('hold_spawn_interval_ms', HOLD_SPAWN_INTERVAL_MS),
            burst_size=params.get('burst_size', BURST_SIZE),
            jitter=params.get('burst_jitter', BURST_JITTER),
        )
        self.connections = ConnectionRenderer(params, self.rng)
        self.frame_count = 0
        self.culled_total = 0

        logging.info(f"Simulation initialized for a {self.width:.0f}x{self.height:.0f} viewport.")

    @staticmethod
    def _validate(params: Dict[str, Any]) -> None:
        """Rejects parameter combinations the frame loop cannot honour."""
        problems = []
        if params.get('lifespan_ms', LIFESPAN_MS) <= 0:
            problems.append("lifespan_ms must be positive")
        if params.get('idle_spawn_min_ms', IDLE_SPAWN_MIN_MS) > params.get('idle_spawn_max_ms', IDLE_SPAWN_MAX_MS):
            problems.append("idle_spawn_min_ms must not exceed idle_spawn_max_ms")
        if params.get('hold_spawn_interval_ms', HOLD_SPAWN_INTERVAL_MS) < 0:
            problems.append("hold_spawn_interval_ms must not be negative")
        if params.get('max_distance', 1) <= 0:
            problems.append("max_distance must be positive")
        if not 0 < params.get('damping', 0.5) < 1:
            problems.append("damping must lie strictly between 0 and 1")
        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.light_sphere.reset(self.width, self.height)
        self.dark_sphere.reset(self.width, self.height)
        logging.info(f"Viewport resized to {self.width:.0f}x{self.height:.0f}; spheres re-centred.")

    def step(self, now: float, frame_input: FrameInput, canvas) -> Dict[str, int]:
        """
        Executes one frame.
        """
        self.frame_count += 1

        # 1. Clear
        canvas.background(BACKGROUND_GRAY)

        # 2. Spheres
        spheres = (self.light_sphere, self.dark_sphere)
        for sphere in spheres:
            sphere.advance(self.width, self.height)
        for sphere in spheres:
            sphere.draw(canvas)

        # 3. Emitters
        self.idle_light.update(now)
        self.idle_dark.update(now)
        x, y = frame_input.pointer
        if frame_input.pressed:
            px, py = frame_input.press_position if frame_input.press_position is not None else (x, y)
            self.pointer_emitter.press(px, py, now)
        if frame_input.held:
            self.pointer_emitter.hold(x, y, now)

        # 4. Particles
        self.culled_total += self.particles.update(now, self.width, self.height, canvas)

        # 5. Connections
        return self.connections.draw(now, self.particles.light, self.particles.dark, canvas)
