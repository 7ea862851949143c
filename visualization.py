# visualization.py
"""
Handles the rendering surface and input using Pygame.

The Visualizer exposes the small immediate-mode drawing API the simulation
issues its calls against (background, fill/stroke state, ellipses, cubic
curves and a colour-mode toggle) and turns Pygame events into a FrameInput
snapshot once per frame.
"""
import logging
from functools import lru_cache
from typing import Tuple, Optional, Sequence

import numpy as np
import pygame

from constants import FULLSCREEN, DEFAULT_WINDOW_SIZE, FPS, CAPTION
from connections import bezier_points
from simulation import FrameInput


# --- Data Contracts ---
#
# to_color(values, mode) -> pygame.Color:
#   - Inputs: 1-4 numbers. 1 = gray, 2 = gray + alpha, 3 = colour,
#     4 = colour + alpha. In "rgb" mode channels are 0-255; in "hsb" mode
#     hue is 0-360 and saturation, brightness and alpha are 0-100.
#   - Outputs: An RGBA pygame.Color.
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Side Effects: Initializes Pygame and creates a resizable display.
#
#   - poll_input(self) -> FrameInput:
#     - Side Effects: Drains the Pygame event queue. Recreates the display
#       surface on VIDEORESIZE.
#     - Outputs: press_position is the position of the first left-button
#       press of the frame.
#
#   - ellipse(), bezier():
#     - Side Effects: Each shape is rendered onto its own SRCALPHA surface
#       and alpha-blended onto the display immediately, so translucent
#       shapes accumulate.
#
#   - present(self) -> None:
#     - Side Effects: Flips the display and ticks the frame clock.

COLOR_MODES = ("rgb", "hsb")


def to_color(values: Sequence[float], mode: str = "rgb") -> pygame.Color:
    """Converts p5-style colour arguments into a pygame.Color."""
    if mode not in COLOR_MODES:
        raise ValueError(f"Unknown colour mode '{mode}'.")
    values = [float(v) for v in values]
    if not 1 <= len(values) <= 4:
        raise ValueError(f"Expected 1 to 4 colour components, got {len(values)}.")

    if mode == "rgb":
        if len(values) <= 2:
            gray = values[0]
            channels = [gray, gray, gray] + values[1:]
        else:
            channels = values
        alpha = channels[3] if len(channels) == 4 else 255.0
        rgba = [int(round(min(max(c, 0.0), 255.0))) for c in channels[:3] + [alpha]]
        return pygame.Color(*rgba)

    # hsb
    if len(values) <= 2:
        hsva = [0.0, 0.0, values[0], values[1] if len(values) == 2 else 100.0]
    else:
        hsva = values[:3] + [values[3] if len(values) == 4 else 100.0]
    color = pygame.Color(0, 0, 0)
    color.hsva = (
        hsva[0] % 360,
        min(max(hsva[1], 0.0), 100.0),
        min(max(hsva[2], 0.0), 100.0),
        min(max(hsva[3], 0.0), 100.0),
    )
    return color


@lru_cache(maxsize=256)
def _disc_surface(diameter: float, fill: Optional[tuple], stroke: Optional[tuple], width: int) -> pygame.Surface:
    """
    Renders one translucent disc. Sphere glow rings repeat every frame and
    stay cached; per-particle discs churn through the rest of the cache.
    """
    size = max(1, int(diameter + 2))
    centre = size / 2
    shape = pygame.Surface((size, size), pygame.SRCALPHA)
    if fill is not None:
        pygame.draw.circle(shape, fill, (centre, centre), diameter / 2)
    if stroke is not None:
        pygame.draw.circle(shape, stroke, (centre, centre), diameter / 2, width)
    return shape


class Visualizer:
    """
    Pygame-backed canvas and input source.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()

        self.fps = vis_params.get('fps', FPS)
        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            size = (display_info.current_w, display_info.current_h)
            self._flags = pygame.FULLSCREEN
        else:
            size = (
                vis_params.get('window_width', DEFAULT_WINDOW_SIZE[0]),
                vis_params.get('window_height', DEFAULT_WINDOW_SIZE[1]),
            )
            self._flags = pygame.RESIZABLE
        self._set_mode(size)

        pygame.display.set_caption(vis_params.get('caption', CAPTION))
        self.clock = pygame.time.Clock()

        # Drawing state
        self._mode = "rgb"
        self._fill: Optional[pygame.Color] = pygame.Color(255, 255, 255)
        self._stroke: Optional[pygame.Color] = pygame.Color(0, 0, 0)
        self._stroke_weight = 1.0

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    def _set_mode(self, size: Tuple[int, int]) -> None:
        self.screen = pygame.display.set_mode(size, self._flags)
        self.width, self.height = self.screen.get_size()

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def now(self) -> int:
        """Milliseconds since pygame.init()."""
        return pygame.time.get_ticks()

    # --- Input ---

    def poll_input(self) -> FrameInput:
        frame_input = FrameInput()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                frame_input.quit = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                frame_input.quit = True
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if not frame_input.pressed:
                    frame_input.press_position = event.pos
                frame_input.pressed = True
            elif event.type == pygame.VIDEORESIZE:
                # Only the last resize of the frame matters.
                frame_input.resized = (event.w, event.h)

        if frame_input.resized is not None:
            self._set_mode(frame_input.resized)
            frame_input.resized = self.size
            logging.info(f"Display resized to {self.width}x{self.height}.")

        frame_input.pointer = pygame.mouse.get_pos()
        frame_input.held = pygame.mouse.get_pressed()[0]
        return frame_input

    # --- Canvas API ---

    def color_mode(self, mode: str) -> None:
        if mode not in COLOR_MODES:
            raise ValueError(f"Unknown colour mode '{mode}'.")
        self._mode = mode

    def background(self, *values: float) -> None:
        self.screen.fill(to_color(values, self._mode))

    def fill(self, *values: float) -> None:
        self._fill = to_color(values, self._mode)

    def no_fill(self) -> None:
        self._fill = None

    def stroke(self, *values: float) -> None:
        self._stroke = to_color(values, self._mode)

    def no_stroke(self) -> None:
        self._stroke = None

    def stroke_weight(self, weight: float) -> None:
        self._stroke_weight = weight

    def _line_width(self) -> int:
        return max(1, round(self._stroke_weight))

    def ellipse(self, x: float, y: float, diameter: float) -> None:
        shape = _disc_surface(
            float(diameter),
            tuple(self._fill) if self._fill is not None else None,
            tuple(self._stroke) if self._stroke is not None else None,
            self._line_width(),
        )
        centre = shape.get_width() / 2
        self.screen.blit(shape, (x - centre, y - centre))

    def bezier(self, p0, cp1, cp2, p1) -> None:
        if self._stroke is None:
            return
        width = self._line_width()
        points = bezier_points(p0, cp1, cp2, p1)
        # Drawn on its own surface so the blit blends with what is underneath.
        origin = np.floor(points.min(axis=0)) - width
        extent = np.ceil(points.max(axis=0)) + width - origin + 1
        shape = pygame.Surface((int(extent[0]), int(extent[1])), pygame.SRCALPHA)
        pygame.draw.lines(shape, self._stroke, False, [tuple(p) for p in points - origin], width)
        self.screen.blit(shape, (int(origin[0]), int(origin[1])))

    # --- Frame management ---

    def present(self) -> None:
        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self):
        """Shuts down Pygame."""
        _disc_surface.cache_clear()
        pygame.quit()
