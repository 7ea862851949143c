import numpy as np
import pytest


class RecordingCanvas:
    """Headless canvas that records every draw call with the state it used."""

    def __init__(self):
        self.mode = "rgb"
        self.fill_color = None
        self.stroke_color = None
        self.weight = 1.0
        self.calls = []
        self.modes = []

    def color_mode(self, mode):
        self.mode = mode
        self.modes.append(mode)

    def background(self, *values):
        self.calls.append(("background", values))

    def fill(self, *values):
        self.fill_color = values

    def no_fill(self):
        self.fill_color = None

    def stroke(self, *values):
        self.stroke_color = values

    def no_stroke(self):
        self.stroke_color = None

    def stroke_weight(self, weight):
        self.weight = weight

    def ellipse(self, x, y, diameter):
        self.calls.append(("ellipse", (x, y, diameter), self.fill_color, self.stroke_color))

    def bezier(self, p0, cp1, cp2, p1):
        self.calls.append(("bezier", (p0, cp1, cp2, p1), self.stroke_color, self.weight, self.mode))

    def of(self, kind):
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
