# constants.py
"""
Application-level constants.

These values are static and do not change between runs. Rendering
properties live here alongside the default simulation settings; any of the
simulation defaults can be overridden from the `simulation_parameters`
section of `config.json`.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window (DEFAULT_WINDOW_SIZE).
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1280, 800)
FPS = 60
CAPTION = "Polarity Spheres"
BACKGROUND_GRAY = 30  # Dark grey

# Number of straight segments used to tessellate one Bezier curve.
BEZIER_SEGMENTS = 16

# --- Particles ---
LIFESPAN_MS = 5000
PARTICLE_SPEED_RANGE = (0.5, 2.0)
PARTICLE_RADIUS_RANGE = (2.0, 5.0)
LIGHT_INTENSITY_RANGE = (0.0, 255.0)
DARK_INTENSITY_RANGE = (0.0, 50.0)

# --- Spheres ---
SPHERE_RADIUS = 50
SPHERE_RING_STEP = 5
SPHERE_OUTER_ALPHA = 10
LIGHT_SPHERE_INNER_ALPHA = 100
DARK_SPHERE_INNER_ALPHA = 80
LIGHT_SPHERE_GRAY = 255
DARK_SPHERE_GRAY = 20
LIGHT_SPHERE_SPEED = 4.0
SPRING_CONSTANT = 0.05
DAMPING = 0.9
# Offset of the dark sphere from the viewport centre on start and resize.
DARK_SPHERE_OFFSET = (100.0, 100.0)

# --- Emitters ---
IDLE_SPAWN_MIN_MS = 100
IDLE_SPAWN_MAX_MS = 300
HOLD_SPAWN_INTERVAL_MS = 1000 / 24
BURST_SIZE = 3
BURST_JITTER = 10.0

# --- Connections ---
MAX_DISTANCE = 200.0
CONTROL_POINT_RATIO = 0.3
CURVE_JITTER = 20.0
CURVE_ALPHA = 50
LIGHT_CURVE_GRAY = 255
DARK_CURVE_GRAY = 20
SAME_CURVE_WEIGHT = 0.5
CROSS_CURVE_WEIGHT = 0.7
# Milliseconds per degree of hue rotation on the cross-population curves.
HUE_CYCLE_DIVISOR = 20
CROSS_CURVE_SATURATION = 100
CROSS_CURVE_BRIGHTNESS = 100
