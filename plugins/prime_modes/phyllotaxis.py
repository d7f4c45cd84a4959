"""
Phyllotaxis Mode

Sunflower-head spiral: point n sits at radius c*sqrt(n), angle
n * golden_angle. The whole head turns slowly; prime-indexed seeds
are enlarged and emphasised.
"""

import math

from .mode_base import Mode
from .palette import color_for_state
from .transforms import polar_to_cartesian


GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))  # ~137.508 degrees
TWO_PI = 2.0 * math.pi


class Phyllotaxis(Mode):

    mode_id = "phyllotaxis"
    mode_label = "Phyllotaxis"
    default_params = {
        "points": 800,
        "spacing": 0.016,       # radius step, fraction of the shorter side
        "spin": 0.15,           # radians per second
        "point_radius": 2.5,
    }

    def validate(self, params):
        self.require(params, "points", lambda v: int(v) == v and v > 0, "a positive integer")
        self.require(params, "spacing", lambda v: v > 0, "> 0")

    def init(self, state):
        self.validate(self.params)
        self.require_oracle(int(self.params["points"]), "points")
        self.rotation = 0.0
        self.generation = 0
        self.initialized = True

    def update(self, dt, state):
        self.rotation = (self.rotation + self.params["spin"] * dt * state.params.speed) % TWO_PI
        self.generation += 1

    def draw(self, state, renderer):
        cx, cy = state.center
        unit = min(state.viewport_width, state.viewport_height) * self.params["spacing"]
        c = unit * state.params.zoom
        emphasis = state.params.prime_emphasis
        pulse = 1.0 + state.audio_level
        for n in range(1, int(self.params["points"]) + 1):
            x, y = polar_to_cartesian(c * math.sqrt(n), n * GOLDEN_ANGLE + self.rotation)
            lit = self.oracle.is_prime(n)
            r = self.params["point_radius"] * (1.0 + emphasis if lit else 1.0) * pulse
            renderer.point(cx + x, cy + y, r, color_for_state(n, lit, emphasis))
