"""
Modular Circle Mode

Times-table chords on a 60-point circle: point k joins point k*m (mod
60). The multiplier m drifts continuously with time so the cardioid,
nephroid and higher epicycloids morph into one another. Fractional
multipliers place the chord end between points.
"""

import math

from .mode_base import Mode
from .palette import color_for_state, mod60
from .transforms import polar_to_cartesian


POINTS = 60


class ModularCircle(Mode):

    mode_id = "modular"
    mode_label = "Modular Circle"
    default_params = {
        "start_multiplier": 2.0,
        "drift": 0.08,          # multiplier units per second
        "radius": 0.42,
    }

    def validate(self, params):
        self.require(params, "radius", lambda v: v > 0, "> 0")

    def init(self, state):
        self.validate(self.params)
        self.require_oracle(POINTS - 1, "circle points")
        self.multiplier = float(self.params["start_multiplier"])
        self.generation = 0
        self.initialized = True

    def update(self, dt, state):
        self.multiplier += self.params["drift"] * dt * state.params.speed
        # Tables repeat with period 60 in the multiplier
        self.multiplier %= POINTS
        self.generation += 1

    def draw(self, state, renderer):
        cx, cy = state.center
        radius = self.params["radius"] * min(state.viewport_width, state.viewport_height)
        radius *= state.params.zoom
        emphasis = state.params.prime_emphasis
        step = 2.0 * math.pi / POINTS

        for k in range(POINTS):
            target = (k * self.multiplier) % POINTS
            x0, y0 = polar_to_cartesian(radius, k * step)
            x1, y1 = polar_to_cartesian(radius, target * step)
            lit = self.oracle.is_prime(k)
            renderer.line(cx + x0, cy + y0, cx + x1, cy + y1,
                          color_for_state(k, lit, emphasis), state.params.line_thickness)

        for k in range(POINTS):
            x, y = polar_to_cartesian(radius, k * step)
            renderer.point(cx + x, cy + y, 2.0,
                           color_for_state(mod60(k), self.oracle.is_prime(k), emphasis))
