"""
Sacks Spiral Mode

Archimedean spiral with one turn per perfect square: n sits at radius
sqrt(n), angle 2*pi*sqrt(n). Primes gather on curves. A faint polyline
through the perfect squares traces the spiral arm.
"""

import math

from .mode_base import Mode
from .palette import color_for_state, dim
from .transforms import polar_to_cartesian


TWO_PI = 2.0 * math.pi


class SacksSpiral(Mode):

    mode_id = "sacks"
    mode_label = "Sacks Spiral"
    default_params = {
        "limit": 3000,
        "spin": 0.05,
        "arm": True,
    }

    def validate(self, params):
        self.require(params, "limit", lambda v: int(v) == v and v > 1, "an integer > 1")

    def init(self, state):
        self.validate(self.params)
        limit = int(self.params["limit"])
        self.require_oracle(limit, f"limit={limit}")
        self.primes = list(self.oracle.prime_indices_in_range(2, limit))
        self.rotation = 0.0
        self.generation = 0
        self.initialized = True

    def update(self, dt, state):
        self.rotation = (self.rotation + self.params["spin"] * dt * state.params.speed) % TWO_PI
        self.generation += 1

    def _position(self, n, scale, center):
        s = math.sqrt(n)
        x, y = polar_to_cartesian(s * scale, TWO_PI * s + self.rotation)
        return center[0] + x, center[1] + y

    def draw(self, state, renderer):
        limit = int(self.params["limit"])
        center = state.center
        scale = min(state.viewport_width, state.viewport_height) / 2.0 / math.sqrt(limit)
        scale *= state.params.zoom
        emphasis = state.params.prime_emphasis

        if self.params["arm"]:
            prev = self._position(1, scale, center)
            for k in range(2, int(math.sqrt(limit)) + 1):
                cur = self._position(k * k, scale, center)
                renderer.line(prev[0], prev[1], cur[0], cur[1],
                              dim(color_for_state(k, False, 0.0), 0.3),
                              state.params.line_thickness)
                prev = cur

        for p in self.primes:
            x, y = self._position(p, scale, center)
            renderer.point(x, y, 1.5 + emphasis, color_for_state(p, True, emphasis))
