"""
Sexagesimal Dial Mode

A 60-tick dial read as a base-60 odometer. A counter advances with
time; its three lowest base-60 digits drive three hands (ones, sixties,
3600s). Ticks at prime positions are emphasised and the tick under
each hand is lit.
"""

import math

from .mode_base import Mode
from .palette import color_for_state, mod60, dim
from .transforms import polar_to_cartesian


def base60_digits(n, places=3):
    """Lowest `places` base-60 digits of n, least significant first."""
    digits = []
    for _ in range(places):
        digits.append(mod60(n))
        n //= 60
    return digits


def tick_angle(k):
    """Angle of tick k with tick 0 at twelve o'clock, clockwise."""
    return math.radians(k * 6) - math.pi / 2.0


class SexagesimalDial(Mode):

    mode_id = "dial"
    mode_label = "Sexagesimal Dial"
    default_params = {
        "rate": 12.0,           # counter units per second
        "radius": 0.42,         # fraction of the shorter side
    }

    def validate(self, params):
        self.require(params, "rate", lambda v: v >= 0, ">= 0")
        self.require(params, "radius", lambda v: v > 0, "> 0")

    def init(self, state):
        self.validate(self.params)
        self.require_oracle(59, "tick positions")
        self.counter = 0.0
        self.generation = 0
        self.initialized = True

    def update(self, dt, state):
        self.counter += self.params["rate"] * dt * state.params.speed * (1.0 + state.audio_level)
        self.generation += 1

    @property
    def digits(self):
        return base60_digits(int(self.counter))

    def draw(self, state, renderer):
        cx, cy = state.center
        radius = self.params["radius"] * min(state.viewport_width, state.viewport_height)
        radius *= state.params.zoom
        emphasis = state.params.prime_emphasis
        thick = state.params.line_thickness
        digits = self.digits

        for k in range(60):
            lit = self.oracle.is_prime(k)
            color = color_for_state(k, lit, emphasis)
            if k not in digits:
                color = dim(color, 0.6)
            inner = radius * (0.86 if k % 5 == 0 else 0.92)
            x0, y0 = polar_to_cartesian(inner, tick_angle(k))
            x1, y1 = polar_to_cartesian(radius, tick_angle(k))
            renderer.line(cx + x0, cy + y0, cx + x1, cy + y1, color, thick)

        for place, (digit, length) in enumerate(zip(digits, (0.8, 0.6, 0.4))):
            hx, hy = polar_to_cartesian(radius * length, tick_angle(digit))
            color = color_for_state(digit, self.oracle.is_prime(digit), emphasis)
            renderer.line(cx, cy, cx + hx, cy + hy, color, thick * (3 - place))
            renderer.point(cx + hx, cy + hy, thick * 2, color)

        label = ":".join(f"{d:02d}" for d in reversed(digits))
        renderer.text(cx - 30, cy + radius + 12, label, (200, 205, 215))
