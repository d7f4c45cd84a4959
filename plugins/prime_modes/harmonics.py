"""
Prime Harmonics Mode

Lissajous figure x = sin(p*s + phase), y = sin(q*s) where p and q are
consecutive primes. Every `hold` seconds the pair advances to the next
prime; after the last prime below max_prime it starts over at 2.
"""

import math

from .mode_base import Mode
from .palette import color_for_state
from .errors import PrimeNotFoundError


TWO_PI = 2.0 * math.pi


class PrimeHarmonics(Mode):

    mode_id = "harmonics"
    mode_label = "Prime Harmonics"
    default_params = {
        "max_prime": 31,
        "hold": 6.0,            # seconds per prime pair
        "phase_rate": 0.6,
        "samples": 720,
        "amplitude": 0.4,
    }

    def validate(self, params):
        self.require(params, "max_prime", lambda v: int(v) == v and v >= 3, "an integer >= 3")
        self.require(params, "hold", lambda v: v > 0, "> 0")
        self.require(params, "samples", lambda v: int(v) == v and v >= 2, "an integer >= 2")

    def init(self, state):
        self.validate(self.params)
        self.require_oracle(int(self.params["max_prime"]), "max_prime")
        self.primes = list(self.oracle.prime_indices_in_range(2, int(self.params["max_prime"])))
        self.pair_index = 0
        self.p, self.q = self._pair(0)
        self.phase = 0.0
        self.elapsed = 0.0
        self.generation = 0
        self.initialized = True

    def _pair(self, idx):
        p = self.primes[idx]
        try:
            q = self.oracle.next_prime(p)
        except PrimeNotFoundError:
            q = p
        return p, q

    def update(self, dt, state):
        k = dt * state.params.speed
        self.phase = (self.phase + self.params["phase_rate"] * k) % TWO_PI
        self.elapsed += k
        while self.elapsed >= self.params["hold"]:
            self.elapsed -= self.params["hold"]
            # The last prime's partner may exceed max_prime, so wrap one early
            self.pair_index = (self.pair_index + 1) % max(1, len(self.primes) - 1)
            self.p, self.q = self._pair(self.pair_index)
            self.generation += 1

    def curve(self, state):
        cx, cy = state.center
        amp = self.params["amplitude"] * min(state.viewport_width, state.viewport_height)
        amp *= state.params.zoom * (1.0 + 0.25 * state.audio_level)
        n = int(self.params["samples"])
        pts = []
        for i in range(n + 1):
            s = TWO_PI * i / n
            pts.append((cx + amp * math.sin(self.p * s + self.phase),
                        cy + amp * math.sin(self.q * s)))
        return pts

    def draw(self, state, renderer):
        pts = self.curve(state)
        emphasis = state.params.prime_emphasis
        thick = state.params.line_thickness
        for i in range(len(pts) - 1):
            color = color_for_state(self.p + i // 12, True, emphasis)
            renderer.line(pts[i][0], pts[i][1], pts[i + 1][0], pts[i + 1][1], color, thick)
        renderer.text(12, state.viewport_height - 24, f"{self.p}:{self.q}", (200, 205, 215))
