"""
Prime Automaton Mode - base-60 cellular automaton driven by primality

Each cell holds a state in [0, 60). One discrete step, for every cell:

    s = sum of the 8 Moore neighbors
    v' = v + 1 if s is prime else v - 1
    v' += 1 if (# neighbors whose value is prime) >= prime_neighbor_threshold
    v' = mod60(v')

Edges wrap (toroidal grid), matching np.roll. The update is
synchronous: the whole step reads the front buffer and writes the back
buffer, then the two are swapped, so no cell ever sees a neighbor's
new value within the same step.

Seeds are pure functions of (i, j): two runs with the same params
start from the same grid.
"""

import numpy as np

from .mode_base import Mode
from .palette import mod60, build_state_lut, STATES
from .transforms import grid_to_canvas


# Largest neighbor sum the oracle must cover
MAX_NEIGHBOR_SUM = 8 * (STATES - 1)


def _moore_sum(grid):
    """Sum of the 8 Moore neighbors with periodic boundaries."""
    n = np.zeros_like(grid, dtype=np.int32)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            n += np.roll(np.roll(grid, dy, axis=0), dx, axis=1)
    return n


def seed_linear(i, j, width, height):
    return mod60(i * width + j)


def seed_diagonal(i, j, width, height):
    return mod60(i * j + i + j)


def seed_rings(i, j, width, height):
    ci = (height - 1) / 2.0
    cj = (width - 1) / 2.0
    return mod60(np.rint(np.hypot(i - ci, j - cj) * 3).astype(np.int64))


SEED_PATTERNS = {
    "linear": seed_linear,
    "diagonal": seed_diagonal,
    "rings": seed_rings,
}


class PrimeAutomaton(Mode):

    mode_id = "automaton"
    mode_label = "Prime Automaton"
    default_params = {
        "width": 64,
        "height": 64,
        "steps_per_frame": 1,
        "prime_neighbor_threshold": 3,
        "seed_pattern": "linear",
    }

    def __init__(self, oracle, **params):
        super().__init__(oracle, **params)
        self._front = None
        self._back = None
        self.speed_accumulator = 0.0

    def validate(self, params):
        self.require(params, "width", lambda v: int(v) == v and v > 0, "a positive integer")
        self.require(params, "height", lambda v: int(v) == v and v > 0, "a positive integer")
        self.require(params, "steps_per_frame", lambda v: int(v) == v and v >= 1, "an integer >= 1")
        self.require(params, "prime_neighbor_threshold", lambda v: int(v) == v and v >= 0,
                     "an integer >= 0")
        self.require(params, "seed_pattern", lambda v: v in SEED_PATTERNS,
                     f"one of {sorted(SEED_PATTERNS)}")

    def init(self, state):
        self.validate(self.params)
        self.require_oracle(MAX_NEIGHBOR_SUM, "neighbor sums")

        h, w = int(self.params["height"]), int(self.params["width"])
        I, J = np.ogrid[:h, :w]
        seed = SEED_PATTERNS[self.params["seed_pattern"]]
        self._front = np.broadcast_to(seed(I, J, w, h), (h, w)).astype(np.int16)
        self._back = np.zeros_like(self._front)
        self.speed_accumulator = 0.0
        self.generation = 0
        self.initialized = True

    @property
    def grid(self):
        return self._front.copy()

    def set_grid(self, grid):
        """Replace the current grid (same shape, values in [0, 60))."""
        grid = np.asarray(grid)
        if grid.shape != self._front.shape:
            raise ValueError(f"grid shape {grid.shape} != {self._front.shape}")
        if grid.size and (grid.min() < 0 or grid.max() >= STATES):
            raise ValueError("grid values must be in [0, 60)")
        self._front[:] = grid

    def clear(self):
        self._front[:] = 0
        self.generation = 0

    def step(self):
        """One synchronous step: read front, write back, swap."""
        g = self._front.astype(np.int32)
        sums = _moore_sum(g)
        sum_prime = self.oracle.is_prime_array(sums)
        value_prime = self.oracle.is_prime_array(g).astype(np.int32)
        prime_neighbors = _moore_sum(value_prime)

        delta = np.where(sum_prime, 1, -1)
        delta += prime_neighbors >= int(self.params["prime_neighbor_threshold"])
        self._back[:] = mod60(g + delta)

        self._front, self._back = self._back, self._front
        self.generation += 1
        return self._front

    def update(self, dt, state):
        # Fractional speed: accumulate and run whole steps
        self.speed_accumulator += int(self.params["steps_per_frame"]) * state.params.speed
        while self.speed_accumulator >= 1.0:
            self.step()
            self.speed_accumulator -= 1.0

    def cell_layout(self, state):
        """(cell_size, origin) that centers the grid in the viewport."""
        h, w = self._front.shape
        fit = min(state.viewport_width / w, state.viewport_height / h)
        cell = fit * state.params.zoom
        ox = (state.viewport_width - cell * w) / 2.0
        oy = (state.viewport_height - cell * h) / 2.0
        return cell, (ox, oy)

    def draw(self, state, renderer):
        cell, origin = self.cell_layout(state)
        lut = build_state_lut(state.params.prime_emphasis)
        grid = self._front
        prime = self.oracle.is_prime_array(grid).astype(np.intp)
        colors = lut[grid.astype(np.intp), prime]
        h, w = grid.shape
        for j in range(h):
            for i in range(w):
                x, y = grid_to_canvas(i, j, cell, origin)
                renderer.fill_rect(x, y, cell, cell, tuple(int(c) for c in colors[j, i]))

    @property
    def stats(self):
        g = self._front
        return {
            "generation": self.generation,
            "mean": float(g.mean()),
            "prime_pct": float(self.oracle.is_prime_array(g).sum()) / g.size * 100,
        }

    @classmethod
    def get_slider_defs(cls):
        return [
            {"key": "steps_per_frame", "label": "Steps/frame", "section": "AUTOMATON",
             "min": 1, "max": 8, "default": 1, "fmt": ".0f", "step": 1},
            {"key": "prime_neighbor_threshold", "label": "Prime neighbors", "section": "AUTOMATON",
             "min": 0, "max": 8, "default": 3, "fmt": ".0f", "step": 1},
        ]
